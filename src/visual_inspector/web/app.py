from __future__ import annotations

from collections.abc import Callable

from flask import Flask

from visual_inspector.config import InspectorConfig
from visual_inspector.server.watcher import FileWatcher
from visual_inspector.session import SessionCoordinator


def create_app(
    coordinator: SessionCoordinator | None = None,
    config: InspectorConfig | None = None,
    *,
    watcher: FileWatcher | None = None,
    ws_port: int = 0,
    open_browser: Callable[[str], object] | None = None,
) -> Flask:
    """Create the Flask app serving the viewer page and the control API."""
    app = Flask(__name__)
    config = config or InspectorConfig()
    app.config["WS_PORT"] = ws_port

    # Shared objects for the routes
    app.extensions["inspector_config"] = config
    app.extensions["coordinator"] = coordinator or SessionCoordinator(
        selection_timeout=config.selection_timeout
    )
    app.extensions["watcher"] = watcher
    app.extensions["open_browser"] = open_browser

    from visual_inspector.web.routes.api import api_bp
    from visual_inspector.web.routes.viewer import viewer_bp

    app.register_blueprint(viewer_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    return app
