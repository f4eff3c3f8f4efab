from __future__ import annotations

import logging
import threading
import webbrowser

from werkzeug.serving import BaseWSGIServer, make_server

from visual_inspector.config import InspectorConfig
from visual_inspector.server.channel import ViewChannel
from visual_inspector.server.watcher import FileWatcher
from visual_inspector.session import SessionCoordinator
from visual_inspector.web.app import create_app

log = logging.getLogger(__name__)


class Inspector:
    """Wires the session coordinator to its transports and owns their lifecycle."""

    def __init__(self, config: InspectorConfig | None = None) -> None:
        self.config = config or InspectorConfig()
        self.coordinator = SessionCoordinator(selection_timeout=self.config.selection_timeout)
        self.watcher = FileWatcher(
            self.coordinator.notify_file_changed,
            interval=self.config.watch_interval,
            debounce=self.config.watch_debounce,
        )
        self.channel = ViewChannel(self.coordinator, self.config.host, self.config.ws_port)
        self._http: BaseWSGIServer | None = None
        self._http_thread: threading.Thread | None = None
        self._stopped = threading.Event()

    @property
    def http_port(self) -> int | None:
        return self._http.server_port if self._http is not None else None

    @property
    def ws_port(self) -> int | None:
        return self.channel.port

    def start(self) -> tuple[int, int]:
        """Start the view channel, HTTP server and watcher. Returns (http, ws) ports."""
        ws_port = self.channel.start()
        app = create_app(
            self.coordinator,
            self.config,
            watcher=self.watcher if self.config.watch else None,
            ws_port=ws_port,
            open_browser=webbrowser.open if self.config.open_browser else None,
        )
        self._http = make_server(self.config.host, self.config.http_port, app, threaded=True)
        self._http_thread = threading.Thread(
            target=self._http.serve_forever, name="control-channel", daemon=True
        )
        self._http_thread.start()
        if self.config.watch:
            self.watcher.start()
        log.info(
            "Visual inspector at http://%s:%s (views on port %s)",
            self.config.host,
            self.http_port,
            ws_port,
        )
        return self.http_port, ws_port

    def serve_forever(self, sweep_interval: float = 1.0) -> None:
        """Block until stop() is called, sweeping expired selection waiters."""
        while not self._stopped.wait(sweep_interval):
            self.coordinator.sweep_expired()

    def stop(self) -> None:
        if self._stopped.is_set():
            return
        self._stopped.set()
        self.watcher.stop()
        self.channel.stop()
        if self._http is not None:
            self._http.shutdown()
            self._http.server_close()
        if self._http_thread is not None:
            self._http_thread.join(timeout=5)
        self.coordinator.close()
        log.info("Visual inspector stopped")

    def __enter__(self) -> Inspector:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
