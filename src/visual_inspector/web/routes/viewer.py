from __future__ import annotations

from pathlib import Path

from flask import Blueprint, abort, current_app, jsonify, render_template, send_from_directory

viewer_bp = Blueprint("viewer", __name__)


@viewer_bp.route("/")
@viewer_bp.route("/index.html")
def index():
    """The viewer page; it connects back to the view channel."""
    return render_template("viewer.html", ws_port=current_app.config["WS_PORT"])


@viewer_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@viewer_bp.route("/doc/<path:filename>")
def document_asset(filename: str):
    """Serve files beside the current document so relative links resolve."""
    document = current_app.extensions["coordinator"].document
    if document is None:
        abort(404)
    return send_from_directory(Path(document.path).parent, filename)
