"""Control channel: request/response JSON API used by the controller."""

from __future__ import annotations

from pathlib import Path

from flask import Blueprint, current_app, jsonify, request

from visual_inspector.editor import get_styles_for_selector
from visual_inspector.errors import (
    DocumentNotFound,
    DocumentUnreadable,
    NoDocumentLoaded,
    SelectionTimeout,
)
from visual_inspector.stylesheet import CssChange

api_bp = Blueprint("api", __name__)

NO_VIEWER = "No viewer connected. Inspect an HTML file first."


@api_bp.after_request
def add_cors_headers(response):
    """Allow cross-origin requests to the API."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response


def _coordinator():
    return current_app.extensions["coordinator"]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


@api_bp.route("/inspect", methods=["POST"])
def inspect_document():
    """Load an HTML file into the session and start watching it."""
    data = _json_body()
    file_path = data.get("file_path")
    if not isinstance(file_path, str) or not file_path:
        return _error("file_path required", 400)
    watch = bool(data.get("watch", True))

    try:
        document = _coordinator().load_document(file_path)
    except DocumentNotFound as exc:
        return _error(str(exc), 404)
    except DocumentUnreadable as exc:
        return _error(str(exc), 422, path=exc.path)

    watcher = current_app.extensions["watcher"]
    if watch and watcher is not None:
        watcher.watch(document.path)

    url = request.host_url.rstrip("/")
    opener = current_app.extensions["open_browser"]
    if opener is not None:
        opener(url)

    return jsonify({
        "file": Path(document.path).name,
        "path": document.path,
        "url": url,
        "watch": watch and watcher is not None,
    })


@api_bp.route("/selection")
def selection():
    """Current selection, optionally waiting for the user to click one."""
    coordinator = _coordinator()
    if not coordinator.has_views():
        return _error(NO_VIEWER, 409)

    wait = request.args.get("wait", "false").lower() in ("1", "true", "yes")
    timeout_ms = request.args.get("timeout", type=int)
    element = coordinator.get_selected_element()
    if element is None and wait:
        timeout = timeout_ms / 1000 if timeout_ms is not None else None
        try:
            element = coordinator.wait_for_selection(timeout)
        except SelectionTimeout as exc:
            return _error(str(exc), 408, timeout=exc.timeout)

    if element is None:
        return jsonify({
            "selection": None,
            "message": "No element selected. Click an element in the viewer.",
        })
    return jsonify({"selection": element.to_payload()})


@api_bp.route("/highlight", methods=["POST"])
def highlight():
    selector = _json_body().get("selector")
    if not isinstance(selector, str) or not selector:
        return _error("selector required", 400)
    coordinator = _coordinator()
    if not coordinator.has_views():
        return _error(NO_VIEWER, 409)
    coordinator.highlight(selector)
    return jsonify({"highlighted": selector})


@api_bp.route("/css", methods=["POST"])
def apply_css():
    """Apply one declaration to the current document's sources."""
    data = _json_body()
    fields = {}
    for key in ("selector", "property", "value"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            return _error(f"{key} required", 400)
        fields[key] = value
    change = CssChange(**fields)

    coordinator = _coordinator()
    try:
        result = coordinator.apply_change(change)
    except NoDocumentLoaded as exc:
        return _error(str(exc), 409)

    body = result.to_dict()
    if not result.success:
        document = coordinator.document
        missing = document is None or not Path(document.path).is_file()
        return jsonify(body), 404 if missing else 422
    body["rule"] = f"{change.selector} {{ {change.property}: {change.value}; }}"
    return jsonify(body)


@api_bp.route("/styles")
def styles():
    """Cascade of declarations for a selector in the current document."""
    selector = request.args.get("selector", "")
    if not selector:
        return _error("selector required", 400)
    document = _coordinator().document
    if document is None:
        return _error(str(NoDocumentLoaded()), 409)
    try:
        found = get_styles_for_selector(document.path, selector)
    except DocumentUnreadable as exc:
        return _error(str(exc), 422, path=exc.path)
    return jsonify({"selector": selector, "styles": found})


@api_bp.route("/close", methods=["POST"])
def close():
    """Stop watching the current document and unload it."""
    coordinator = _coordinator()
    document = coordinator.document
    watcher = current_app.extensions["watcher"]
    if document is not None and watcher is not None:
        watcher.unwatch(document.path)
    coordinator.clear_document()
    return jsonify({"closed": document is not None})
