"""View channel: the bidirectional websocket link to rendering clients.

Runs a threaded ``websockets`` server. Every connection becomes a View in
the coordinator's roster for as long as it stays open, and every text frame
it sends is decoded into an Envelope and dispatched.
"""

from __future__ import annotations

import logging
import threading

from websockets.exceptions import ConnectionClosed, ConnectionClosedError
from websockets.protocol import State
from websockets.sync.server import Server, ServerConnection, serve

from visual_inspector.errors import InspectorError, InvalidEnvelope
from visual_inspector.session import Envelope, SessionCoordinator

log = logging.getLogger(__name__)


class WebSocketView:
    """Adapts a websocket connection to the View protocol."""

    def __init__(self, connection: ServerConnection) -> None:
        self._connection = connection

    @property
    def is_open(self) -> bool:
        return self._connection.state is State.OPEN

    def send(self, envelope: Envelope) -> None:
        try:
            self._connection.send(envelope.to_json())
        except ConnectionClosed as exc:
            raise ConnectionError(f"View connection closed: {exc}") from exc

    def __repr__(self) -> str:
        return f"WebSocketView({self._connection.remote_address!r})"


class ViewChannel:
    def __init__(self, coordinator: SessionCoordinator, host: str = "127.0.0.1", port: int = 0) -> None:
        self._coordinator = coordinator
        self._host = host
        self._requested_port = port
        self._server: Server | None = None
        self._thread: threading.Thread | None = None
        self.port: int | None = None

    def start(self) -> int:
        """Bind and serve on a background thread. Returns the bound port."""
        if self._server is not None:
            raise RuntimeError("View channel already started")
        self._server = serve(self._handle, self._host, self._requested_port)
        self.port = self._server.socket.getsockname()[1]
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="view-channel", daemon=True
        )
        self._thread.start()
        log.info("View channel listening on ws://%s:%s", self._host, self.port)
        return self.port

    def _handle(self, connection: ServerConnection) -> None:
        view = WebSocketView(connection)
        self._coordinator.add_view(view)
        try:
            for message in connection:
                try:
                    envelope = Envelope.from_json(message)
                except InvalidEnvelope as exc:
                    log.warning("Ignoring message from %r: %s", view, exc)
                    continue
                try:
                    self._coordinator.dispatch(envelope, view)
                except InspectorError as exc:
                    log.error("Failed to handle %r from %r: %s", envelope.type, view, exc)
        except ConnectionClosedError as exc:
            log.info("View %r dropped: %s", view, exc)
        finally:
            self._coordinator.remove_view(view)

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
