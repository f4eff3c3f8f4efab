"""Session State Coordinator: the single owner of live inspection state.

Holds the loaded document, the last selected element, the table of callers
waiting for a selection and the roster of connected views. Inbound events
from views and operations from the controller are serialized by one
re-entrant lock, so each runs to completion (file re-read and broadcast
included) before the next starts.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path
from typing import Any

from visual_inspector.editor import ApplyResult, apply_css_change, read_source
from visual_inspector.errors import (
    DocumentNotFound,
    DocumentUnreadable,
    InvalidEnvelope,
    NoDocumentLoaded,
    SelectionTimeout,
    SessionClosed,
)
from visual_inspector.session.events import Envelope, InboundType, OutboundType
from visual_inspector.session.model import (
    Document,
    PendingWaiter,
    SelectedElement,
    css_change_from_payload,
)
from visual_inspector.session.views import View
from visual_inspector.stylesheet import CssChange

log = logging.getLogger(__name__)

DEFAULT_SELECTION_TIMEOUT = 30.0

Editor = Callable[[str, CssChange], ApplyResult]


class SessionCoordinator:
    """Live state for one inspection session.

    Constructed at service start and closed at shutdown; handlers receive
    it by reference rather than reaching for module state.
    """

    def __init__(
        self,
        *,
        selection_timeout: float = DEFAULT_SELECTION_TIMEOUT,
        editor: Editor = apply_css_change,
    ) -> None:
        self.selection_timeout = selection_timeout
        self._editor = editor
        self._lock = threading.RLock()
        self._document: Document | None = None
        self._selection: SelectedElement | None = None
        self._waiters: dict[int, PendingWaiter] = {}
        self._waiter_ids = itertools.count(1)
        self._views: set[View] = set()
        self._closed = False
        self._handlers: dict[str, Callable[[Any, View | None], None]] = {
            InboundType.READY: self._on_ready,
            InboundType.LOAD_HTML: self._on_load_html,
            InboundType.ELEMENT_SELECTED: self._on_element_selected,
            InboundType.APPLY_CSS: self._on_apply_css,
            InboundType.PING: self._on_ping,
        }

    # --- View roster -------------------------------------------------------

    def add_view(self, view: View) -> None:
        with self._lock:
            self._views.add(view)
        log.debug("View connected (%d total)", self.view_count)

    def remove_view(self, view: View) -> None:
        with self._lock:
            self._views.discard(view)

    @property
    def view_count(self) -> int:
        with self._lock:
            return len(self._views)

    def has_views(self) -> bool:
        return self.view_count > 0

    # --- State reads -------------------------------------------------------

    @property
    def document(self) -> Document | None:
        with self._lock:
            return self._document

    def get_selected_element(self) -> SelectedElement | None:
        with self._lock:
            return self._selection

    @property
    def pending_waiters(self) -> int:
        with self._lock:
            return len(self._waiters)

    # --- Inbound events ----------------------------------------------------

    def dispatch(self, envelope: Envelope, sender: View | None = None) -> None:
        """Handle one inbound event to completion.

        Unknown types and malformed payloads are logged and ignored.
        """
        handler = self._handlers.get(envelope.type)
        if handler is None:
            log.warning("Ignoring unknown message type %r", envelope.type)
            return
        with self._lock:
            try:
                handler(envelope.payload, sender)
            except InvalidEnvelope as exc:
                log.warning("Ignoring malformed %r message: %s", envelope.type, exc)

    def _on_ready(self, payload: Any, sender: View | None) -> None:
        if self._document is not None and sender is not None:
            self._send(sender, Envelope(OutboundType.LOAD_HTML, self._document.to_payload()))

    def _on_load_html(self, payload: Any, sender: View | None) -> None:
        self._set_document(Document.from_payload(payload))

    def _on_element_selected(self, payload: Any, sender: View | None) -> None:
        self._select(SelectedElement.from_payload(payload))

    def _on_apply_css(self, payload: Any, sender: View | None) -> None:
        change = css_change_from_payload(payload)
        try:
            result = self.apply_change(change)
        except NoDocumentLoaded:
            log.warning("Ignoring apply-css for %r: no document loaded", change.selector)
            return
        if not result.success:
            log.warning("apply-css failed: %s", result.message)

    def _on_ping(self, payload: Any, sender: View | None) -> None:
        if sender is not None:
            self._send(sender, Envelope(OutboundType.PONG))

    # --- Controller operations ---------------------------------------------

    def load_document(self, path: str | Path) -> Document:
        """Read *path* into the current document and broadcast it.

        Raises DocumentNotFound or DocumentUnreadable; state is untouched then.
        """
        resolved = Path(path).resolve()
        if not resolved.is_file():
            raise DocumentNotFound(str(path))
        with self._lock:
            document = Document(path=str(resolved), content=read_source(resolved))
            self._set_document(document)
        return document

    def clear_document(self) -> None:
        with self._lock:
            self._document = None

    def apply_change(self, change: CssChange) -> ApplyResult:
        """Apply *change* to the current document's sources.

        On success the document is re-read from disk and broadcast, followed
        by a ``css-applied`` acknowledgement. Raises NoDocumentLoaded when
        there is nothing to edit.
        """
        with self._lock:
            document = self._document
            if document is None:
                raise NoDocumentLoaded()
            try:
                result = self._editor(document.path, change)
                if not result.success:
                    return result
                refreshed = Document(path=document.path, content=read_source(document.path))
            except (DocumentNotFound, DocumentUnreadable) as exc:
                log.warning("Could not apply %s to %s: %s", change.property, document.path, exc)
                return ApplyResult(success=False, message=str(exc))
            self._set_document(refreshed)
            self._broadcast(
                Envelope(
                    OutboundType.CSS_APPLIED,
                    {"selector": change.selector, "property": change.property, "value": change.value},
                )
            )
            return result

    def highlight(self, selector: str) -> None:
        self._broadcast(Envelope(OutboundType.HIGHLIGHT_ELEMENT, {"selector": selector}))

    def notify_file_changed(self, path: str, content: str) -> None:
        """Passive notification from the file watcher; the document is not reloaded."""
        self._broadcast(Envelope(OutboundType.FILE_CHANGED, {"filePath": path, "content": content}))

    # --- Selection waiting -------------------------------------------------

    def wait_for_selection(self, timeout: float | None = None) -> SelectedElement:
        """Return the current selection, or block until the next one arrives.

        Raises SelectionTimeout once *timeout* seconds pass without a
        selection, and SessionClosed if the session shuts down first.
        """
        if timeout is None:
            timeout = self.selection_timeout
        with self._lock:
            if self._closed:
                raise SessionClosed("Session is closed")
            if self._selection is not None:
                return self._selection
            waiter = self.register_waiter(timeout)
        return self._await(waiter)

    def register_waiter(self, timeout: float) -> PendingWaiter:
        """Add a waiter to the table without blocking on it."""
        waiter = PendingWaiter(
            id=next(self._waiter_ids),
            future=Future(),
            deadline=time.monotonic() + timeout,
            timeout=timeout,
        )
        with self._lock:
            self._waiters[waiter.id] = waiter
        return waiter

    def _await(self, waiter: PendingWaiter) -> SelectedElement:
        while True:
            remaining = waiter.deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                return waiter.future.result(timeout=remaining)
            except FutureTimeout:
                continue
        with self._lock:
            expired = self._waiters.pop(waiter.id, None) is not None
        if not expired:
            # resolved (or swept) between the deadline and taking the lock
            return waiter.future.result()
        raise SelectionTimeout(waiter.timeout)

    def sweep_expired(self, now: float | None = None) -> int:
        """Fail and drop every waiter past its deadline. Returns how many."""
        now = time.monotonic() if now is None else now
        with self._lock:
            expired = [w for w in self._waiters.values() if w.deadline <= now]
            for waiter in expired:
                del self._waiters[waiter.id]
        for waiter in expired:
            waiter.future.set_exception(SelectionTimeout(waiter.timeout))
        return len(expired)

    # --- Internals ---------------------------------------------------------

    def _set_document(self, document: Document) -> None:
        self._document = document
        self._broadcast(Envelope(OutboundType.LOAD_HTML, document.to_payload()))

    def _select(self, element: SelectedElement) -> None:
        self._selection = element
        waiters = list(self._waiters.values())
        self._waiters.clear()
        for waiter in waiters:
            waiter.future.set_result(element)
        if waiters:
            log.debug("Selection %r resolved %d waiter(s)", element.selector, len(waiters))

    def _send(self, view: View, envelope: Envelope) -> bool:
        try:
            view.send(envelope)
        except ConnectionError as exc:
            log.info("Dropping disconnected view: %s", exc)
            self.remove_view(view)
            return False
        return True

    def _broadcast(self, envelope: Envelope) -> None:
        with self._lock:
            views = list(self._views)
        for view in views:
            if view.is_open:
                self._send(view, envelope)

    # --- Lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Tear down: fail pending waiters and forget every view."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            waiters = list(self._waiters.values())
            self._waiters.clear()
            self._views.clear()
        for waiter in waiters:
            waiter.future.set_exception(SessionClosed("Session closed while waiting for a selection"))

    @property
    def closed(self) -> bool:
        return self._closed
