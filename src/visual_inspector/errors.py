"""Error hierarchy for the visual inspector."""
from __future__ import annotations


class InspectorError(Exception):
    """Base error for all visual_inspector errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class DocumentNotFound(InspectorError, FileNotFoundError):
    """The target document path does not resolve to an existing file."""

    def __init__(self, path: str, **kwargs) -> None:
        super().__init__(f"File not found: {path}", **kwargs)
        self.path = path


class CssParseError(InspectorError):
    """Structured CSS parsing failed.

    Raised by the stylesheet parser and absorbed by the mutation engine,
    which falls back to the text patcher instead of surfacing it.
    """

    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ) -> None:
        self.line = line
        self.column = column
        super().__init__(message)


class SelectionTimeout(InspectorError):
    """No element selection arrived before the waiter's deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:g}s waiting for an element selection")
        self.timeout = timeout


class SessionClosed(InspectorError):
    """The session was torn down while a caller was waiting on it."""


class NoDocumentLoaded(InspectorError):
    """An operation needs a loaded document but none is loaded."""

    def __init__(self, message: str = "No document loaded. Inspect an HTML file first.") -> None:
        super().__init__(message)


class InvalidEnvelope(InspectorError):
    """An inbound message could not be decoded into an event envelope."""


class DocumentUnreadable(InspectorError):
    """A document or stylesheet exists but could not be read, decoded or written."""

    def __init__(self, path: str, reason: str, **kwargs) -> None:
        super().__init__(f"Cannot access {path}: {reason}", **kwargs)
        self.path = path
