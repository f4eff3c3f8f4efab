"""Session data model: the loaded document, the selection and waiter handles."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from visual_inspector.errors import InvalidEnvelope
from visual_inspector.stylesheet import CssChange


def _require_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise InvalidEnvelope(f"Expected string field {key!r} in payload")
    return value


def _require_mapping(payload: Any, kind: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidEnvelope(f"{kind} payload must be an object, got {type(payload).__name__}")
    return payload


@dataclass(frozen=True)
class Document:
    """A snapshot of an HTML file: absolute path plus its full text."""

    path: str
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"filePath": self.path, "content": self.content}

    @classmethod
    def from_payload(cls, payload: Any) -> Document:
        data = _require_mapping(payload, "load-html")
        return cls(path=_require_str(data, "filePath"), content=_require_str(data, "content"))


@dataclass(frozen=True)
class SelectedElement:
    """The element a user last clicked in a view."""

    selector: str
    tag: str
    source_line: int
    styles: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # read-only view over a private copy
        object.__setattr__(self, "styles", MappingProxyType(dict(self.styles)))

    def to_payload(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "tag": self.tag,
            "line": self.source_line,
            "styles": dict(self.styles),
        }

    @classmethod
    def from_payload(cls, payload: Any) -> SelectedElement:
        data = _require_mapping(payload, "element-selected")
        line = data.get("line", 0)
        if isinstance(line, bool) or not isinstance(line, int):
            raise InvalidEnvelope("Expected integer field 'line' in payload")
        styles = data.get("styles") or {}
        if not isinstance(styles, dict):
            raise InvalidEnvelope("Expected object field 'styles' in payload")
        return cls(
            selector=_require_str(data, "selector"),
            tag=str(data.get("tag") or ""),
            source_line=line,
            styles={str(k): str(v) for k, v in styles.items()},
        )


def css_change_from_payload(payload: Any) -> CssChange:
    data = _require_mapping(payload, "apply-css")
    return CssChange(
        selector=_require_str(data, "selector"),
        property=_require_str(data, "property"),
        value=_require_str(data, "value"),
    )


@dataclass(frozen=True)
class PendingWaiter:
    """One caller waiting for the next selection."""

    id: int
    future: Future = field(compare=False)
    deadline: float  # time.monotonic() value
    timeout: float
