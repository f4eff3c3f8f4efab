"""Message envelopes exchanged with connected views."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from visual_inspector.errors import InvalidEnvelope


class InboundType(StrEnum):
    READY = "ready"
    LOAD_HTML = "load-html"
    ELEMENT_SELECTED = "element-selected"
    APPLY_CSS = "apply-css"
    PING = "ping"


class OutboundType(StrEnum):
    LOAD_HTML = "load-html"
    FILE_CHANGED = "file-changed"
    HIGHLIGHT_ELEMENT = "highlight-element"
    CSS_APPLIED = "css-applied"
    PONG = "pong"


@dataclass(frozen=True)
class Envelope:
    type: str
    payload: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": str(self.type)}
        if self.payload is not None:
            data["payload"] = self.payload
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str | bytes) -> Envelope:
        """Decode a JSON message. Raises InvalidEnvelope when it is not one."""
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidEnvelope(f"Message is not valid JSON: {exc}", cause=exc) from exc
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            raise InvalidEnvelope("Message must be an object with a string 'type'")
        return cls(type=data["type"], payload=data.get("payload"))
