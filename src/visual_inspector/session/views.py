"""View protocol: a connected rendering client."""

from __future__ import annotations

from typing import Protocol

from visual_inspector.session.events import Envelope


class View(Protocol):
    """Anything the coordinator can push envelopes to.

    ``send`` raises ConnectionError when the underlying transport is gone.
    """

    @property
    def is_open(self) -> bool: ...

    def send(self, envelope: Envelope) -> None: ...
