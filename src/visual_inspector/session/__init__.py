"""Session state: coordinator, data model and view envelopes."""

from visual_inspector.session.coordinator import SessionCoordinator
from visual_inspector.session.events import Envelope, InboundType, OutboundType
from visual_inspector.session.model import Document, PendingWaiter, SelectedElement
from visual_inspector.session.views import View

__all__ = [
    "SessionCoordinator",
    "Envelope",
    "InboundType",
    "OutboundType",
    "Document",
    "SelectedElement",
    "PendingWaiter",
    "View",
]
