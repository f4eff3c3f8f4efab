from __future__ import annotations

import pytest

from visual_inspector.session import SessionCoordinator


class RecordingView:
    """In-memory view that keeps every envelope sent to it."""

    def __init__(self, is_open: bool = True) -> None:
        self.is_open = is_open
        self.sent = []

    def send(self, envelope) -> None:
        self.sent.append(envelope)

    @property
    def types(self) -> list[str]:
        return [str(e.type) for e in self.sent]


class DisconnectedView:
    is_open = True

    def send(self, envelope) -> None:
        raise ConnectionError("gone")


@pytest.fixture
def coordinator():
    coord = SessionCoordinator(selection_timeout=2.0)
    yield coord
    coord.close()


@pytest.fixture
def view(coordinator):
    v = RecordingView()
    coordinator.add_view(v)
    return v


@pytest.fixture
def make_view():
    return RecordingView


@pytest.fixture
def broken_view():
    return DisconnectedView()


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "index.html"
    path.write_text(
        "<html><head><style>h1 { color: red; }</style></head><body><h1>Hi</h1></body></html>",
        encoding="utf-8",
    )
    return path
