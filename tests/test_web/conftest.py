from __future__ import annotations

import pytest

from visual_inspector.config import InspectorConfig
from visual_inspector.server import FileWatcher
from visual_inspector.session import SessionCoordinator
from visual_inspector.web import create_app


class FakeView:
    def __init__(self) -> None:
        self.is_open = True
        self.sent = []

    def send(self, envelope) -> None:
        self.sent.append(envelope)


@pytest.fixture
def coordinator():
    coord = SessionCoordinator(selection_timeout=1.0)
    yield coord
    coord.close()


@pytest.fixture
def watcher():
    w = FileWatcher(lambda path, content: None)
    yield w
    w.stop()


@pytest.fixture
def opened():
    return []


@pytest.fixture
def app(coordinator, watcher, opened):
    application = create_app(
        coordinator,
        InspectorConfig(http_port=0, open_browser=False),
        watcher=watcher,
        ws_port=8765,
        open_browser=opened.append,
    )
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def view(coordinator):
    v = FakeView()
    coordinator.add_view(v)
    return v


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(
        '<html><head><link rel="stylesheet" href="site.css"></head><body><h1>Hi</h1></body></html>',
        encoding="utf-8",
    )
    (tmp_path / "site.css").write_text("h1 {\n  color: red;\n}\n", encoding="utf-8")
    return path
