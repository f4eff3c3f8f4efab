"""Tests for the visual-inspector CLI."""

from __future__ import annotations

import json
import os

import httpx
import pytest
from click.testing import CliRunner

from visual_inspector.cli import main as cli_main
from visual_inspector.cli.main import cli
from visual_inspector.client import InspectorClient


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def api(monkeypatch):
    """Route CLI requests to a handler table keyed by (method, path)."""
    routes = {}
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, body = routes[(request.method, request.url.path)]
        return httpx.Response(status, json=body)

    monkeypatch.setattr(
        cli_main,
        "InspectorClient",
        lambda base_url: InspectorClient(base_url, transport=httpx.MockTransport(handler)),
    )
    routes["requests"] = requests
    return routes


class TestHelp:
    def test_group_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("serve", "inspect", "selection", "highlight", "apply", "styles", "close"):
            assert name in result.output

    def test_serve_help(self, runner):
        result = runner.invoke(cli, ["serve", "--help"])
        assert result.exit_code == 0
        assert "--ws-port" in result.output
        assert "--selection-timeout" in result.output


class TestCommands:
    def test_inspect(self, runner, api, tmp_path):
        page = tmp_path / "page.html"
        page.write_text("<p>", encoding="utf-8")
        api[("POST", "/api/inspect")] = (
            200,
            {"file": "page.html", "path": str(page), "url": "http://127.0.0.1:8080", "watch": True},
        )

        result = runner.invoke(cli, ["inspect", str(page)])

        assert result.exit_code == 0, result.output
        assert "Viewer opened for: page.html" in result.output
        assert "Hot reload: on" in result.output

    def test_selection_none(self, runner, api):
        api[("GET", "/api/selection")] = (200, {"selection": None})
        result = runner.invoke(cli, ["selection"])
        assert "No element selected" in result.output

    def test_selection_prints_json(self, runner, api):
        element = {"selector": "h1", "tag": "h1", "line": 2, "styles": {}}
        api[("GET", "/api/selection")] = (200, {"selection": element})

        result = runner.invoke(cli, ["selection", "--wait", "--timeout", "100"])

        assert json.loads(result.output) == element
        assert api["requests"][0].url.params["wait"] == "true"

    def test_apply(self, runner, api):
        api[("POST", "/api/css")] = (
            200,
            {"success": True, "message": "CSS applied in site.css", "rule": "h1 { color: blue; }"},
        )
        result = runner.invoke(cli, ["apply", "h1", "color", "blue"])
        assert result.exit_code == 0
        assert "CSS applied in site.css" in result.output

    def test_styles(self, runner, api):
        api[("GET", "/api/styles")] = (200, {"selector": "h1", "styles": {"color": "red"}})
        result = runner.invoke(cli, ["styles", "h1"])
        assert json.loads(result.output) == {"color": "red"}

    def test_highlight(self, runner, api):
        api[("POST", "/api/highlight")] = (200, {"highlighted": ".nav"})
        result = runner.invoke(cli, ["highlight", ".nav"])
        assert "Highlighted: .nav" in result.output

    def test_close(self, runner, api):
        api[("POST", "/api/close")] = (200, {"closed": True})
        result = runner.invoke(cli, ["close"])
        assert result.exit_code == 0

    def test_api_error_exits_nonzero(self, runner, api):
        api[("POST", "/api/highlight")] = (409, {"error": "No viewer connected."})
        result = runner.invoke(cli, ["highlight", "h1"])
        assert result.exit_code == 1
        assert "No viewer connected." in result.output

    def test_server_option(self, runner, api):
        api[("POST", "/api/close")] = (200, {"closed": False})
        runner.invoke(cli, ["--server", "http://example.test:9000", "close"])
        assert api["requests"][0].url.host == "example.test"


class TestInspectPath:
    def test_relative_path_is_sent_absolute(self, runner, api, tmp_path, monkeypatch):
        (tmp_path / "p.html").write_text("<p>", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        api[("POST", "/api/inspect")] = (
            200,
            {"file": "p.html", "path": "", "url": "http://127.0.0.1:8080", "watch": True},
        )

        result = runner.invoke(cli, ["inspect", "p.html"])

        assert result.exit_code == 0, result.output
        sent = json.loads(api["requests"][0].read())
        assert os.path.isabs(sent["file_path"])
        assert sent["file_path"] == str((tmp_path / "p.html").resolve())
