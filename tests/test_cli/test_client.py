"""Tests for the control API client."""

from __future__ import annotations

import httpx
import pytest

from visual_inspector.client import InspectorClient, InspectorClientError


def make_client(handler) -> InspectorClient:
    return InspectorClient("http://inspector.test", transport=httpx.MockTransport(handler))


class TestInspectorClient:
    def test_health(self):
        client = make_client(lambda request: httpx.Response(200, json={"status": "ok"}))
        assert client.health() == {"status": "ok"}

    def test_inspect_posts_file_path(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.read()
            return httpx.Response(200, json={"file": "a.html", "url": "u", "watch": True})

        make_client(handler).inspect("/tmp/a.html")

        assert seen["path"] == "/api/inspect"
        assert b'"file_path"' in seen["body"]

    def test_selection_wait_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"selection": {"selector": "h1"}})

        element = make_client(handler).selection(wait=True, timeout_ms=1500)

        assert element == {"selector": "h1"}
        assert seen["params"] == {"wait": "true", "timeout": "1500"}

    def test_selection_none(self):
        client = make_client(lambda request: httpx.Response(200, json={"selection": None}))
        assert client.selection() is None

    def test_error_body_becomes_exception(self):
        client = make_client(lambda request: httpx.Response(409, json={"error": "No viewer"}))
        with pytest.raises(InspectorClientError) as excinfo:
            client.highlight("h1")
        assert str(excinfo.value) == "No viewer"
        assert excinfo.value.status_code == 409

    def test_non_json_error(self):
        client = make_client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(InspectorClientError) as excinfo:
            client.styles("h1")
        assert excinfo.value.status_code == 500

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(InspectorClientError) as excinfo:
            make_client(handler).health()
        assert "Cannot reach inspector" in str(excinfo.value)
        assert excinfo.value.status_code is None
