"""HTTP client for the control API, wrapping :mod:`httpx`."""
from __future__ import annotations

from typing import Any

import httpx

from visual_inspector.errors import InspectorError

DEFAULT_SERVER = "http://127.0.0.1:8080"


class InspectorClientError(InspectorError):
    """The control API refused a request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code


class InspectorClient:
    def __init__(
        self,
        base_url: str = DEFAULT_SERVER,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise InspectorClientError(f"Request to {path} timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise InspectorClientError(
                f"Cannot reach inspector at {self._client.base_url}: {exc}", cause=exc
            ) from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 300:
            message = body.get("error") if isinstance(body, dict) else None
            raise InspectorClientError(
                message or f"HTTP {resp.status_code} from {path}",
                status_code=resp.status_code,
            )
        return body

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def inspect(self, file_path: str, watch: bool = True) -> dict[str, Any]:
        return self._request("POST", "/api/inspect", json={"file_path": file_path, "watch": watch})

    def selection(self, wait: bool = False, timeout_ms: int = 30000) -> dict[str, Any] | None:
        params: dict[str, Any] = {"wait": "true" if wait else "false", "timeout": timeout_ms}
        # the server holds the request open for up to timeout_ms
        read_timeout = timeout_ms / 1000 + 5 if wait else None
        kwargs: dict[str, Any] = {"params": params}
        if read_timeout is not None:
            kwargs["timeout"] = read_timeout
        return self._request("GET", "/api/selection", **kwargs).get("selection")

    def highlight(self, selector: str) -> dict[str, Any]:
        return self._request("POST", "/api/highlight", json={"selector": selector})

    def apply_css(self, selector: str, property: str, value: str) -> dict[str, Any]:
        return self._request(
            "POST",
            "/api/css",
            json={"selector": selector, "property": property, "value": value},
        )

    def styles(self, selector: str) -> dict[str, str]:
        return self._request("GET", "/api/styles", params={"selector": selector})["styles"]

    def close_inspector(self) -> dict[str, Any]:
        return self._request("POST", "/api/close")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> InspectorClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
