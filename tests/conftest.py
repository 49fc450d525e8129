"""Shared fixtures: an offline stand-in for ``requests.get`` and ``requests.head``."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests


class FakeResponse:
    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        headers: Dict[str, str] | None = None,
        json_error: bool = False,
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {"Content-Type": "application/json"}
        self._json_error = json_error

    def json(self) -> Any:
        if self._json_error:
            raise ValueError("body is not JSON")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class HttpStub:
    """Routes requests by URL suffix; unrouted URLs raise a connection error."""

    def __init__(self) -> None:
        self.routes: Dict[str, object] = {}
        self.calls: List[Dict[str, Any]] = []

    def json(self, suffix: str, payload: Any, status_code: int = 200) -> None:
        self.routes[suffix] = FakeResponse(payload, status_code=status_code)

    def not_json(self, suffix: str) -> None:
        self.routes[suffix] = FakeResponse(json_error=True)

    def fail(self, suffix: str, error: Exception) -> None:
        self.routes[suffix] = error

    def media(self, suffix: str, content_type: str, status_code: int = 200) -> None:
        self.routes[suffix] = FakeResponse(status_code=status_code, headers={"Content-Type": content_type})

    def _dispatch(self, url: str, params: Dict[str, Any] | None, timeout: float | None) -> FakeResponse:
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        for suffix, outcome in self.routes.items():
            if url.endswith(suffix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"no route for {url}")

    def get(self, url: str, params: Dict[str, Any] | None = None, headers: Any = None, timeout: float | None = None):
        return self._dispatch(url, params, timeout)

    def head(self, url: str, timeout: float | None = None, allow_redirects: bool = False):
        return self._dispatch(url, None, timeout)

    def urls(self) -> List[str]:
        return [call["url"] for call in self.calls]


@pytest.fixture()
def http_stub(monkeypatch: pytest.MonkeyPatch) -> HttpStub:
    stub = HttpStub()
    monkeypatch.setattr(requests, "get", stub.get)
    monkeypatch.setattr(requests, "head", stub.head)
    return stub
