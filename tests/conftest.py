"""Shared fixtures: settings without environment access and a fake HTTP upstream."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from dad_jokes_mcp import server
from dad_jokes_mcp.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


class FakeUpstream:
    """Records outbound requests and answers them with a configurable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200, json=[])

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self, *args, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._dispatch))


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def patched_server(monkeypatch, settings, upstream):
    """The server module wired to test settings and the fake upstream."""
    monkeypatch.setattr(server, "settings", settings)
    monkeypatch.setattr(server, "make_client", upstream.client)
    return server
