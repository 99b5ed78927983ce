"""Shared construction of outbound HTTP clients."""

from __future__ import annotations

import httpx

from .config import Settings


def make_client(settings: Settings) -> httpx.AsyncClient:
    """A fresh client with the configured timeouts. Callers own and close it."""
    timeout = httpx.Timeout(settings.timeout_seconds, connect=settings.connect_timeout_seconds)
    return httpx.AsyncClient(timeout=timeout)
