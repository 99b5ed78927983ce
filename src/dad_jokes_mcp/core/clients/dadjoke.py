"""icanhazdadjoke.com API client.

API docs: https://icanhazdadjoke.com/api
No authentication required; a descriptive User-Agent is requested.
"""

from __future__ import annotations

import logging

import httpx

from ..errors import TransportError, UpstreamError
from ..models import DadJoke

logger = logging.getLogger(__name__)

API_BASE = "https://icanhazdadjoke.com/"
USER_AGENT = "dad-jokes-mcp"


async def fetch_joke(client: httpx.AsyncClient) -> DadJoke:
    """Fetch one random joke."""
    try:
        response = await client.get(
            API_BASE,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        )
    except httpx.RequestError as exc:
        raise TransportError(f"Dad joke request failed: {exc}") from exc

    if not response.is_success:
        raise UpstreamError(response.status_code, response.text, source="Dad joke")

    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        raise UpstreamError(response.status_code, response.text, source="Dad joke")

    logger.debug("Fetched dad joke %s", data.get("id"))
    return DadJoke(id=data.get("id", ""), joke=data.get("joke", ""))
