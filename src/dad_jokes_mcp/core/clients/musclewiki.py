"""MuscleWiki API client (via RapidAPI).

API docs: https://rapidapi.com/musclewiki/api/musclewiki-api
Every request needs the X-RapidAPI-Key and X-RapidAPI-Host headers.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from ..config import Settings, resolve_api_key
from ..errors import TransportError, UpstreamError
from ..models import UpstreamResponse
from ..normalize import parse_payload

logger = logging.getLogger(__name__)


def _headers(settings: Settings, accept: str = "application/json") -> dict[str, str]:
    return {
        "X-RapidAPI-Key": resolve_api_key(settings),
        "X-RapidAPI-Host": settings.musclewiki_host,
        "Accept": accept,
    }


async def _get(client: httpx.AsyncClient, url: str, **kwargs: Any) -> httpx.Response:
    try:
        return await client.get(url, **kwargs)
    except httpx.RequestError as exc:
        logger.warning("MuscleWiki request to %s failed: %s", url, exc)
        raise TransportError(f"MuscleWiki request failed: {exc}") from exc


async def search(
    query: str,
    limit: int,
    settings: Settings,
    client: httpx.AsyncClient,
) -> UpstreamResponse:
    """Search exercises by keyword.

    Args:
        query: Search text. Blank text skips the request entirely.
        limit: Maximum number of results to ask for.
        settings: Server settings (API key, base URL, host header).
        client: HTTP client to send the request with.

    Returns:
        The untouched response body, status code, and resolved request URL.

    Raises:
        ConfigurationError: No RapidAPI key is configured.
        UpstreamError: The API answered with a non-2xx status.
        TransportError: The request failed or timed out.
    """
    query = query.strip()
    request = httpx.Request(
        "GET",
        f"{settings.musclewiki_base_url}/search",
        params={"q": query, "limit": limit},
    )
    url = str(request.url)
    if not query:
        return UpstreamResponse(url=url)

    response = await _get(client, url, headers=_headers(settings))
    logger.info("MuscleWiki search q=%r limit=%d -> %d", query, limit, response.status_code)
    if not response.is_success:
        raise UpstreamError(response.status_code, response.text)
    return UpstreamResponse(text=response.text, status=response.status_code, url=url)


async def list_muscles(settings: Settings, client: httpx.AsyncClient) -> Any:
    """Fetch the muscle-group listing. Returns the decoded body, whatever its shape."""
    url = f"{settings.musclewiki_base_url}/muscles"
    response = await _get(client, url, headers=_headers(settings))
    if not response.is_success:
        raise UpstreamError(response.status_code, response.text)
    payload = parse_payload(response.text)
    return payload if not isinstance(payload, str) else []


MAX_IMAGE_REDIRECTS = 5


async def fetch_image(url: str, settings: Settings, client: httpx.AsyncClient) -> httpx.Response:
    """Fetch media, attaching the RapidAPI headers only for hosts in ``settings.image_hosts``.

    Redirects are followed here rather than by httpx so every hop is checked;
    once a redirect leaves the allowed hosts the remaining hops go without the
    key. Non-2xx responses are returned, not raised.
    """
    send_key = True
    for _ in range(MAX_IMAGE_REDIRECTS + 1):
        send_key = send_key and urlparse(url).hostname in settings.image_hosts
        headers = _headers(settings, accept="*/*") if send_key else {"Accept": "*/*"}
        response = await _get(client, url, headers=headers)
        if not response.is_redirect:
            return response
        url = str(response.url.join(response.headers["location"]))
        logger.debug("Image redirect -> %s", url)
    raise UpstreamError(response.status_code, f"Too many redirects fetching {url}")
