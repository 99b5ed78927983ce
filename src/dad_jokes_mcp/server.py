"""Dad Jokes MCP Server.

FastMCP server with a dad-joke tool, two MuscleWiki exercise tools, and the
image proxy the exercise widget loads thumbnails through.
Run: dad-jokes-mcp
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional
from urllib.parse import urlparse

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from . import __version__
from .core.clients import dadjoke, musclewiki
from .core.config import Settings, resolve_api_key
from .core.errors import ConfigurationError, TransportError, UpstreamError
from .core.http import make_client
from .core.models import DEFAULT_LIMIT, DebugTrace, SearchResult
from .core.normalize import aggregate_groups, find_result_list, parse_payload
from .core.presentation import IMAGE_PROXY_PATH, exercise_card
from .core.query import build_search_query

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=False, openWorldHint=True)

IMAGE_CACHE_CONTROL = "public, max-age=3600"

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and report whether the MuscleWiki tools can run."""
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    if not settings.api_key:
        logger.warning("No RapidAPI key configured; MuscleWiki tools will fail until one is set")
    logger.info("dad-jokes-mcp %s serving at %s", __version__, settings.mcp_url)
    yield


mcp = FastMCP(
    "dad-jokes-mcp",
    instructions="Random dad jokes from icanhazdadjoke.com and exercise search across the MuscleWiki catalog.",
    lifespan=lifespan,
    port=settings.port,
)


# ─── Tool 1: Dad Joke ────────────────────────────────────────────────────────


@mcp.tool(name="get-dad-joke", annotations=READ_ONLY)
async def get_dad_joke() -> dict:
    """Fetch a random dad joke from icanhazdadjoke.com."""
    async with make_client(settings) as client:
        joke = await dadjoke.fetch_joke(client)
    return joke.model_dump()


# ─── Tool 2: Muscle Groups ───────────────────────────────────────────────────


@mcp.tool(name="musclewiki-list-groups", annotations=READ_ONLY)
async def musclewiki_list_groups() -> dict:
    """List every MuscleWiki muscle group, sorted and de-duplicated."""
    resolve_api_key(settings)
    async with make_client(settings) as client:
        payload = await musclewiki.list_muscles(settings, client)
    groups = aggregate_groups(payload)
    return {"groups": groups}


# ─── Tool 3: Exercise Search ─────────────────────────────────────────────────


@mcp.tool(name="musclewiki-search-v3", annotations=READ_ONLY)
async def musclewiki_search(
    query: str = "",
    limit: int = DEFAULT_LIMIT,
    exercise: str = "",
    exercise_name: str = "",
    term: str = "",
    q: str = "",
    arguments: Optional[dict[str, Any]] = None,
) -> dict:
    """Search MuscleWiki exercises by keyword.

    Args:
        query: Search term (e.g., 'squat', 'biceps', 'push up').
        limit: Maximum number of results. Default 10.
        exercise: Alternative name for the search term.
        exercise_name: Alternative name for the search term.
        term: Alternative name for the search term.
        q: Alternative name for the search term.
        arguments: Any other caller fields. When no named field above is set and
            exactly one of these holds a string, that string is the search term.
    """
    resolve_api_key(settings)
    fields = dict(arguments or {})
    fields.update(
        (name, value)
        for name, value in (
            ("query", query),
            ("exercise", exercise),
            ("exercise_name", exercise_name),
            ("term", term),
            ("q", q),
        )
        if value
    )
    search_query = build_search_query(fields, limit)
    if search_query is None:
        logger.info("Empty exercise query, returning no results")
        return SearchResult(query="").model_dump(mode="json", exclude_none=True)

    async with make_client(settings) as client:
        response = await musclewiki.search(search_query.query, search_query.limit, settings, client)

    results = find_result_list(parse_payload(response.text)) or []
    result = SearchResult(
        query=search_query.query,
        results=results,
        count=len(results),
        cards=[exercise_card(r, settings.image_hosts) for r in results],
        debug=DebugTrace.from_response(response),
    )
    return result.model_dump(mode="json", exclude_none=True)


# ─── Image Proxy ─────────────────────────────────────────────────────────────


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@mcp.custom_route(IMAGE_PROXY_PATH, methods=["GET"])
async def image_proxy(request: Request) -> Response:
    """Fetch exercise media with the RapidAPI key attached and relay it to the browser."""
    url = request.query_params.get("url")
    if not url:
        return _error("Missing 'url' parameter", 400)

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return _error("'url' must be an absolute http(s) URL", 400)
    if parsed.hostname not in settings.image_hosts:
        return _error(f"Host not allowed: {parsed.hostname}", 403)

    try:
        async with make_client(settings) as client:
            upstream = await musclewiki.fetch_image(url, settings, client)
    except ConfigurationError as exc:
        return _error(str(exc), 500)
    except (TransportError, UpstreamError) as exc:
        return _error(str(exc), 502)

    if not upstream.is_success:
        logger.warning("Image proxy upstream %s -> %d", url, upstream.status_code)
        return _error(f"Upstream image request failed ({upstream.status_code})", upstream.status_code)

    headers = {"Cache-Control": IMAGE_CACHE_CONTROL}
    if "content-type" in upstream.headers:
        headers["Content-Type"] = upstream.headers["content-type"]
    # httpx decodes compressed bodies, so the upstream length only holds for identity encoding
    if "content-length" in upstream.headers and "content-encoding" not in upstream.headers:
        headers["Content-Length"] = upstream.headers["content-length"]
    return Response(upstream.content, status_code=200, headers=headers)


def main():
    """Entry point for the CLI command."""
    if settings.transport == "stdio":
        logger.warning("stdio transport selected, the image proxy route is not served")
    mcp.run(transport=settings.transport)


if __name__ == "__main__":
    main()
