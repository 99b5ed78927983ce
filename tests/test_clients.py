import httpx
import pytest

from dad_jokes_mcp.core.clients import dadjoke, musclewiki
from dad_jokes_mcp.core.config import Settings
from dad_jokes_mcp.core.errors import ConfigurationError, TransportError, UpstreamError
from dad_jokes_mcp.core.http import make_client


@pytest.mark.asyncio
async def test_search_sends_query_limit_and_rapidapi_headers(settings, upstream):
    upstream.handler = lambda request: httpx.Response(200, text='[{"name": "Squat"}]')

    async with upstream.client() as client:
        response = await musclewiki.search(" squat ", 5, settings, client)

    request = upstream.requests[0]
    assert request.url.path == "/search"
    assert request.url.params["q"] == "squat"
    assert request.url.params["limit"] == "5"
    assert request.headers["X-RapidAPI-Key"] == "test-key"
    assert request.headers["X-RapidAPI-Host"] == "musclewiki-api.p.rapidapi.com"
    assert response.text == '[{"name": "Squat"}]'
    assert response.status == 200
    assert response.url == str(request.url)


@pytest.mark.asyncio
async def test_blank_search_makes_no_request(settings, upstream):
    async with upstream.client() as client:
        response = await musclewiki.search("   ", 10, settings, client)

    assert upstream.requests == []
    assert response.text == ""
    assert response.status == 0


@pytest.mark.asyncio
async def test_rate_limited_search_raises_upstream_error(settings, upstream):
    body = "Too many requests. " * 20
    upstream.handler = lambda request: httpx.Response(429, text=body)

    async with upstream.client() as client:
        with pytest.raises(UpstreamError) as excinfo:
            await musclewiki.search("squat", 10, settings, client)

    assert excinfo.value.status == 429
    assert excinfo.value.body == body[:100]


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error(settings, upstream):
    def _boom(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    upstream.handler = _boom
    async with upstream.client() as client:
        with pytest.raises(TransportError):
            await musclewiki.search("squat", 10, settings, client)


@pytest.mark.asyncio
async def test_search_without_key_fails_fast(upstream):
    async with upstream.client() as client:
        with pytest.raises(ConfigurationError):
            await musclewiki.search("squat", 10, Settings(), client)
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_list_muscles_decodes_body(settings, upstream):
    upstream.handler = lambda request: httpx.Response(200, json=["Chest", {"name": "Back"}])

    async with upstream.client() as client:
        payload = await musclewiki.list_muscles(settings, client)

    assert upstream.requests[0].url.path == "/muscles"
    assert payload == ["Chest", {"name": "Back"}]


@pytest.mark.asyncio
async def test_list_muscles_non_json_body_is_empty(settings, upstream):
    upstream.handler = lambda request: httpx.Response(200, text="<html>maintenance</html>")

    async with upstream.client() as client:
        assert await musclewiki.list_muscles(settings, client) == []


@pytest.mark.asyncio
async def test_fetch_joke(upstream):
    upstream.handler = lambda request: httpx.Response(200, json={"id": "abc", "joke": "I'm reading a book on anti-gravity."})

    async with upstream.client() as client:
        joke = await dadjoke.fetch_joke(client)

    request = upstream.requests[0]
    assert str(request.url) == "https://icanhazdadjoke.com/"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["User-Agent"] == "dad-jokes-mcp"
    assert joke.id == "abc"
    assert joke.joke.startswith("I'm reading")


@pytest.mark.asyncio
async def test_fetch_joke_upstream_error(upstream):
    upstream.handler = lambda request: httpx.Response(503, text="down")

    async with upstream.client() as client:
        with pytest.raises(UpstreamError) as excinfo:
            await dadjoke.fetch_joke(client)
    assert excinfo.value.status == 503


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["<html>busy</html>", '["not", "an", "object"]'])
async def test_fetch_joke_unexpected_body(upstream, body):
    upstream.handler = lambda request: httpx.Response(200, text=body)

    async with upstream.client() as client:
        with pytest.raises(UpstreamError) as excinfo:
            await dadjoke.fetch_joke(client)
    assert excinfo.value.status == 200


@pytest.mark.asyncio
async def test_fetch_joke_transport_failure(upstream):
    def _boom(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream.handler = _boom
    async with upstream.client() as client:
        with pytest.raises(TransportError):
            await dadjoke.fetch_joke(client)


@pytest.mark.asyncio
async def test_make_client_applies_configured_timeouts():
    client = make_client(Settings(timeout_seconds=12.5, connect_timeout_seconds=3.0))
    async with client:
        assert client.timeout.read == 12.5
        assert client.timeout.pool == 12.5
        assert client.timeout.connect == 3.0


@pytest.mark.asyncio
async def test_fetch_image_keeps_key_within_allowed_hosts(settings, upstream):
    def _handler(request):
        if request.url.path == "/old.png":
            return httpx.Response(301, headers={"location": "/new.png"})
        return httpx.Response(200, content=b"img")

    upstream.handler = _handler
    async with upstream.client() as client:
        response = await musclewiki.fetch_image("https://media.musclewiki.com/old.png", settings, client)

    assert response.content == b"img"
    assert [str(r.url) for r in upstream.requests] == [
        "https://media.musclewiki.com/old.png",
        "https://media.musclewiki.com/new.png",
    ]
    assert all(r.headers["X-RapidAPI-Key"] == "test-key" for r in upstream.requests)


@pytest.mark.asyncio
async def test_fetch_image_drops_key_after_leaving_allowed_hosts(settings, upstream):
    def _handler(request):
        if request.url.host == "media.musclewiki.com":
            return httpx.Response(302, headers={"location": "https://cdn.example.com/a.png"})
        if request.url.path == "/a.png":
            return httpx.Response(302, headers={"location": "https://media.musclewiki.com/b.png?again"})
        return httpx.Response(200, content=b"img")

    upstream.handler = _handler
    async with upstream.client() as client:
        with pytest.raises(UpstreamError):
            await musclewiki.fetch_image("https://media.musclewiki.com/start.png", settings, client)

    assert upstream.requests[0].headers["X-RapidAPI-Key"] == "test-key"
    assert all("X-RapidAPI-Key" not in r.headers for r in upstream.requests[1:])


@pytest.mark.asyncio
async def test_fetch_image_follows_foreign_redirect_without_key(settings, upstream):
    def _handler(request):
        if request.url.host == "media.musclewiki.com":
            return httpx.Response(302, headers={"location": "https://cdn.example.com/a.png"})
        return httpx.Response(200, content=b"img")

    upstream.handler = _handler
    async with upstream.client() as client:
        response = await musclewiki.fetch_image("https://media.musclewiki.com/start.png", settings, client)

    assert response.content == b"img"
    assert str(upstream.requests[1].url) == "https://cdn.example.com/a.png"
    assert "X-RapidAPI-Key" not in upstream.requests[1].headers
