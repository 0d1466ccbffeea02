"""RenderServiceClient against an httpx.MockTransport rendering service."""

import base64

import httpx
import pytest

from core.config import PrerenderSettings
from core.exceptions import BodyReadError, UpstreamTransportError
from core.request_types import RedirectIntercepted, RenderedPage
from services.upstream import RenderServiceClient

URL = "http://render.test/http%3A%2F%2Fhost%2Farticle"


class _FailingStream(httpx.AsyncByteStream):
    def __init__(self):
        self.closed = False

    async def __aiter__(self):
        yield b"<html>"
        raise httpx.ReadError("connection reset")

    async def aclose(self):
        self.closed = True


class _TrackingStream(httpx.AsyncByteStream):
    def __init__(self, content: bytes):
        self.content = content
        self.closed = False

    async def __aiter__(self):
        yield self.content

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_fetch_sends_user_agent_and_returns_page(settings, mock_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            headers=[("Content-Type", "text/html"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
            content=b"<html>rendered</html>",
        )

    client = RenderServiceClient(mock_client(handler), settings)
    result = await client.fetch(URL, "Twitterbot/1.0")

    assert isinstance(result, RenderedPage)
    assert result.status_code == 200
    assert result.content == b"<html>rendered</html>"
    headers = [(k.lower(), v) for k, v in result.headers]
    assert (b"set-cookie", b"a=1") in headers
    assert (b"set-cookie", b"b=2") in headers
    assert b"content-length" not in [k for k, _ in headers]

    request = seen[0]
    assert request.method == "GET"
    assert str(request.url) == URL
    assert request.headers["user-agent"] == "Twitterbot/1.0"
    assert "x-prerender-token" not in request.headers
    assert "authorization" not in request.headers


@pytest.mark.asyncio
async def test_fetch_sends_token_and_basic_auth(mock_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"ok")

    settings = PrerenderSettings(token="tok", username="user", password="pass")
    client = RenderServiceClient(mock_client(handler), settings)
    await client.fetch(URL, "Twitterbot/1.0")

    headers = seen[0].headers
    assert headers["x-prerender-token"] == "tok"
    assert headers["authorization"] == "Basic " + base64.b64encode(b"user:pass").decode()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [301, 302, 303, 307, 308])
async def test_redirect_is_not_followed(settings, mock_client, status):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            status,
            headers={"Location": "https://example.com/foo"},
            content=b"moved",
        )

    client = RenderServiceClient(mock_client(handler), settings)
    result = await client.fetch(URL, "Twitterbot/1.0")

    assert isinstance(result, RedirectIntercepted)
    assert result.status_code == status
    assert result.location == "https://example.com/foo"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_utf8_header_bytes_are_kept_as_received(settings, mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers=[
                (b"X-Name", "café".encode()),
                (b"Content-Disposition", 'inline; filename="日本.html"'.encode()),
            ],
            content=b"<html>ok</html>",
        )

    client = RenderServiceClient(mock_client(handler), settings)
    result = await client.fetch(URL, "Twitterbot/1.0")

    assert (b"X-Name", "café".encode()) in result.headers
    assert (b"Content-Disposition", 'inline; filename="日本.html"'.encode()) in result.headers


@pytest.mark.asyncio
async def test_redirect_status_without_location_is_a_page(settings, mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, content=b"no location")

    client = RenderServiceClient(mock_client(handler), settings)
    result = await client.fetch(URL, "Twitterbot/1.0")

    assert isinstance(result, RenderedPage)
    assert result.status_code == 302


@pytest.mark.asyncio
async def test_non_200_status_is_relayed(settings, mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"not found")

    client = RenderServiceClient(mock_client(handler), settings)
    result = await client.fetch(URL, "Twitterbot/1.0")

    assert result == RenderedPage(404, [], b"not found")


@pytest.mark.asyncio
async def test_connection_error_raises_transport_error(settings, mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = RenderServiceClient(mock_client(handler), settings)

    with pytest.raises(UpstreamTransportError, match="connection refused"):
        await client.fetch(URL, "Twitterbot/1.0")


@pytest.mark.asyncio
async def test_timeout_raises_transport_error(settings, mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = RenderServiceClient(mock_client(handler), settings)

    with pytest.raises(UpstreamTransportError):
        await client.fetch(URL, "Twitterbot/1.0")


@pytest.mark.asyncio
async def test_body_read_failure_raises_and_closes(settings, mock_client):
    stream = _FailingStream()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=stream)

    client = RenderServiceClient(mock_client(handler), settings)

    with pytest.raises(BodyReadError) as exc_info:
        await client.fetch(URL, "Twitterbot/1.0")

    assert exc_info.value.status_code == 200
    assert stream.closed is True


@pytest.mark.asyncio
async def test_response_is_closed_after_success_and_redirect(settings, mock_client):
    streams = []

    def handler(request: httpx.Request) -> httpx.Response:
        stream = _TrackingStream(b"body")
        streams.append(stream)
        if request.url.path.endswith("redirect"):
            return httpx.Response(302, headers={"Location": "/elsewhere"}, stream=stream)
        return httpx.Response(200, stream=stream)

    client = RenderServiceClient(mock_client(handler), settings)
    await client.fetch("http://render.test/page", "bot")
    await client.fetch("http://render.test/redirect", "bot")

    assert [s.closed for s in streams] == [True, True]
