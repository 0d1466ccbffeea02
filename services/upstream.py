"""HTTP client for the rendering service."""

import httpx

from core.config import PrerenderSettings
from core.exceptions import BodyReadError, UpstreamTransportError
from core.headers import HeaderBuilder
from core.request_types import RedirectIntercepted, RelayResult, RenderedPage


class RenderServiceClient:
    """Fetch prerendered pages without following redirects."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: PrerenderSettings,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._headers = header_builder or HeaderBuilder()

    async def fetch(self, url: str, user_agent: str) -> RelayResult:
        """GET ``url`` from the rendering service.

        Redirects come back as ``RedirectIntercepted`` rather than being
        chased. The body is read in full before returning so callers never
        send a status they cannot follow with a body.

        Raises:
            UpstreamTransportError: If the service cannot be reached.
            BodyReadError: If the response body cannot be read.
        """
        request = self._client.build_request(
            "GET",
            url,
            headers=self._headers.build_render_headers(user_agent, self._settings.token),
            timeout=self._settings.timeout,
        )
        auth = None
        if self._settings.has_basic_auth:
            auth = httpx.BasicAuth(self._settings.username, self._settings.password)

        try:
            response = await self._client.send(
                request, auth=auth, stream=True, follow_redirects=False
            )
        except httpx.RequestError as e:
            raise UpstreamTransportError(_describe(e)) from e

        try:
            headers = self._headers.response_headers(response.headers.raw)
            if response.is_redirect:
                return RedirectIntercepted(response.status_code, headers)
            try:
                content = await response.aread()
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise BodyReadError(_describe(e), status_code=response.status_code) from e
            return RenderedPage(response.status_code, headers, content)
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()


def create_http_client() -> httpx.AsyncClient:
    """Create the shared client used for all rendering-service calls."""
    limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
    return httpx.AsyncClient(follow_redirects=False, limits=limits)


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__
