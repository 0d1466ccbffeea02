"""Prerender request handling."""

from starlette.responses import Response

from core.config import PrerenderSettings
from core.exceptions import BodyReadError, BuildError, UpstreamTransportError
from core.protocols import RequestLogger
from core.request_types import InboundRequest, RedirectIntercepted, RenderedPage
from core.url_builder import build_api_url
from services.upstream import RenderServiceClient


async def handle_prerender(
    request: InboundRequest,
    settings: PrerenderSettings,
    render_client: RenderServiceClient,
    logger: RequestLogger | None = None,
) -> Response:
    """Serve a crawler request from the rendering service."""
    try:
        url = build_api_url(request, settings.service_url)
    except BuildError as e:
        _log_error(logger, "build", f"{e.message}: {request.raw_uri!r}")
        return Response(status_code=500)

    if logger is not None:
        logger.log_prerender(url, request.user_agent)

    try:
        result = await render_client.fetch(url, request.user_agent)
    except UpstreamTransportError as e:
        _log_error(logger, "upstream", str(e))
        return Response(status_code=500)
    except BodyReadError as e:
        _log_error(logger, "body", str(e))
        return Response(status_code=500)

    if isinstance(result, RedirectIntercepted):
        if logger is not None:
            logger.log_redirect(url, result.location)
        return redirect_response(result)

    return rendered_response(result)


def rendered_response(page: RenderedPage) -> Response:
    """Relay status, every header value, and the body."""
    response = Response(content=page.content, status_code=page.status_code)
    response.raw_headers.extend(_lower_name(key, value) for key, value in page.headers)
    return response


def redirect_response(redirect: RedirectIntercepted) -> Response:
    """Collapse any upstream redirect into a bodiless 301."""
    # One value per header name, the last one wins
    latest: dict[bytes, tuple[bytes, bytes]] = {}
    for key, value in redirect.headers:
        latest[key.lower()] = (key, value)

    response = Response(status_code=301)
    response.raw_headers.extend(_lower_name(key, value) for key, value in latest.values())
    return response


def _lower_name(key: bytes, value: bytes) -> tuple[bytes, bytes]:
    return key.lower(), value


def _log_error(logger: RequestLogger | None, route: str, message: str) -> None:
    if logger is not None:
        logger.log_error(route, 500, message)
