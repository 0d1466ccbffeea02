"""ASGI middleware that serves crawlers from the rendering service."""

import asyncio
from collections.abc import Awaitable

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from api.handlers import handle_prerender
from core.config import PrerenderSettings
from core.protocols import RequestLogger
from core.request_types import InboundRequest
from core.router import RouteDecider
from services.upstream import RenderServiceClient, create_http_client


class PrerenderMiddleware:
    """Route crawler GETs to the rendering service, everything else to ``app``."""

    def __init__(
        self,
        app: ASGIApp,
        settings: PrerenderSettings,
        render_client: RenderServiceClient | None = None,
        logger: RequestLogger | None = None,
    ) -> None:
        self.app = app
        self.settings = settings
        self.decider = RouteDecider(settings)
        self.render_client = render_client or RenderServiceClient(create_http_client(), settings)
        self.logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = InboundRequest.from_request(Request(scope, receive))
        if not self.decider.should_prerender(request):
            if self.logger is not None:
                self.logger.log_passthrough(request.path)
            await self.app(scope, receive, send)
            return

        response = await run_until_disconnect(
            handle_prerender(request, self.settings, self.render_client, self.logger),
            receive,
        )
        if response is None:
            return
        await response(scope, receive, send)


async def run_until_disconnect(
    work: Awaitable[Response],
    receive: Receive,
) -> Response | None:
    """Await ``work`` unless the client goes away first.

    Returns None when the client disconnected; ``work`` is cancelled then.
    """
    work_task = asyncio.ensure_future(work)
    disconnect_task = asyncio.ensure_future(_wait_for_disconnect(receive))
    try:
        done, _ = await asyncio.wait(
            {work_task, disconnect_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        disconnect_task.cancel()
        if not work_task.done():
            work_task.cancel()
            await asyncio.wait({work_task})

    if work_task in done:
        return work_task.result()
    disconnect_task.result()
    return None


async def _wait_for_disconnect(receive: Receive) -> None:
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            return
