"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from starlette.types import ASGIApp

from api.middleware import PrerenderMiddleware
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.upstream import RenderServiceClient, create_http_client


def create_app(
    config: Config,
    logger: RequestLogger | None = None,
    app: ASGIApp | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create the host application with prerendering in front of ``app``.

    Without ``app`` every request that is not prerendered answers 404.
    """
    render_client = RenderServiceClient(
        http_client or create_http_client(), config.prerender, HeaderBuilder()
    )

    @asynccontextmanager
    async def lifespan(host: FastAPI):
        try:
            yield
        finally:
            await render_client.aclose()

    host = FastAPI(
        title="Prerender Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    host.add_middleware(
        PrerenderMiddleware,
        settings=config.prerender,
        render_client=render_client,
        logger=logger,
    )
    if app is not None:
        host.mount("/", app)

    return host
