"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from api.handlers import handle_proxy
from core.config import Config
from core.protocols import RequestLogger
from services.routing_service import RoutingService
from services.upstream import UPSTREAM_TIMEOUT, UpstreamClient


def create_app(config: Config, logger: RequestLogger) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        network_client = httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT, limits=limits)
        db_client = httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT, limits=limits)
        app.state.routing_service = RoutingService(
            config=config,
            logger=logger,
            upstream=UpstreamClient(network_client, db_client),
        )
        try:
            yield
        finally:
            await network_client.aclose()
            await db_client.aclose()

    app = FastAPI(
        title="SatNOGS Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # No method list: the method gate answers unsupported methods with CORS headers.
    app.add_route("/{full_path:path}", handle_proxy, include_in_schema=False)

    return app
