"""Serverless function entry point (Netlify / Lambda style events).

The runtime hands over an event dict with ``httpMethod``, ``path`` and
``queryStringParameters`` and expects ``statusCode``, ``headers`` and
``body`` back. Configuration is loaded once per cold start.
"""

import asyncio
import base64
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any

import httpx

from core.config import Config, load_config
from core.protocols import RequestLogger
from core.request_types import InboundRequest, OutboundResponse
from services.routing_service import RoutingService
from services.upstream import UPSTREAM_TIMEOUT, UpstreamClient
from ui.log_utils import FileLogger, write_cli_log

# Function bundles run from a read-only directory.
FUNCTION_LOG_FILE = Path(tempfile.gettempdir()) / "satnogs-proxy" / "proxy.log"


def event_to_inbound(event: dict[str, Any]) -> InboundRequest:
    return InboundRequest(
        method=event.get("httpMethod") or "",
        path=event.get("path") or "/",
        query=event.get("queryStringParameters") or {},
    )


def outbound_to_result(outbound: OutboundResponse) -> dict[str, Any]:
    """Render a response record; non-UTF-8 bodies are base64 encoded."""
    result: dict[str, Any] = {
        "statusCode": outbound.status_code,
        "headers": outbound.headers,
    }
    try:
        result["body"] = outbound.body.decode("utf-8")
    except UnicodeDecodeError:
        result["body"] = base64.b64encode(outbound.body).decode("ascii")
        result["isBase64Encoded"] = True
    return result


async def handle_event(
    event: dict[str, Any],
    config: Config,
    logger: RequestLogger,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Handle a single event, creating a client when none is supplied."""
    if http_client is None:
        async with httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT) as client:
            return await handle_event(event, config, logger, client)

    service = RoutingService(
        config=config,
        logger=logger,
        upstream=UpstreamClient(http_client, http_client),
    )
    outbound = await service.handle(event_to_inbound(event))
    return outbound_to_result(outbound)


@lru_cache(maxsize=1)
def _runtime() -> tuple[Config, FileLogger]:
    config = load_config()
    logger = FileLogger(FUNCTION_LOG_FILE)
    write_cli_log(
        "STARTUP",
        "Function cold start",
        log_file=FUNCTION_LOG_FILE,
        context=config.context,
        allowed_origin=config.allowed_origin,
        network_api=config.network_api_url,
        db_api=config.db_api_url,
    )
    return config, logger


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Function runtime entry point."""
    config, logger = _runtime()
    return asyncio.run(handle_event(event, config, logger))
