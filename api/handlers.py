"""FastAPI route handlers."""

from fastapi import Request, Response

from core.request_types import InboundRequest, OutboundResponse


def to_inbound(request: Request) -> InboundRequest:
    """Normalize a Starlette request; repeated query keys keep the last value."""
    return InboundRequest(
        method=request.method,
        path=request.url.path,
        query=dict(request.query_params),
    )


def to_response(outbound: OutboundResponse) -> Response:
    return Response(
        content=outbound.body,
        status_code=outbound.status_code,
        headers=outbound.headers,
    )


async def handle_proxy(request: Request) -> Response:
    """Handle any request under the proxy."""
    routing_service = request.app.state.routing_service
    outbound = await routing_service.handle(to_inbound(request))
    return to_response(outbound)
