"""Proxy orchestration: method gate, routing, dispatch and translation."""

from typing import Any, Mapping

from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import (
    FailureKind,
    InboundRequest,
    OutboundResponse,
    TransportFailure,
    UpstreamResponse,
)
from core.router import RouteDecider
from core.transform import ResponseTransformer
from services.targets import TargetResolver
from services.upstream import UpstreamClient


class RoutingService:
    """Handle one inbound request end to end.

    Holds only read-only collaborators; every call is independent of the
    ones before it.
    """

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        upstream: UpstreamClient,
        decider: RouteDecider | None = None,
        header_builder: HeaderBuilder | None = None,
        resolver: TargetResolver | None = None,
        transformer: ResponseTransformer | None = None,
    ) -> None:
        self._logger = _BestEffortLogger(logger)
        self._upstream = upstream
        self._decider = decider or RouteDecider()
        self._headers = header_builder or HeaderBuilder(config)
        self._resolver = resolver or TargetResolver(config)
        self._transformer = transformer or ResponseTransformer(self._headers, self._logger)

    async def handle(self, request: InboundRequest) -> OutboundResponse:
        """Produce the response for ``request``. Never raises."""
        method = request.method.upper()
        self._logger.log_request(method, request.path)

        if method == "OPTIONS":
            return OutboundResponse(status_code=204, headers=self._headers.build_preflight_headers())

        if method != "GET":
            self._logger.log_error("method", 405, f"Unsupported method: {method}")
            return self._transformer.error_response(
                405, {"message": f"Method {method} Not Allowed"}
            )

        decision = self._decider.decide(request.path)
        if not decision.is_valid:
            self._logger.log_error("route", 404, f"{decision.message} ({request.path})")
            return self._transformer.error_response(404, {"message": decision.message})

        target = self._resolver.resolve(decision, request.query)
        self._logger.log_proxy(target.api_type, target.url, target.params)

        try:
            outcome = await self._upstream.fetch(target.api_type, target.url, target.params)
            if isinstance(outcome, TransportFailure):
                status = _FAILURE_STATUS[outcome.kind]
                self._logger.log_error(target.api_type, status, f"{target.url}: {outcome.detail}")
            elif isinstance(outcome, UpstreamResponse):
                self._logger.log_upstream(
                    target.api_type,
                    target.url,
                    outcome.status_code,
                    outcome.headers.get("content-type"),
                    path=request.path,
                )
                if outcome.status_code >= 400:
                    self._logger.log_error(
                        target.api_type,
                        outcome.status_code,
                        f"SatNOGS returned error status for {target.url}",
                    )
            return self._transformer.transform(
                outcome,
                api_type=target.api_type,
                inbound_path=request.path,
            )
        except Exception as e:
            self._logger.log_error(target.api_type, 500, f"Unhandled error for {target.url}: {e!r}")
            return self._transformer.transform_failure(
                TransportFailure(FailureKind.OTHER, repr(e)),
                request.path,
            )


_FAILURE_STATUS = {
    FailureKind.TIMEOUT: 504,
    FailureKind.UNREACHABLE: 502,
    FailureKind.OTHER: 500,
}


class _BestEffortLogger:
    """Forward to a RequestLogger, dropping any error it raises.

    Logging is diagnostic only and must not change the response.
    """

    def __init__(self, logger: RequestLogger) -> None:
        self._logger = logger

    def log_request(self, method: str, path: str) -> None:
        self._call("log_request", method, path)

    def log_proxy(self, api_type: str, target_url: str, params: Mapping[str, str]) -> None:
        self._call("log_proxy", api_type, target_url, params)

    def log_upstream(
        self,
        api_type: str,
        target_url: str,
        status: int,
        content_type: str | None,
        *,
        path: str,
    ) -> None:
        self._call("log_upstream", api_type, target_url, status, content_type, path=path)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._call("log_error", route, status, message)

    def _call(self, name: str, *args: Any, **kwargs: Any) -> None:
        try:
            getattr(self._logger, name)(*args, **kwargs)
        except Exception:
            pass
