"""Upstream outcome to browser-safe response translation."""

import json
from typing import Any

from core.headers import JSON_CONTENT_TYPE, HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import (
    FailureKind,
    OutboundResponse,
    TransportFailure,
    UpstreamOutcome,
    UpstreamResponse,
)

FALLBACK_CONTENT_TYPE = "application/octet-stream"
LINK_HEADER = "Link"


def json_body(payload: Any) -> bytes:
    """Serialize a JSON value compactly as UTF-8."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


class ResponseTransformer:
    """Turn an upstream outcome into the response returned to the browser."""

    def __init__(self, header_builder: HeaderBuilder, logger: RequestLogger) -> None:
        self._headers = header_builder
        self._logger = logger

    def transform(
        self,
        outcome: UpstreamOutcome,
        *,
        api_type: str,
        inbound_path: str,
    ) -> OutboundResponse:
        if isinstance(outcome, TransportFailure):
            return self.transform_failure(outcome, inbound_path)
        if outcome.status_code >= 400:
            return self.transform_upstream_error(outcome, api_type)
        return self.transform_success(outcome, api_type, inbound_path)

    def error_response(self, status_code: int, payload: dict[str, Any]) -> OutboundResponse:
        """JSON error response with CORS headers."""
        return OutboundResponse(
            status_code=status_code,
            headers=self._headers.build_json_headers(),
            body=json_body(payload),
        )

    def transform_failure(self, failure: TransportFailure, inbound_path: str) -> OutboundResponse:
        if failure.kind is FailureKind.TIMEOUT:
            status = 504
            message = f"Gateway Timeout: No timely response from SatNOGS API for {inbound_path}."
        elif failure.kind is FailureKind.UNREACHABLE:
            status = 502
            message = f"Bad Gateway: Error communicating with SatNOGS API for {inbound_path}."
        else:
            status = 500
            message = f"Internal Server Error processing the request for {inbound_path}."
        return self.error_response(status, {"message": message})

    def transform_upstream_error(
        self,
        upstream: UpstreamResponse,
        api_type: str,
    ) -> OutboundResponse:
        """Keep the upstream status, replace the body with a local message."""
        status = upstream.status_code
        if status == 404:
            message = f"Not Found: The requested resource was not found on the SatNOGS {api_type} API."
        elif status in (401, 403):
            message = f"Unauthorized: Access denied by SatNOGS {api_type} API."
        else:
            message = f"Error fetching data from SatNOGS. Status: {status}."
        return self.error_response(status, {"message": message, "upstreamStatus": status})

    def transform_success(
        self,
        upstream: UpstreamResponse,
        api_type: str,
        inbound_path: str,
    ) -> OutboundResponse:
        upstream_type = upstream.headers.get("content-type")
        is_json = bool(upstream_type) and JSON_CONTENT_TYPE in upstream_type
        link = upstream.headers.get("link")

        if is_json:
            content_type = JSON_CONTENT_TYPE
            body = self._reserialize(upstream, api_type, inbound_path)
        else:
            content_type = upstream_type or FALLBACK_CONTENT_TYPE
            body = upstream.body

        headers = self._headers.build_response_headers(
            content_type,
            extra_exposed=(LINK_HEADER,) if link is not None else (),
        )
        if link is not None:
            headers[LINK_HEADER] = link
        return OutboundResponse(status_code=upstream.status_code, headers=headers, body=body)

    def _reserialize(
        self,
        upstream: UpstreamResponse,
        api_type: str,
        inbound_path: str,
    ) -> bytes:
        """Parse and re-emit a JSON body; unparseable bodies pass through."""
        if not upstream.body:
            return upstream.body
        try:
            data = json.loads(upstream.body)
        except ValueError as e:
            self._logger.log_error(
                api_type,
                upstream.status_code,
                f"Invalid JSON from upstream for {inbound_path}: {e}",
            )
            return upstream.body
        return json_body(data)
