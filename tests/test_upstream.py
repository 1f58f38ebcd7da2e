"""Tests for upstream dispatch."""

import asyncio
import time

import httpx
import pytest
from respx import MockRouter

from core.request_types import FailureKind, TransportFailure, UpstreamResponse
from services.upstream import UPSTREAM_TIMEOUT, UpstreamClient

URL = "https://network.test/api/observations"


@pytest.fixture
def upstream(http_client: httpx.AsyncClient) -> UpstreamClient:
    return UpstreamClient(http_client, http_client)


def test_timeout_is_fifteen_seconds() -> None:
    assert UPSTREAM_TIMEOUT == 15.0


async def test_sends_accept_header_and_params(upstream: UpstreamClient, respx_mock: MockRouter) -> None:
    route = respx_mock.get(host="network.test", path="/api/observations").mock(
        return_value=httpx.Response(200, json=[])
    )

    outcome = await upstream.fetch("network", URL, {"satellite__norad_cat_id": "25544"})

    assert isinstance(outcome, UpstreamResponse)
    request = route.calls.last.request
    assert request.headers["Accept"] == "application/json"
    assert dict(request.url.params) == {"satellite__norad_cat_id": "25544"}


@pytest.mark.parametrize("status", [400, 404, 500, 503])
async def test_error_statuses_are_outcomes_not_failures(
    upstream: UpstreamClient, respx_mock: MockRouter, status: int
) -> None:
    respx_mock.get(host="network.test", path="/api/observations").mock(
        return_value=httpx.Response(status, text="nope")
    )

    outcome = await upstream.fetch("network", URL, {})

    assert isinstance(outcome, UpstreamResponse)
    assert outcome.status_code == status
    assert outcome.body == b"nope"


async def test_headers_are_lowercased(upstream: UpstreamClient, respx_mock: MockRouter) -> None:
    respx_mock.get(host="network.test", path="/api/observations").mock(
        return_value=httpx.Response(200, json=[], headers={"Link": '<x>; rel="next"'})
    )

    outcome = await upstream.fetch("network", URL, {})

    assert isinstance(outcome, UpstreamResponse)
    assert outcome.headers["link"] == '<x>; rel="next"'
    assert outcome.headers["content-type"] == "application/json"


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (httpx.ReadTimeout, FailureKind.TIMEOUT),
        (httpx.ConnectTimeout, FailureKind.TIMEOUT),
        (httpx.ConnectError, FailureKind.UNREACHABLE),
        (httpx.ReadError, FailureKind.UNREACHABLE),
        (httpx.RemoteProtocolError, FailureKind.UNREACHABLE),
    ],
)
async def test_transport_errors_are_classified(
    upstream: UpstreamClient, respx_mock: MockRouter, error: type[Exception], kind: FailureKind
) -> None:
    respx_mock.get(host="network.test", path="/api/observations").mock(side_effect=error)

    outcome = await upstream.fetch("network", URL, {})

    assert isinstance(outcome, TransportFailure)
    assert outcome.kind is kind
    assert outcome.detail


async def test_invalid_url_is_other_failure(upstream: UpstreamClient) -> None:
    outcome = await upstream.fetch("db", "https://db.test:notaport/api/x", {})

    assert isinstance(outcome, TransportFailure)
    assert outcome.kind is FailureKind.OTHER


async def test_timeout_bounds_the_whole_call() -> None:
    async def drip():
        for _ in range(20):
            await asyncio.sleep(0.1)
            yield b"["

    async def slow_body(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Type": "application/json"}, content=drip())

    async with httpx.AsyncClient(transport=httpx.MockTransport(slow_body)) as client:
        upstream = UpstreamClient(client, client, timeout=0.3)
        started = time.monotonic()

        outcome = await upstream.fetch("network", URL, {})

    assert isinstance(outcome, TransportFailure)
    assert outcome.kind is FailureKind.TIMEOUT
    assert time.monotonic() - started < 1.5


async def test_slow_response_headers_time_out() -> None:
    async def slow_headers(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(2)
        return httpx.Response(200, json=[])

    async with httpx.AsyncClient(transport=httpx.MockTransport(slow_headers)) as client:
        upstream = UpstreamClient(client, client, timeout=0.2)

        outcome = await upstream.fetch("db", "https://db.test/api/modes", {})

    assert isinstance(outcome, TransportFailure)
    assert outcome.kind is FailureKind.TIMEOUT
