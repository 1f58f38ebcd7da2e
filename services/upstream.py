"""HTTP dispatch to the SatNOGS upstream APIs."""

import asyncio
from typing import Mapping

import httpx

from core.request_types import FailureKind, TransportFailure, UpstreamOutcome, UpstreamResponse

UPSTREAM_TIMEOUT = 15.0  # seconds, for the whole call
UPSTREAM_HEADERS = {"Accept": "application/json"}


class UpstreamClient:
    """Issue GETs to upstream; every HTTP status is an ordinary outcome."""

    def __init__(
        self,
        network_client: httpx.AsyncClient,
        db_client: httpx.AsyncClient,
        timeout: float = UPSTREAM_TIMEOUT,
    ) -> None:
        self._clients = {
            "network": network_client,
            "db": db_client,
        }
        self._timeout = timeout

    async def fetch(
        self,
        api_type: str,
        target_url: str,
        params: Mapping[str, str],
    ) -> UpstreamOutcome:
        """GET ``target_url``; only transport problems become a failure."""
        client = self._client_for(api_type)
        try:
            # httpx timeouts apply per phase; this bounds connect through body read.
            async with asyncio.timeout(self._timeout):
                response = await client.get(
                    target_url,
                    params=dict(params),
                    headers=UPSTREAM_HEADERS,
                    timeout=self._timeout,
                )
        except (httpx.TimeoutException, TimeoutError) as e:
            return TransportFailure(FailureKind.TIMEOUT, _describe(e))
        except httpx.TransportError as e:
            return TransportFailure(FailureKind.UNREACHABLE, _describe(e))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return TransportFailure(FailureKind.OTHER, _describe(e))

        return UpstreamResponse(
            status_code=response.status_code,
            headers={key.lower(): value for key, value in response.headers.items()},
            body=response.content,
        )

    def _client_for(self, api_type: str) -> httpx.AsyncClient:
        """Select the pooled client for an API type."""
        return self._clients[api_type]


def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
