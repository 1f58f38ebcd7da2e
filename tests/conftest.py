"""Shared fixtures for proxy tests."""

from collections.abc import AsyncIterator, Callable
from typing import Any, Mapping

import httpx
import pytest

from core.config import Config
from services.routing_service import RoutingService
from services.upstream import UpstreamClient

NETWORK_BASE = "https://network.test/api"
DB_BASE = "https://db.test/api"

CONFIG_ENV_VARS = (
    "SATNOGS_NETWORK_API_URL",
    "SATNOGS_DB_API_URL",
    "ALLOWED_ORIGIN_URL",
    "CONTEXT",
    "PROXY_HOST",
    "PROXY_PORT",
)


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str]] = []
        self.proxied: list[tuple[str, str, dict[str, str]]] = []
        self.upstream: list[tuple[str, int, str | None]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_request(self, method: str, path: str) -> None:
        self.requests.append((method, path))

    def log_proxy(self, api_type: str, target_url: str, params: Mapping[str, str]) -> None:
        self.proxied.append((api_type, target_url, dict(params)))

    def log_upstream(
        self,
        api_type: str,
        target_url: str,
        status: int,
        content_type: str | None,
        *,
        path: str,
    ) -> None:
        self.upstream.append((api_type, status, content_type))

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


@pytest.fixture
def make_config(monkeypatch: pytest.MonkeyPatch) -> Callable[..., Config]:
    """Build a Config from a controlled environment."""

    def _make(**env: Any) -> Config:
        for name in CONFIG_ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        values = {"SATNOGS_NETWORK_API_URL": NETWORK_BASE, "SATNOGS_DB_API_URL": DB_BASE}
        values.update(env)
        for name, value in values.items():
            if value is not None:
                monkeypatch.setenv(name, str(value))
        return Config(_env_file=None)

    return _make


@pytest.fixture
def config(make_config: Callable[..., Config]) -> Config:
    """Development-mode configuration pointing at test upstreams."""
    return make_config(CONTEXT="dev")


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def service(config: Config, logger: RecordingLogger, http_client: httpx.AsyncClient) -> RoutingService:
    return RoutingService(
        config=config,
        logger=logger,
        upstream=UpstreamClient(http_client, http_client),
    )
