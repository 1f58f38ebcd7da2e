"""Upstream target resolution for the SatNOGS Network and DB APIs."""

from dataclasses import dataclass
from typing import Mapping

from core.config import Config
from core.router import RouteDecision


@dataclass(frozen=True)
class UpstreamTarget:
    """Where a routed request is sent."""

    api_type: str
    url: str
    params: Mapping[str, str]


class TargetResolver:
    """Map a route decision to an upstream URL."""

    def __init__(self, config: Config) -> None:
        self._config = config

    def resolve(self, decision: RouteDecision, query: Mapping[str, str]) -> UpstreamTarget:
        """Base URL plus residual path; the query is forwarded untouched."""
        base_url = self._config.base_url_for(decision.route)
        return UpstreamTarget(
            api_type=decision.route,
            url=f"{base_url}{decision.residual_path}",
            params=query,
        )
