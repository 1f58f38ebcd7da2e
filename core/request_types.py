"""Shared request and response data types."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class InboundRequest:
    """Normalized view of the request delivered by the runtime."""

    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))


@dataclass(frozen=True)
class UpstreamResponse:
    """Any HTTP response received from upstream, whatever its status."""

    status_code: int
    headers: Mapping[str, str]
    body: bytes


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    OTHER = "other"


@dataclass(frozen=True)
class TransportFailure:
    """Upstream could not be reached or did not answer in time."""

    kind: FailureKind
    detail: str = ""


UpstreamOutcome = UpstreamResponse | TransportFailure


@dataclass(frozen=True)
class OutboundResponse:
    """Response handed back to the runtime."""

    status_code: int
    headers: dict[str, str]
    body: bytes = b""
