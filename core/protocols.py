"""Shared protocol definitions."""

from typing import Mapping, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, FileLogger)."""

    def log_request(self, method: str, path: str) -> None: ...
    def log_proxy(
        self,
        api_type: str,
        target_url: str,
        params: Mapping[str, str],
    ) -> None: ...
    def log_upstream(
        self,
        api_type: str,
        target_url: str,
        status: int,
        content_type: str | None,
        *,
        path: str,
    ) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
