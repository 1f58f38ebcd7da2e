"""CORS header construction for outbound responses."""

from core.config import Config

ALLOW_HEADERS = "Content-Type, Accept"
ALLOW_METHODS = "GET, OPTIONS"
DEFAULT_EXPOSE_HEADERS = ("Content-Type", "Content-Length")
JSON_CONTENT_TYPE = "application/json"


class HeaderBuilder:
    """Build the header sets attached to every response."""

    def __init__(self, config: Config) -> None:
        self._cors = {
            "Access-Control-Allow-Origin": config.allowed_origin,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
        }

    def build_preflight_headers(self) -> dict[str, str]:
        """Base CORS headers only, for OPTIONS responses."""
        return dict(self._cors)

    def build_response_headers(
        self,
        content_type: str,
        extra_exposed: tuple[str, ...] = (),
    ) -> dict[str, str]:
        """CORS headers plus the expose list and a Content-Type."""
        exposed = DEFAULT_EXPOSE_HEADERS + extra_exposed
        headers = dict(self._cors)
        headers["Access-Control-Expose-Headers"] = ", ".join(exposed)
        headers["Content-Type"] = content_type
        return headers

    def build_json_headers(self) -> dict[str, str]:
        return self.build_response_headers(JSON_CONTENT_TYPE)
