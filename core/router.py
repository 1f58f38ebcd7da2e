"""Request routing logic - maps an inbound path to a SatNOGS API."""

from dataclasses import dataclass

API_PREFIX = "api"
SUPPORTED_API_TYPES = ("network", "db")

INVALID_STRUCTURE_MESSAGE = (
    "Not Found: Invalid API path structure. Expected /api/network/... or /api/db/..."
)


@dataclass(frozen=True)
class RouteDecision:
    """Routing decision for a request.

    ``route`` is ``"network"``, ``"db"`` or ``"invalid"``. Valid routes carry
    the residual path to forward; invalid ones carry the client-facing reason.
    """

    route: str
    residual_path: str = ""
    message: str = ""

    @property
    def is_valid(self) -> bool:
        return self.route != "invalid"


class RouteDecider:
    """Decide which upstream API a path targets."""

    def decide(self, path: str) -> RouteDecision:
        """Return the route for ``path``; depends on nothing but the path."""
        segments = [segment for segment in path.split("/") if segment]
        if len(segments) < 3 or segments[0] != API_PREFIX:
            return RouteDecision(route="invalid", message=INVALID_STRUCTURE_MESSAGE)

        api_type = segments[1]
        if api_type not in SUPPORTED_API_TYPES:
            return RouteDecision(
                route="invalid",
                message=(
                    f"Not Found: API type '{api_type}' is not supported. "
                    "Use 'network' or 'db'."
                ),
            )

        return RouteDecision(route=api_type, residual_path="/" + "/".join(segments[2:]))
