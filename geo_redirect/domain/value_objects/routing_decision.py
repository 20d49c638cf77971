"""Routing decision value object."""

from dataclasses import dataclass
from enum import Enum

TURKEY = "TR"
REST = "REST"


class DestinationKind(str, Enum):
    """Kind of destination a redirect route sends visitors to."""

    MESSAGING_NUMBER = "messaging_number"
    CHANNEL_NAME = "channel_name"
    WEBSITE_URL = "website_url"


@dataclass(frozen=True)
class RoutingDecision:
    """Selected destination for one inbound request."""

    routing: str
    destination: str
    text: str = ""

    def __post_init__(self) -> None:
        """Validate routing branch."""
        if self.routing not in (TURKEY, REST):
            raise ValueError(f"Routing must be {TURKEY!r} or {REST!r}")

    @property
    def is_turkey(self) -> bool:
        """Check if the Turkey branch was selected."""
        return self.routing == TURKEY
