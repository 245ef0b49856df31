"""Request abstraction read by validation chains."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from .chain.context import Context

Location = Literal["body", "cookies", "headers", "params", "query"]

# Order matters: it is the default search order for fields
VALID_LOCATIONS: tuple[Location, ...] = ("body", "cookies", "headers", "params", "query")


@dataclass
class Request:
    """The parts of an incoming request a field can be read from.

    Chains only read from these locations, except sanitizers which write the
    sanitized value back in place. Every non-dry run appends its context to
    ``contexts`` so results can be aggregated later.
    """

    body: Any = field(default_factory=dict)
    cookies: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, Any] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    contexts: list[Context] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Header names are case-insensitive
        self.headers = {str(name).lower(): value for name, value in self.headers.items()}

    def get_location(self, location: Location) -> Any:
        """Return the container for a location."""
        return getattr(self, location)

    def set_location(self, location: Location, value: Any) -> None:
        """Replace the container for a location."""
        setattr(self, location, value)
