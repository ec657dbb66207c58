"""Output formatters for award search results.

Provides a Formatter protocol and three implementations:
- PlainFormatter: the plain text every tool call returns
- RichFormatter: colored Rich tables for the terminal
- JsonFormatter: valid JSON for piping to jq
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from awards.models import AvailabilityTrip, RouteInfo, SearchResponse


class Formatter(Protocol):
    """Protocol for formatting award search results."""

    def format_search(
        self,
        response: SearchResponse,
        label: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> str:
        """Format one page of availability results."""
        ...

    def format_trips(self, trips: list[AvailabilityTrip]) -> str:
        """Format flight segments for an availability record."""
        ...

    def format_routes(self, routes: list[RouteInfo]) -> str:
        """Format a route listing."""
        ...

    def format_programs(self) -> str:
        """Format the supported programs and cabin codes."""
        ...


def get_formatter(name: str = "plain") -> Formatter:
    """Get a formatter by name.

    Args:
        name: One of "rich", "plain", "json".

    Raises:
        ValueError: If the name is not recognized.
    """
    if name == "rich":
        from awards.output.rich_formatter import RichFormatter

        return RichFormatter()
    elif name == "plain":
        from awards.output.plain_formatter import PlainFormatter

        return PlainFormatter()
    elif name == "json":
        from awards.output.json_formatter import JsonFormatter

        return JsonFormatter()
    else:
        raise ValueError(f"Unknown formatter: {name!r}. Use 'rich', 'plain', or 'json'.")
