"""Plain text output formatter -- the text blocks returned by every tool."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from awards.models import (
    CABIN_NAMES,
    SUPPORTED_SOURCES,
    Availability,
    AvailabilityTrip,
    CabinCode,
    RouteInfo,
    SearchResponse,
)

DEFAULT_RESULT_LIMIT = 10
SEPARATOR = "\n\n---\n\n"


def _or(value: Any, placeholder: str) -> str:
    """Render ``value``, or ``placeholder`` when it is unknown."""
    return placeholder if value is None else str(value)


def _display_time(value: datetime) -> str:
    """Local wall-clock display; aware timestamps are shifted to the local zone."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M")


def _display_distance(value: float) -> str:
    """Whole miles without a trailing ``.0``; fractions to one decimal."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def format_availability(availability: Availability) -> str:
    """Render one availability record: header plus one line per open cabin."""
    route = availability.route
    lines = [
        f"Route: {route.origin_airport} → {route.destination_airport}",
        f"Date: {availability.date}",
        f"Source: {route.source}",
        "Available Cabins:",
    ]
    for code in CabinCode:
        cabin = availability.cabin(code)
        if not cabin.is_available:
            continue
        lines.append(
            f"{CABIN_NAMES[code]}: {_or(cabin.mileage_cost, 'N/A')} miles + "
            f"{_or(cabin.taxes, 'N/A')} ({_or(cabin.remaining_seats, '?')} seats)"
        )
    return "\n".join(lines).strip()


def format_trip(trip: AvailabilityTrip) -> str:
    """Render one flight segment. Every field is shown; unknowns as N/A."""
    return "\n".join([
        f"Flight: {trip.flight_number}",
        f"Route: {trip.origin_airport} → {trip.destination_airport}",
        f"Departure: {_display_time(trip.departs_at)}",
        f"Arrival: {_display_time(trip.arrives_at)}",
        f"Aircraft: {trip.aircraft_name} ({trip.aircraft_code})",
        f"Class: {trip.fare_class}",
        f"Cost: {_or(trip.mileage_cost, 'N/A')} miles + {_or(trip.taxes, 'N/A')}",
        f"Seats: {_or(trip.remaining_seats, 'N/A')}",
        f"Distance: {_display_distance(trip.distance)} miles",
    ])


def format_route(route: RouteInfo) -> str:
    return f"{route.origin} → {route.destination}: {', '.join(route.sources)}"


class PlainFormatter:
    """Format award search results as plain text."""

    def format_search(
        self,
        response: SearchResponse,
        label: Optional[str] = None,
        limit: int = DEFAULT_RESULT_LIMIT,
        offset: int = 0,
    ) -> str:
        """Summary line plus the first ``limit`` availability blocks.

        ``label`` names the program for bulk sweeps and appears in both the
        summary and the empty-result sentence. ``offset`` is the skip the
        page was fetched with, used in the next-page hint.
        """
        if not response.data:
            if label:
                return f"No availability found for {label}."
            return "No availability found for the specified search criteria."

        shown = response.data[:limit]
        scope = f" for {label}" if label else ""
        text = (
            f"Found {response.count} results{scope}. Showing first {len(shown)}:\n\n"
            + SEPARATOR.join(format_availability(a) for a in shown)
        )
        if response.has_more and response.cursor:
            text += (
                f"\n\nMore results available. Repeat the search with "
                f"cursor=\"{response.cursor}\" and skip={offset + response.count} for the next page."
            )
        return text

    def format_trips(self, trips: list[AvailabilityTrip]) -> str:
        if not trips:
            return "No flight details found for this availability ID."
        return "Flight Details:\n\n" + SEPARATOR.join(format_trip(t) for t in trips)

    def format_routes(self, routes: list[RouteInfo]) -> str:
        if not routes:
            return "No routes found."
        return "Available Routes:\n" + "\n".join(format_route(r) for r in routes)

    def format_programs(self) -> str:
        programs = "\n".join(f"• {source}" for source in SUPPORTED_SOURCES)
        cabins = "\n".join(f"• {code.value} = {name}" for code, name in CABIN_NAMES.items())
        return f"Supported Mileage Programs:\n{programs}\n\nCabin Classes:\n{cabins}"
