"""Rich-based output formatter with colored availability tables."""

from __future__ import annotations

from io import StringIO
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from awards.models import (
    CABIN_NAMES,
    SUPPORTED_SOURCES,
    AvailabilityTrip,
    CabinAvailability,
    CabinCode,
    RouteInfo,
    SearchResponse,
)
from awards.output.plain_formatter import DEFAULT_RESULT_LIMIT, _display_time, _or


def _render(renderable) -> str:
    """Render a Rich object to a string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=True, width=120)
    console.print(renderable)
    return buf.getvalue()


def _cabin_cell(cabin: CabinAvailability) -> Text:
    if cabin.available is None:
        return Text("?", style="dim")
    if not cabin.available:
        return Text("-", style="dim")
    text = Text(f"{_or(cabin.mileage_cost, 'N/A')} + {_or(cabin.taxes, 'N/A')}", style="bold green")
    text.append(f" ({_or(cabin.remaining_seats, '?')})", style="green")
    if cabin.direct:
        text.append(" direct", style="cyan")
    return text


class RichFormatter:
    """Format award search results using Rich tables and panels."""

    def format_search(
        self,
        response: SearchResponse,
        label: Optional[str] = None,
        limit: int = DEFAULT_RESULT_LIMIT,
        offset: int = 0,
    ) -> str:
        if not response.data:
            scope = label or "the specified search criteria"
            return _render(Panel(f"No availability found for {scope}.", border_style="yellow"))

        shown = response.data[:limit]
        scope = f" for {label}" if label else ""
        table = Table(
            title=f"Found {response.count} results{scope} -- showing {len(shown)}",
            show_lines=False,
        )
        table.add_column("Date")
        table.add_column("Route")
        table.add_column("Source")
        for code in CabinCode:
            table.add_column(CABIN_NAMES[code])
        table.add_column("ID", style="dim")

        for a in shown:
            table.add_row(
                a.date,
                f"{a.route.origin_airport} → {a.route.destination_airport}",
                a.route.source,
                *(_cabin_cell(a.cabin(code)) for code in CabinCode),
                a.id,
            )

        parts = [_render(table)]
        if response.has_more and response.cursor:
            parts.append(_render(Text(
                f"More results: --cursor {response.cursor} --skip {offset + response.count}",
                style="yellow",
            )))
        return "".join(parts)

    def format_trips(self, trips: list[AvailabilityTrip]) -> str:
        if not trips:
            return _render(Panel("No flight details found for this availability ID.", border_style="yellow"))
        table = Table(title="Flight Details")
        for col in ("#", "Flight", "Route", "Departure", "Arrival", "Aircraft", "Class", "Cost", "Seats", "Distance"):
            table.add_column(col)
        for t in sorted(trips, key=lambda t: t.order):
            table.add_row(
                str(t.order),
                t.flight_number,
                f"{t.origin_airport} → {t.destination_airport}",
                _display_time(t.departs_at),
                _display_time(t.arrives_at),
                f"{t.aircraft_name} ({t.aircraft_code})",
                t.fare_class,
                f"{_or(t.mileage_cost, 'N/A')} + {_or(t.taxes, 'N/A')}",
                _or(t.remaining_seats, "N/A"),
                f"{t.distance:,.0f}",
            )
        return _render(table)

    def format_routes(self, routes: list[RouteInfo]) -> str:
        if not routes:
            return _render(Panel("No routes found.", border_style="yellow"))
        table = Table(title="Available Routes")
        table.add_column("Route")
        table.add_column("Programs")
        table.add_column("Distance", justify="right")
        for r in routes:
            distance = f"{r.distance:,.0f}" if r.distance is not None else "-"
            table.add_row(f"{r.origin} → {r.destination}", ", ".join(r.sources), distance)
        return _render(table)

    def format_programs(self) -> str:
        programs = Table(title="Supported Mileage Programs")
        programs.add_column("Program")
        for source in SUPPORTED_SOURCES:
            programs.add_row(source)
        cabins = Table(title="Cabin Classes")
        cabins.add_column("Code", style="bold")
        cabins.add_column("Cabin")
        for code, name in CABIN_NAMES.items():
            cabins.add_row(code.value, name)
        return _render(programs) + _render(cabins)
