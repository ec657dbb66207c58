"""Award search CLI -- Seats.aero award availability as MCP tools.

Provides commands for serving the tools over MCP stdio, listing and
invoking tools locally, and running availability searches from a shell.
"""

import json as json_mod
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
import yaml
from pydantic import ValidationError

from awards.errors import ConfigError

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="awards",
    help="Award availability search over the Seats.aero Partner API -- MCP tools and CLI.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Global option types
# ---------------------------------------------------------------------------

JsonFlag = Annotated[bool, typer.Option("--json", help="Output as JSON.")]
PlainFlag = Annotated[bool, typer.Option("--plain", help="Output as plain text (no color).")]
VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output.")]
QuietFlag = Annotated[bool, typer.Option("--quiet", "-q", help="Suppress non-essential output.")]
CabinOpt = Annotated[Optional[str], typer.Option("--cabin", "-c", help="Cabin class: Y, W, J or F.")]
DirectFlag = Annotated[bool, typer.Option("--direct", help="Only show direct flights.")]
PagesOpt = Annotated[int, typer.Option("--pages", min=1, help="Result pages to fetch, following the cursor.")]
LimitOpt = Annotated[int, typer.Option("--limit", "-n", min=1, help="Maximum results to display.")]
CursorOpt = Annotated[Optional[str], typer.Option("--cursor", help="Cursor from a previous page.")]
SkipOpt = Annotated[Optional[int], typer.Option("--skip", min=0, help="Results already seen.")]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_format(json_flag: bool = False, plain_flag: bool = False) -> str:
    """Determine output format: json > plain > TTY auto-detect > rich."""
    if json_flag:
        return "json"
    if plain_flag:
        return "plain"
    if sys.stdout.isatty():
        return "rich"
    return "plain"


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on verbosity flags. Logs go to stderr."""
    if quiet:
        logging.basicConfig(level=logging.ERROR, stream=sys.stderr)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)
    else:
        logging.basicConfig(level=logging.WARNING, stream=sys.stderr)


def _error_panel(message: str) -> None:
    """Print an error message, using Rich panel if available."""
    try:
        from rich.console import Console
        from rich.panel import Panel

        console = Console(stderr=True)
        console.print(Panel(message, title="Error", border_style="red"))
    except Exception:
        typer.echo(f"Error: {message}", err=True)


def _validation_panel(exc: ValidationError) -> None:
    lines = ["Invalid search options:"]
    for err in exc.errors():
        loc = " -> ".join(str(x) for x in err["loc"])
        lines.append(f"  {loc}: {err['msg']}")
    _error_panel("\n".join(lines))


def _open_client():
    """Build an API client from the environment; exit 1 without a credential."""
    from awards.api.client import SeatsAeroClient
    from awards.config import load_settings

    try:
        settings = load_settings()
    except ConfigError as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=1)
    return SeatsAeroClient.from_settings(settings)


def _load_arguments(args: Optional[str], file: Optional[str]) -> dict[str, Any]:
    """Parse tool arguments from --args (JSON) and/or --file (YAML or JSON)."""
    merged: dict[str, Any] = {}

    if file:
        path = Path(file)
        if not path.exists():
            raise typer.BadParameter(f"File not found: {file}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            msg = f"YAML parse error in {file}"
            if getattr(exc, "problem_mark", None) is not None:
                mark = exc.problem_mark
                msg += f" at line {mark.line + 1}, column {mark.column + 1}"
            raise typer.BadParameter(msg)
        if raw is not None and not isinstance(raw, dict):
            raise typer.BadParameter(
                f"Expected a mapping of arguments in {file}, got {type(raw).__name__}"
            )
        merged.update(raw or {})

    if args:
        try:
            raw = json_mod.loads(args)
        except ValueError as exc:
            raise typer.BadParameter(f"--args is not valid JSON: {exc}")
        if not isinstance(raw, dict):
            raise typer.BadParameter("--args must be a JSON object")
        merged.update(raw)

    return merged


def _merge_pages(pages: list):
    """Combine cursor-followed pages into one response for display."""
    from awards.models import SearchResponse

    data = [a for page in pages for a in page.data]
    last = pages[-1]
    return SearchResponse(data=data, cursor=last.cursor, count=len(data), has_more=last.has_more)


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


@app.command()
def serve(
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Run the MCP tool server on stdio."""
    _setup_logging(verbose, quiet)
    client = _open_client()

    import anyio

    from awards.server import serve as serve_stdio
    from awards.tools.dispatcher import ToolDispatcher

    try:
        with client:
            anyio.run(serve_stdio, ToolDispatcher(client))
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        _error_panel(f"Fatal error: {exc}")
        raise typer.Exit(code=1)


@app.command()
def tools(
    json: JsonFlag = False,
    plain: PlainFlag = False,
) -> None:
    """List the tools the server advertises."""
    from awards.tools.catalog import TOOL_DEFINITIONS

    fmt = _get_format(json, plain)
    if fmt == "json":
        typer.echo(json_mod.dumps([t.to_dict() for t in TOOL_DEFINITIONS], indent=2))
        return

    if fmt == "rich":
        from rich.console import Console
        from rich.table import Table

        table = Table(title="Tools")
        table.add_column("Name", style="bold")
        table.add_column("Required")
        table.add_column("Description")
        for t in TOOL_DEFINITIONS:
            table.add_row(t.name, ", ".join(t.input_schema.get("required", [])) or "-", t.description)
        Console().print(table)
        return

    for t in TOOL_DEFINITIONS:
        required = ", ".join(t.input_schema.get("required", [])) or "none"
        typer.echo(f"{t.name} (required: {required})\n  {t.description}")


@app.command()
def call(
    tool: str = typer.Argument(help="Tool name, e.g. search_award_availability"),
    args: Annotated[Optional[str], typer.Option("--args", "-a", help="Tool arguments as a JSON object.")] = None,
    file: Annotated[Optional[str], typer.Option("--file", "-f", help="YAML or JSON file of tool arguments.")] = None,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Invoke one tool through the dispatcher and print its text response."""
    _setup_logging(verbose, quiet)
    arguments = _load_arguments(args, file)
    client = _open_client()

    from awards.tools.dispatcher import ToolDispatcher

    with client:
        response = ToolDispatcher(client).call_tool(tool, arguments)
    typer.echo(response.text)
    if response.is_error:
        raise typer.Exit(code=2)


# ---------------------------------------------------------------------------
# Search commands
# ---------------------------------------------------------------------------


@app.command()
def search(
    origins: Annotated[str, typer.Option("--origins", "-o", help="Origin airports, comma-separated.")],
    destinations: Annotated[str, typer.Option("--destinations", "-d", help="Destination airports, comma-separated.")],
    start: Annotated[str, typer.Option("--start", help="Start date, YYYY-MM-DD.")],
    end: Annotated[str, typer.Option("--end", help="End date, YYYY-MM-DD.")],
    cabin: CabinOpt = None,
    source: Annotated[Optional[str], typer.Option("--source", "-s", help="Mileage program.")] = None,
    direct: DirectFlag = False,
    min_seats: Annotated[Optional[int], typer.Option("--min-seats", help="Minimum seats available.")] = None,
    max_miles: Annotated[Optional[int], typer.Option("--max-miles", help="Maximum miles cost.")] = None,
    cursor: CursorOpt = None,
    skip: SkipOpt = None,
    pages: PagesOpt = 1,
    limit: LimitOpt = 10,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Search cached award availability across programs."""
    _setup_logging(verbose, quiet)
    from awards.models import SearchParameters
    from awards.output import get_formatter

    try:
        params = SearchParameters(
            origins=origins,
            destinations=destinations,
            start_date=start,
            end_date=end,
            cabin=cabin,
            source=source,
            direct=True if direct else None,
            min_seats=min_seats,
            max_miles=max_miles,
            cursor=cursor,
            skip=skip,
        )
    except ValidationError as exc:
        _validation_panel(exc)
        raise typer.Exit(code=2)

    client = _open_client()
    try:
        with client:
            results = list(client.iter_search(params, max_pages=pages))
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_search(_merge_pages(results), limit=limit, offset=params.skip or 0))
    except typer.Exit:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def bulk(
    source: str = typer.Argument(help="Mileage program, e.g. aeroplan"),
    origins: Annotated[Optional[str], typer.Option("--origins", "-o", help="Origin airports, comma-separated.")] = None,
    destinations: Annotated[Optional[str], typer.Option("--destinations", "-d", help="Destination airports, comma-separated.")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date, YYYY-MM-DD.")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date, YYYY-MM-DD.")] = None,
    cabin: CabinOpt = None,
    direct: DirectFlag = False,
    cursor: CursorOpt = None,
    skip: SkipOpt = None,
    pages: PagesOpt = 1,
    limit: LimitOpt = 10,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Sweep one mileage program's cached availability."""
    _setup_logging(verbose, quiet)
    from awards.models import BulkAvailabilityParameters
    from awards.output import get_formatter

    try:
        params = BulkAvailabilityParameters(
            source=source,
            origins=origins,
            destinations=destinations,
            start_date=start,
            end_date=end,
            cabin=cabin,
            direct=True if direct else None,
            cursor=cursor,
            skip=skip,
        )
    except ValidationError as exc:
        _validation_panel(exc)
        raise typer.Exit(code=2)

    client = _open_client()
    try:
        with client:
            results = list(client.iter_bulk_availability(params, max_pages=pages))
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_search(
            _merge_pages(results), label=params.source.value, limit=limit, offset=params.skip or 0,
        ))
    except typer.Exit:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def trips(
    availability_id: str = typer.Argument(help="Availability ID from a search result"),
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Show flight-level detail for one availability result."""
    _setup_logging(verbose, quiet)
    from awards.output import get_formatter

    client = _open_client()
    try:
        with client:
            response = client.get_trips(availability_id)
        typer.echo(get_formatter(_get_format(json, plain)).format_trips(response.data))
    except typer.Exit:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def routes(
    origin: Annotated[Optional[str], typer.Option("--origin", help="Origin airport code.")] = None,
    destination: Annotated[Optional[str], typer.Option("--destination", help="Destination airport code.")] = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """List routes and the programs that publish award space on them."""
    _setup_logging(verbose, quiet)
    from awards.output import get_formatter

    client = _open_client()
    try:
        with client:
            found = client.get_routes(origin=origin, destination=destination)
        typer.echo(get_formatter(_get_format(json, plain)).format_routes(found))
    except typer.Exit:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def programs(
    json: JsonFlag = False,
    plain: PlainFlag = False,
) -> None:
    """List supported mileage programs and cabin codes."""
    from awards.output import get_formatter

    typer.echo(get_formatter(_get_format(json, plain)).format_programs())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
