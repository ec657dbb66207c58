"""Stateless tool dispatch: validate, execute, format, respond.

``ToolDispatcher.call_tool`` is the error boundary for tool invocations.
Whatever fails (validation, transport, formatting) comes back as a single
``Error: <message>`` text block, never as an exception.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from awards.errors import ToolArgumentError, UnknownToolError
from awards.output.plain_formatter import PlainFormatter
from awards.tools.catalog import TOOL_DEFINITIONS, ToolDefinition, get_tool

if TYPE_CHECKING:
    from awards.api.client import SeatsAeroClient
    from awards.models import BulkAvailabilityParameters, SearchParameters
    from awards.tools.catalog import FlightDetailsArguments, RouteArguments

logger = logging.getLogger(__name__)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """Response envelope: one text block, flagged when it reports an error."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str, is_error: bool = False) -> "ToolResponse":
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def _validation_message(tool: str, exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err["loc"]) or "arguments"
        problems.append(f"{loc}: {err['msg']}")
    return f"Invalid arguments for {tool}: " + "; ".join(problems)


class ToolDispatcher:
    """Route tool calls to the access layer and render the results."""

    def __init__(
        self,
        client: SeatsAeroClient,
        formatter: Optional[PlainFormatter] = None,
    ) -> None:
        self._client = client
        self._formatter = formatter or PlainFormatter()
        self._handlers: dict[str, Callable[[Any], str]] = {
            "search_award_availability": self._search_award_availability,
            "bulk_availability": self._bulk_availability,
            "get_flight_details": self._get_flight_details,
            "get_routes": self._get_routes,
            "list_mileage_programs": self._list_mileage_programs,
        }

    @property
    def tools(self) -> tuple[ToolDefinition, ...]:
        return TOOL_DEFINITIONS

    def list_tools(self) -> list[dict[str, Any]]:
        return [tool.to_dict() for tool in TOOL_DEFINITIONS]

    def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> ToolResponse:
        """Run one tool invocation to completion; never raises."""
        try:
            args = self._validate(name, arguments)
            text = self._handlers[name](args)
        except Exception as exc:
            message = str(exc) or "An unknown error occurred"
            logger.warning("Tool %s failed: %s", name, message)
            logger.debug("Tool %s traceback", name, exc_info=True)
            return ToolResponse.from_text(f"Error: {message}", is_error=True)
        return ToolResponse.from_text(text)

    def _validate(self, name: str, arguments: Optional[dict[str, Any]]) -> BaseModel:
        spec = get_tool(name)
        if spec is None or name not in self._handlers:
            raise UnknownToolError(name)
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ToolArgumentError(
                f"Invalid arguments for {name}: expected an object, got {type(arguments).__name__}"
            )
        try:
            return spec.arguments.model_validate(arguments)
        except ValidationError as exc:
            raise ToolArgumentError(_validation_message(name, exc)) from exc

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _search_award_availability(self, params: SearchParameters) -> str:
        response = self._client.cached_search(params)
        return self._formatter.format_search(response, offset=params.skip or 0)

    def _bulk_availability(self, params: BulkAvailabilityParameters) -> str:
        response = self._client.bulk_availability(params)
        return self._formatter.format_search(
            response, label=params.source.value, offset=params.skip or 0,
        )

    def _get_flight_details(self, args: FlightDetailsArguments) -> str:
        response = self._client.get_trips(args.availability_id)
        return self._formatter.format_trips(response.data)

    def _get_routes(self, args: RouteArguments) -> str:
        routes = self._client.get_routes(origin=args.origin, destination=args.destination)
        return self._formatter.format_routes(routes)

    def _list_mileage_programs(self, args: Any) -> str:
        return self._formatter.format_programs()
