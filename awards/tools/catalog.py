"""Static tool catalog: names, descriptions and argument schemas.

Each tool's JSON schema is generated from the pydantic model its arguments
are validated against, so the advertised contract and the validation rules
cannot drift apart. The catalog is built once at import and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from awards.models import BulkAvailabilityParameters, SearchParameters


# --- Argument models for tools without a search-parameter shape ---


class FlightDetailsArguments(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    availability_id: str = Field(
        min_length=1,
        alias="availabilityId",
        description="The availability ID from a search result",
    )

    @field_validator("availability_id", mode="before")
    @classmethod
    def strip_id(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class RouteArguments(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: Optional[str] = Field(default=None, description="Origin airport code")
    destination: Optional[str] = Field(default=None, description="Destination airport code")

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def uppercase_codes(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper() or None
        return v


class NoArguments(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Catalog ---


class ToolDefinition(BaseModel):
    """A tool as advertised on listing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class ToolSpec:
    """A tool and the model its arguments are validated against."""

    name: str
    description: str
    arguments: type[BaseModel]

    def definition(self) -> ToolDefinition:
        schema = self.arguments.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return ToolDefinition(name=self.name, description=self.description, input_schema=schema)


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="search_award_availability",
        description=(
            "Search for award availability across multiple mileage programs. "
            "Best for specific route and date searches."
        ),
        arguments=SearchParameters,
    ),
    ToolSpec(
        name="bulk_availability",
        description=(
            "Get bulk availability data for a specific mileage program. "
            "Best for broad searches across regions."
        ),
        arguments=BulkAvailabilityParameters,
    ),
    ToolSpec(
        name="get_flight_details",
        description="Get detailed flight information for a specific availability result",
        arguments=FlightDetailsArguments,
    ),
    ToolSpec(
        name="get_routes",
        description="Get available routes and mileage programs between airports",
        arguments=RouteArguments,
    ),
    ToolSpec(
        name="list_mileage_programs",
        description="List all supported mileage programs",
        arguments=NoArguments,
    ),
)

_TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}

TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = tuple(spec.definition() for spec in TOOLS)


def get_tool(name: str) -> Optional[ToolSpec]:
    return _TOOLS_BY_NAME.get(name)
