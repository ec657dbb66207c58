"""Domain models for the award search tool server.

Pydantic models for search parameters, award availability records,
flight-level trip records and route listings. Upstream JSON uses PascalCase
keys (``OriginAirport``, ``YAvailable``) and tool arguments use camelCase
(``startDate``); aliases map both onto snake_case attributes.
"""

from datetime import date as Date
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# --- Enums ---


class CabinCode(str, Enum):
    """Cabin class codes used by the award search API."""

    ECONOMY = "Y"
    PREMIUM_ECONOMY = "W"
    BUSINESS = "J"
    FIRST = "F"


CABIN_NAMES: dict[CabinCode, str] = {
    CabinCode.ECONOMY: "Economy",
    CabinCode.PREMIUM_ECONOMY: "Premium Economy",
    CabinCode.BUSINESS: "Business",
    CabinCode.FIRST: "First",
}


class MileageProgram(str, Enum):
    """Mileage programs whose award inventory can be searched."""

    AEROPLAN = "aeroplan"
    AEROMEXICO = "aeromexico"
    ALASKA = "alaska"
    AMERICAN = "american"
    AVIANCA = "avianca"
    BRITISHAIRWAYS = "britishairways"
    CATHAY = "cathay"
    DELTA = "delta"
    EMIRATES = "emirates"
    ETIHAD = "etihad"
    FLYINGBLUE = "flyingblue"
    FRONTIER = "frontier"
    IBERIA = "iberia"
    JETBLUE = "jetblue"
    KOREAN = "korean"
    LIFEMILES = "lifemiles"
    QANTAS = "qantas"
    QATAR = "qatar"
    SAS = "sas"
    SINGAPORE = "singapore"
    SOUTHWEST = "southwest"
    TURKISH = "turkish"
    UNITED = "united"
    VELOCITY = "velocity"
    VIRGIN = "virgin"


SUPPORTED_SOURCES: tuple[str, ...] = tuple(p.value for p in MileageProgram)


# --- Validation helpers ---


def _split_codes(value: Any) -> Any:
    """Accept "SFO,LAX" as well as ["sfo", "lax"]; upper-case and drop blanks."""
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [
            c.strip().upper() if isinstance(c, str) else c
            for c in value
            if not (isinstance(c, str) and not c.strip())
        ]
    return value


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


def _upper(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


def _as_text(value: Any) -> Any:
    """Upstream costs arrive as strings or numbers; empty means unknown."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# --- Search parameters ---


class SearchParameters(_Model):
    """Targeted search across routes and a date window.

    ``start_date <= end_date`` is a precondition of the remote API and is
    not checked here.
    """

    origins: list[str] = Field(
        min_length=1,
        description='Array of origin airport codes (e.g., ["SFO", "LAX"])',
    )
    destinations: list[str] = Field(
        min_length=1, description="Array of destination airport codes"
    )
    start_date: Date = Field(alias="startDate", description="Start date in YYYY-MM-DD format")
    end_date: Date = Field(alias="endDate", description="End date in YYYY-MM-DD format")
    cabin: Optional[CabinCode] = Field(
        default=None,
        description="Cabin class: Y=Economy, W=Premium Economy, J=Business, F=First",
    )
    source: Optional[MileageProgram] = Field(
        default=None,
        description=f"Specific mileage program. Options: {', '.join(SUPPORTED_SOURCES)}",
    )
    direct: Optional[bool] = Field(default=None, description="Only show direct flights")
    min_seats: Optional[int] = Field(
        default=None, ge=1, alias="minSeats", description="Minimum number of available seats"
    )
    max_miles: Optional[int] = Field(
        default=None, ge=0, alias="maxMiles", description="Maximum miles cost"
    )
    cursor: Optional[str] = Field(
        default=None, description="Pagination cursor from a previous result page"
    )
    skip: Optional[int] = Field(
        default=None, ge=0, description="Number of results already seen when paging"
    )

    @field_validator("origins", "destinations", mode="before")
    @classmethod
    def split_airports(cls, v: Any) -> Any:
        return _split_codes(v)

    @field_validator("source", mode="before")
    @classmethod
    def lowercase_source(cls, v: Any) -> Any:
        return _lower(v)

    @field_validator("cabin", mode="before")
    @classmethod
    def uppercase_cabin(cls, v: Any) -> Any:
        return _upper(v)


class BulkAvailabilityParameters(_Model):
    """Broad sweep of one mileage program's inventory."""

    source: MileageProgram = Field(
        description=f"Mileage program. Options: {', '.join(SUPPORTED_SOURCES)}"
    )
    origins: Optional[list[str]] = Field(
        default=None, description="Array of origin airport codes"
    )
    destinations: Optional[list[str]] = Field(
        default=None, description="Array of destination airport codes"
    )
    start_date: Optional[Date] = Field(
        default=None, alias="startDate", description="Start date in YYYY-MM-DD format"
    )
    end_date: Optional[Date] = Field(
        default=None, alias="endDate", description="End date in YYYY-MM-DD format"
    )
    cabin: Optional[CabinCode] = Field(default=None, description="Cabin class")
    direct: Optional[bool] = Field(default=None, description="Only show direct flights")
    cursor: Optional[str] = Field(
        default=None, description="Pagination cursor from a previous result page"
    )
    skip: Optional[int] = Field(
        default=None, ge=0, description="Number of results already seen when paging"
    )

    @field_validator("origins", "destinations", mode="before")
    @classmethod
    def split_airports(cls, v: Any) -> Any:
        return _split_codes(v)

    @field_validator("source", mode="before")
    @classmethod
    def lowercase_source(cls, v: Any) -> Any:
        return _lower(v)

    @field_validator("cabin", mode="before")
    @classmethod
    def uppercase_cabin(cls, v: Any) -> Any:
        return _upper(v)


class LiveSearchParameters(_Model):
    """Single route/date query against the live (uncached) endpoint."""

    origin: str = Field(min_length=3, max_length=4)
    destination: str = Field(min_length=3, max_length=4)
    date: Date
    source: MileageProgram
    cabin: Optional[CabinCode] = None

    @field_validator("origin", "destination", "cabin", mode="before")
    @classmethod
    def uppercase_codes(cls, v: Any) -> Any:
        return _upper(v)

    @field_validator("source", mode="before")
    @classmethod
    def lowercase_source(cls, v: Any) -> Any:
        return _lower(v)


# --- Availability records ---


# Upstream flat-field suffix -> CabinAvailability attribute
_CABIN_FIELDS = {
    "Available": "available",
    "Direct": "direct",
    "MileageCost": "mileage_cost",
    "RemainingSeats": "remaining_seats",
    "Taxes": "taxes",
}


class CabinAvailability(_Model):
    """What is known about one cabin. ``None`` everywhere means unknown."""

    available: Optional[bool] = None
    direct: Optional[bool] = None
    mileage_cost: Optional[str] = None
    remaining_seats: Optional[int] = None
    taxes: Optional[str] = None

    @field_validator("mileage_cost", "taxes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)

    @property
    def is_available(self) -> bool:
        return self.available is True


class Route(_Model):
    """Origin/destination pair within one mileage program."""

    origin_airport: str = Field(alias="OriginAirport")
    destination_airport: str = Field(alias="DestinationAirport")
    source: str = Field(alias="Source")


class Availability(_Model):
    """Award availability for one route, date and program, per cabin."""

    id: str = Field(alias="ID")
    route: Route = Field(alias="Route")
    date: str = Field(alias="Date")
    cabins: dict[CabinCode, CabinAvailability] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fold_cabin_fields(cls, data: Any) -> Any:
        """Fold the flat ``YAvailable``/``JMileageCost``/... keys into ``cabins``."""
        if not isinstance(data, dict) or "cabins" in data:
            return data
        data = dict(data)
        cabins: dict[CabinCode, dict[str, Any]] = {}
        for code in CabinCode:
            fields = {}
            for suffix, name in _CABIN_FIELDS.items():
                key = f"{code.value}{suffix}"
                if key in data:
                    fields[name] = data.pop(key)
            cabins[code] = fields
        data["cabins"] = cabins
        return data

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    def cabin(self, code: CabinCode) -> CabinAvailability:
        """Return the record for a cabin; unknown cabins get an all-None record."""
        return self.cabins.get(code) or CabinAvailability()

    @property
    def available_cabins(self) -> list[CabinCode]:
        return [code for code in CabinCode if self.cabin(code).is_available]


class AvailabilityTrip(_Model):
    """One flight segment behind an availability record."""

    id: str = Field(alias="ID")
    route_id: str = Field(alias="RouteID")
    availability_id: str = Field(alias="AvailabilityID")
    flight_number: str = Field(alias="FlightNumber")
    distance: float = Field(alias="Distance")
    fare_class: str = Field(alias="FareClass")
    aircraft_name: str = Field(alias="AircraftName")
    aircraft_code: str = Field(alias="AircraftCode")
    origin_airport: str = Field(alias="OriginAirport")
    destination_airport: str = Field(alias="DestinationAirport")
    departs_at: datetime = Field(alias="DepartsAt")
    arrives_at: datetime = Field(alias="ArrivesAt")
    source: str = Field(alias="Source")
    order: int = Field(alias="Order")
    mileage_cost: Optional[str] = Field(default=None, alias="MileageCost")
    taxes: Optional[str] = Field(default=None, alias="Taxes")
    remaining_seats: Optional[int] = Field(default=None, alias="RemainingSeats")

    @field_validator("id", "route_id", "availability_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("mileage_cost", "taxes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)


class RouteInfo(_Model):
    """A route and the programs that publish award space on it."""

    origin: str = Field(validation_alias=AliasChoices("origin", "OriginAirport"))
    destination: str = Field(
        validation_alias=AliasChoices("destination", "DestinationAirport")
    )
    sources: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("sources", "Sources", "Source")
    )
    distance: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("distance", "Distance")
    )

    @field_validator("sources", mode="before")
    @classmethod
    def wrap_single_source(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


# --- Responses ---


class SearchResponse(_Model):
    """One page of availability results."""

    data: list[Availability] = Field(default_factory=list)
    cursor: Optional[str] = None
    count: int = 0
    has_more: bool = Field(default=False, alias="hasMore")

    @field_validator("cursor", mode="before")
    @classmethod
    def coerce_cursor(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("has_more", mode="before")
    @classmethod
    def default_has_more(cls, v: Any) -> Any:
        return False if v is None else v


class TripResponse(_Model):
    """Flight segments behind one availability record."""

    data: list[AvailabilityTrip] = Field(default_factory=list)
