"""Shared test fixtures for the award search tool server."""

import pytest

from awards.models import Availability, AvailabilityTrip


def _availability_payload(
    id="avail-1",
    origin="SFO",
    dest="NRT",
    date="2025-06-01",
    source="aeroplan",
    **cabin_fields,
) -> dict:
    """Build an upstream availability record (PascalCase, flat cabin keys)."""
    data = {
        "ID": id,
        "Route": {"OriginAirport": origin, "DestinationAirport": dest, "Source": source},
        "Date": date,
    }
    data.update(cabin_fields)
    return data


def _trip_payload(**overrides) -> dict:
    """Build an upstream trip record."""
    data = {
        "ID": "trip-1",
        "RouteID": "route-1",
        "AvailabilityID": "avail-1",
        "FlightNumber": "NH7",
        "Distance": 5130,
        "FareClass": "I",
        "AircraftName": "Boeing 777-300ER",
        "AircraftCode": "77W",
        "OriginAirport": "SFO",
        "DestinationAirport": "NRT",
        "DepartsAt": "2025-06-01T11:25:00",
        "ArrivesAt": "2025-06-02T14:55:00",
        "Source": "aeroplan",
        "Order": 0,
        "MileageCost": "75000",
        "Taxes": "$56.00",
        "RemainingSeats": 2,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_availability():
    """Return a factory for parsed Availability records."""

    def _make(**kwargs) -> Availability:
        return Availability.model_validate(_availability_payload(**kwargs))

    return _make


@pytest.fixture
def make_trip():
    """Return a factory for parsed AvailabilityTrip records."""

    def _make(**overrides) -> AvailabilityTrip:
        return AvailabilityTrip.model_validate(_trip_payload(**overrides))

    return _make


@pytest.fixture
def business_saver(make_availability) -> Availability:
    """SFO-NRT with economy and business open, premium and first closed."""
    return make_availability(
        YAvailable=True,
        YMileageCost="35000",
        YTaxes="$56.00",
        YRemainingSeats=9,
        WAvailable=False,
        JAvailable=True,
        JDirect=True,
        JMileageCost="75000",
        JTaxes="$56.00",
        JRemainingSeats=2,
        FAvailable=False,
    )


@pytest.fixture
def availability_data():
    """Return a builder for raw availability dicts as the API sends them."""
    return _availability_payload


@pytest.fixture
def trip_data():
    """Return a builder for raw trip dicts as the API sends them."""
    return _trip_payload
