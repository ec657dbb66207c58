"""Tests for the tool dispatcher (client mocked)."""

from unittest.mock import MagicMock

import pytest
import requests

from awards.api.client import SeatsAeroClient
from awards.errors import LiveSearchAccessError
from awards.models import (
    BulkAvailabilityParameters,
    MileageProgram,
    RouteInfo,
    SearchParameters,
    SearchResponse,
    TripResponse,
)
from awards.output.plain_formatter import SEPARATOR
from awards.tools.dispatcher import ToolDispatcher, ToolResponse

SEARCH_ARGS = {
    "origins": ["SFO"],
    "destinations": ["NRT"],
    "startDate": "2025-06-01",
    "endDate": "2025-06-30",
}


@pytest.fixture
def client():
    return MagicMock(spec=SeatsAeroClient)


@pytest.fixture
def dispatcher(client):
    return ToolDispatcher(client)


def _page(records, **kwargs) -> SearchResponse:
    return SearchResponse(data=records, count=len(records), **kwargs)


class TestListTools:
    def test_five_definitions(self, dispatcher):
        tools = dispatcher.list_tools()
        assert len(tools) == 5
        assert all("inputSchema" in t for t in tools)


class TestSearchAwardAvailability:
    def test_shows_first_ten(self, dispatcher, client, make_availability):
        records = [make_availability(id=f"a{i}", JAvailable=True) for i in range(25)]
        client.cached_search.return_value = _page(records)
        response = dispatcher.call_tool("search_award_availability", SEARCH_ARGS)
        assert not response.is_error
        assert len(response.content) == 1
        assert response.text.startswith("Found 25 results. Showing first 10")
        assert len(response.text.split(SEPARATOR)) == 10

    def test_arguments_validated_into_params(self, dispatcher, client):
        client.cached_search.return_value = _page([])
        dispatcher.call_tool("search_award_availability", {**SEARCH_ARGS, "cabin": "j", "minSeats": 2})
        (params,), _ = client.cached_search.call_args
        assert isinstance(params, SearchParameters)
        assert params.cabin.value == "J"
        assert params.min_seats == 2

    def test_empty(self, dispatcher, client):
        client.cached_search.return_value = _page([])
        response = dispatcher.call_tool("search_award_availability", SEARCH_ARGS)
        assert response.text == "No availability found for the specified search criteria."
        assert not response.is_error

    def test_missing_start_date(self, dispatcher, client):
        args = {k: v for k, v in SEARCH_ARGS.items() if k != "startDate"}
        response = dispatcher.call_tool("search_award_availability", args)
        assert response.is_error
        assert response.text.startswith("Error: Invalid arguments for search_award_availability")
        assert "startDate" in response.text
        client.cached_search.assert_not_called()

    def test_next_skip_includes_offset(self, dispatcher, client, make_availability):
        client.cached_search.return_value = _page(
            [make_availability(YAvailable=True)], has_more=True, cursor="c2",
        )
        response = dispatcher.call_tool(
            "search_award_availability", {**SEARCH_ARGS, "cursor": "c1", "skip": 10},
        )
        assert 'cursor="c2" and skip=11' in response.text


class TestBulkAvailability:
    def test_labelled_by_source(self, dispatcher, client, make_availability):
        client.bulk_availability.return_value = _page([make_availability(YAvailable=True)] * 3)
        response = dispatcher.call_tool("bulk_availability", {"source": "aeroplan"})
        assert response.text.startswith("Found 3 results for aeroplan. Showing first 3:")
        (params,), _ = client.bulk_availability.call_args
        assert isinstance(params, BulkAvailabilityParameters)
        assert params.source is MileageProgram.AEROPLAN

    def test_empty(self, dispatcher, client):
        client.bulk_availability.return_value = _page([])
        response = dispatcher.call_tool("bulk_availability", {"source": "united"})
        assert response.text == "No availability found for united."

    def test_unknown_source(self, dispatcher, client):
        response = dispatcher.call_tool("bulk_availability", {"source": "pan-am"})
        assert response.is_error
        assert response.text.startswith("Error: Invalid arguments for bulk_availability")
        client.bulk_availability.assert_not_called()


class TestGetFlightDetails:
    def test_trips(self, dispatcher, client, make_trip):
        client.get_trips.return_value = TripResponse(data=[make_trip()])
        response = dispatcher.call_tool("get_flight_details", {"availabilityId": " avail-1 "})
        client.get_trips.assert_called_once_with("avail-1")
        assert response.text.startswith("Flight Details:\n\nFlight: NH7")

    def test_fractional_distance(self, dispatcher, client, make_trip):
        client.get_trips.return_value = TripResponse(data=[make_trip(Distance=812.7)])
        response = dispatcher.call_tool("get_flight_details", {"availabilityId": "avail-1"})
        assert not response.is_error
        assert "Distance: 812.7 miles" in response.text

    def test_no_trips(self, dispatcher, client):
        client.get_trips.return_value = TripResponse()
        response = dispatcher.call_tool("get_flight_details", {"availabilityId": "x"})
        assert response.text == "No flight details found for this availability ID."

    def test_missing_id(self, dispatcher, client):
        response = dispatcher.call_tool("get_flight_details", {})
        assert response.is_error
        assert "availabilityId" in response.text


class TestGetRoutes:
    def test_filters_passed(self, dispatcher, client):
        client.get_routes.return_value = [RouteInfo(origin="SFO", destination="NRT", sources=["aeroplan"])]
        response = dispatcher.call_tool("get_routes", {"origin": "sfo"})
        client.get_routes.assert_called_once_with(origin="SFO", destination=None)
        assert response.text == "Available Routes:\nSFO → NRT: aeroplan"

    def test_no_routes(self, dispatcher, client):
        client.get_routes.return_value = []
        assert dispatcher.call_tool("get_routes").text == "No routes found."


class TestListMileagePrograms:
    def test_no_network(self, dispatcher, client):
        response = dispatcher.call_tool("list_mileage_programs", {})
        assert response.text.startswith("Supported Mileage Programs:\n• aeroplan")
        assert "• F = First" in response.text
        assert client.method_calls == []

    def test_extra_arguments_ignored(self, dispatcher):
        response = dispatcher.call_tool("list_mileage_programs", {"verbose": True})
        assert not response.is_error


class TestErrorBoundary:
    def test_unknown_tool(self, dispatcher):
        response = dispatcher.call_tool("book_flight", {})
        assert response.is_error
        assert response.text == "Error: Unknown tool: book_flight"

    def test_non_object_arguments(self, dispatcher):
        response = dispatcher.call_tool("get_routes", ["SFO"])
        assert response.is_error
        assert "expected an object" in response.text

    def test_http_error_message(self, dispatcher, client):
        client.cached_search.side_effect = requests.HTTPError("500 Server Error: boom")
        response = dispatcher.call_tool("search_award_availability", SEARCH_ARGS)
        assert response.is_error
        assert response.text == "Error: 500 Server Error: boom"

    def test_domain_error_message(self, dispatcher, client):
        client.get_trips.side_effect = LiveSearchAccessError()
        response = dispatcher.call_tool("get_flight_details", {"availabilityId": "x"})
        assert response.text.startswith("Error: Live Search requires a commercial agreement")

    def test_empty_message_fallback(self, dispatcher, client):
        client.get_routes.side_effect = RuntimeError()
        response = dispatcher.call_tool("get_routes", {})
        assert response.text == "Error: An unknown error occurred"

    def test_later_calls_unaffected(self, dispatcher, client):
        client.get_routes.side_effect = [requests.ConnectionError("down"), []]
        assert dispatcher.call_tool("get_routes").is_error
        second = dispatcher.call_tool("get_routes")
        assert not second.is_error
        assert second.text == "No routes found."


class TestToolResponse:
    def test_wire_shape(self):
        assert ToolResponse.from_text("hi").to_dict() == {
            "content": [{"type": "text", "text": "hi"}],
            "isError": False,
        }
