"""JSON output formatter -- valid JSON suitable for piping to jq."""

from __future__ import annotations

import json
from typing import Optional

from awards.models import (
    CABIN_NAMES,
    SUPPORTED_SOURCES,
    AvailabilityTrip,
    RouteInfo,
    SearchResponse,
)
from awards.output.plain_formatter import DEFAULT_RESULT_LIMIT


class JsonFormatter:
    """Format award search results as pretty-printed JSON."""

    def format_search(
        self,
        response: SearchResponse,
        label: Optional[str] = None,
        limit: int = DEFAULT_RESULT_LIMIT,
        offset: int = 0,
    ) -> str:
        shown = response.data[:limit]
        data = {
            "type": "availability_results",
            "summary": {
                "source": label,
                "count": response.count,
                "shown": len(shown),
                "has_more": response.has_more,
                "cursor": response.cursor,
                "next_skip": offset + response.count if response.has_more else None,
            },
            "results": [a.model_dump(mode="json", by_alias=True) for a in shown],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_trips(self, trips: list[AvailabilityTrip]) -> str:
        data = {
            "type": "flight_details",
            "trips": [t.model_dump(mode="json", by_alias=True) for t in trips],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_routes(self, routes: list[RouteInfo]) -> str:
        data = {
            "type": "routes",
            "routes": [r.model_dump(mode="json") for r in routes],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_programs(self) -> str:
        data = {
            "type": "mileage_programs",
            "programs": list(SUPPORTED_SOURCES),
            "cabins": {code.value: name for code, name in CABIN_NAMES.items()},
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
