"""Seats.aero Partner API client.

Wraps the award search API under a single Partner-Authorization key.
Requests are synchronous (``requests``), one in flight at a time. Rate
limiting (HTTP 429) is recovered under a bounded ``RateLimitPolicy``; every
other transport or HTTP failure is logged and re-raised unchanged. The one
translated error is a 403 from the live search endpoint.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, TypeVar
from urllib.parse import quote

import requests

from awards.api.query import extract_payload, to_collection, to_query_params
from awards.api.retry import RateLimitPolicy
from awards.config import DEFAULT_BASE_URL
from awards.errors import LiveSearchAccessError
from awards.models import (
    Availability,
    AvailabilityTrip,
    BulkAvailabilityParameters,
    LiveSearchParameters,
    RouteInfo,
    SearchParameters,
    SearchResponse,
    TripResponse,
)

if TYPE_CHECKING:
    from awards.config import Settings

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 30.0
_DEFAULT_MAX_RETRIES = 3

P = TypeVar("P", SearchParameters, BulkAvailabilityParameters)


def _log_failure(exc: requests.RequestException) -> None:
    """Log whatever diagnostic detail a failed request carries."""
    response = getattr(exc, "response", None)
    if response is not None:
        logger.error("API error: %s - %s", response.status_code, response.reason)
        if response.text:
            logger.error("Response data: %s", response.text)
    elif isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        logger.error("No response received from API: %s", exc)
    else:
        logger.error("Error setting up request: %s", exc)


class SeatsAeroClient:
    """Client for the Seats.aero Partner API.

    Usage::

        with SeatsAeroClient(api_key) as client:
            page = client.cached_search(SearchParameters(...))

    ``rate_limit_retries`` bounds how many times a throttled request is
    re-issued and may not exceed ``max_retries``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = _DEFAULT_TIMEOUT_S,
        max_retries: int = _DEFAULT_MAX_RETRIES,
        rate_limit_retries: int = 1,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("A Seats.aero API key is required")
        if not 0 <= rate_limit_retries <= max_retries:
            raise ValueError(
                f"rate_limit_retries must be between 0 and max_retries ({max_retries})"
            )
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout or _DEFAULT_TIMEOUT_S
        self.max_retries = max_retries
        self.policy = RateLimitPolicy(retries=rate_limit_retries)
        self._sleep = sleep
        self._session = session or requests.Session()
        self._session.headers.update({
            "Partner-Authorization": api_key,
            "Content-Type": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "SeatsAeroClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            rate_limit_retries=settings.rate_limit_retries,
            **kwargs,
        )

    def __enter__(self) -> "SeatsAeroClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json_body: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Issue one request, re-issuing it while the rate-limit policy allows."""
        url = f"{self.base_url}{path}"
        attempt = 0
        while True:
            logger.debug("%s %s params=%s", method, path, params)
            try:
                resp = self._session.request(
                    method, url, params=params, json=json_body, timeout=self.timeout,
                )
            except requests.RequestException as exc:
                _log_failure(exc)
                raise

            if resp.status_code == 429 and self.policy.should_retry(attempt):
                wait = self.policy.delay_for(attempt, resp.headers.get("Retry-After"))
                logger.warning(
                    "Rate limited on %s %s. Retrying after %.1f seconds (%d/%d)...",
                    method, path, wait, attempt + 1, self.policy.retries,
                )
                self._sleep(wait)
                attempt += 1
                continue

            try:
                resp.raise_for_status()
            except requests.HTTPError as exc:
                _log_failure(exc)
                raise

            if not resp.content:
                return None
            try:
                return resp.json()
            except ValueError:
                logger.error("API returned non-JSON for %s %s", method, path)
                raise

    def _get_collection(self, path: str, params: Optional[dict[str, str]] = None) -> tuple[list, Any]:
        body = self._request("GET", path, params=params)
        return to_collection(extract_payload(body)), body

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _search_response(self, items: list, body: Any) -> SearchResponse:
        meta = body if isinstance(body, dict) else {}
        data = [Availability.model_validate(item) for item in items]
        return SearchResponse(
            data=data,
            cursor=meta.get("cursor"),
            count=len(data),
            has_more=meta.get("hasMore") or False,
        )

    def cached_search(self, params: SearchParameters) -> SearchResponse:
        """Search cached award availability across programs."""
        items, body = self._get_collection("/search", to_query_params(params))
        return self._search_response(items, body)

    def bulk_availability(self, params: BulkAvailabilityParameters) -> SearchResponse:
        """Sweep one program's cached availability."""
        query = to_query_params(params)
        query["source"] = params.source.value
        items, body = self._get_collection("/availability", query)
        return self._search_response(items, body)

    def get_trips(self, availability_id: str) -> TripResponse:
        """Fetch flight-level detail for one availability record."""
        items, _ = self._get_collection(f"/trips/{quote(availability_id, safe='')}")
        return TripResponse(data=[AvailabilityTrip.model_validate(i) for i in items])

    def get_routes(
        self,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
    ) -> list[RouteInfo]:
        """List routes, optionally filtered by origin and/or destination."""
        query: dict[str, str] = {}
        if origin:
            query["origin"] = origin.upper()
        if destination:
            query["destination"] = destination.upper()
        items, _ = self._get_collection("/routes", query)
        return [RouteInfo.model_validate(i) for i in items]

    def live_search(self, params: LiveSearchParameters) -> list[AvailabilityTrip]:
        """Query the live (uncached) endpoint.

        Raises LiveSearchAccessError on 403: the endpoint is gated behind a
        commercial agreement.
        """
        body = params.model_dump(mode="json", exclude_none=True)
        try:
            result = self._request("POST", "/live", json_body=body)
        except requests.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 403:
                raise LiveSearchAccessError() from exc
            raise
        return [AvailabilityTrip.model_validate(i) for i in to_collection(extract_payload(result))]

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def iter_search(
        self, params: SearchParameters, max_pages: Optional[int] = None,
    ) -> Iterator[SearchResponse]:
        """Yield cached-search pages, following the cursor."""
        return self._paginate(self.cached_search, params, max_pages)

    def iter_bulk_availability(
        self, params: BulkAvailabilityParameters, max_pages: Optional[int] = None,
    ) -> Iterator[SearchResponse]:
        """Yield bulk-availability pages, following the cursor."""
        return self._paginate(self.bulk_availability, params, max_pages)

    @staticmethod
    def _paginate(
        fetch: Callable[[P], SearchResponse], params: P, max_pages: Optional[int],
    ) -> Iterator[SearchResponse]:
        seen = params.skip or 0
        pages = 0
        while True:
            page = fetch(params)
            pages += 1
            yield page
            seen += page.count
            if not (page.has_more and page.cursor and page.data):
                return
            if max_pages is not None and pages >= max_pages:
                return
            params = params.model_copy(update={"cursor": page.cursor, "skip": seen})
