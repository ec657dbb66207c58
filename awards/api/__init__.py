"""Access layer for the Seats.aero Partner API.

Builds queries, issues HTTP calls, recovers from rate limiting, paginates
via cursor and normalizes single-object vs. array responses.
"""

from awards.api.client import SeatsAeroClient
from awards.api.query import extract_payload, to_collection, to_query_params
from awards.api.retry import RateLimitPolicy, parse_retry_after

__all__ = [
    "RateLimitPolicy",
    "SeatsAeroClient",
    "extract_payload",
    "parse_retry_after",
    "to_collection",
    "to_query_params",
]
