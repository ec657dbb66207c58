"""Query-string serialization and response-shape normalization.

The remote API is loosely typed: list endpoints sometimes return a bare
object, sometimes ``{"data": [...]}``, sometimes ``{"data": {...}}``.
Every access-layer operation passes its body through ``extract_payload``
and ``to_collection`` so callers always see a list.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel


def _query_value(value: Any) -> str | None:
    """Render one parameter value, or None if it should not be sent."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        parts = [p for p in (_query_value(v) for v in value) if p]
        return ",".join(parts) if parts else None
    text = str(value)
    return text if text else None


def to_query_params(params: BaseModel) -> dict[str, str]:
    """Serialize only the parameters that are set, under their API names."""
    query: dict[str, str] = {}
    for name, field in type(params).model_fields.items():
        rendered = _query_value(getattr(params, name))
        if rendered is None:
            continue
        query[field.alias or name] = rendered
    return query


def extract_payload(body: Any) -> Any:
    """Use ``body["data"]`` when the API wraps its payload, else the body."""
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


def to_collection(value: Any) -> list:
    """Normalize a payload into a list.

    A sequence becomes a list, a single object a one-element list, and
    ``None`` or an empty mapping an empty list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, dict) and not value:
        return []
    return [value]
