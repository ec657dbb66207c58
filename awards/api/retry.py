"""Bounded retry policy for rate-limited (HTTP 429) requests."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

logger = logging.getLogger(__name__)

_DEFAULT_DELAY_S = 5.0
_MAX_DELAY_S = 60.0


def parse_retry_after(value: Optional[str], now: Optional[datetime] = None) -> Optional[float]:
    """Parse a Retry-After header: delta-seconds or an HTTP date.

    Returns None when the header is missing, unreadable or not finite.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            logger.debug("Non-finite Retry-After header: %r", text)
            return None
        return max(0.0, seconds)
    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        logger.debug("Unreadable Retry-After header: %r", text)
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


@dataclass(frozen=True)
class RateLimitPolicy:
    """How often and how long to wait before re-issuing a throttled request.

    ``retries`` re-issues are allowed per request; the default of 1 gives a
    single delayed retry, after which a further 429 is raised to the caller.
    The server's Retry-After wins when present. Without it the first retry
    waits ``default_delay`` and later ones back off exponentially. No wait
    exceeds ``max_delay``.
    """

    retries: int = 1
    default_delay: float = _DEFAULT_DELAY_S
    max_delay: float = _MAX_DELAY_S

    def should_retry(self, attempt: int) -> bool:
        """``attempt`` counts retries already made for this request."""
        return attempt < self.retries

    def delay_for(self, attempt: int, retry_after: Optional[str] = None) -> float:
        """Seconds to wait before retry number ``attempt + 1``."""
        seconds = parse_retry_after(retry_after)
        if seconds is None:
            seconds = self.default_delay * (2 ** attempt)
        if seconds > self.max_delay:
            logger.warning("Capping rate-limit wait of %.1fs at %.1fs", seconds, self.max_delay)
            return self.max_delay
        return seconds
