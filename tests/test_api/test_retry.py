"""Tests for the rate-limit retry policy."""

from datetime import datetime, timezone

import pytest

from awards.api.retry import RateLimitPolicy, parse_retry_after


class TestParseRetryAfter:
    def test_seconds(self):
        assert parse_retry_after("2") == 2.0
        assert parse_retry_after(" 7 ") == 7.0

    def test_fractional_seconds(self):
        assert parse_retry_after("1.5") == 1.5

    def test_negative_clamped(self):
        assert parse_retry_after("-3") == 0.0

    @pytest.mark.parametrize("value", [None, "", "   ", "soon", "inf", "nan"])
    def test_unreadable(self, value):
        assert parse_retry_after(value) is None

    def test_http_date(self):
        now = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert parse_retry_after("Sun, 01 Jun 2025 12:00:30 GMT", now=now) == 30.0

    def test_http_date_in_past(self):
        now = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert parse_retry_after("Sun, 01 Jun 2025 11:00:00 GMT", now=now) == 0.0


class TestRateLimitPolicy:
    def test_default_single_retry(self):
        policy = RateLimitPolicy()
        assert policy.should_retry(0)
        assert not policy.should_retry(1)

    def test_zero_retries(self):
        assert not RateLimitPolicy(retries=0).should_retry(0)

    def test_header_wins(self):
        policy = RateLimitPolicy()
        assert policy.delay_for(0, "2") == 2.0
        assert policy.delay_for(3, "2") == 2.0

    def test_default_delay_then_backoff(self):
        policy = RateLimitPolicy(retries=3)
        assert policy.delay_for(0) == 5.0
        assert policy.delay_for(1) == 10.0
        assert policy.delay_for(2) == 20.0

    def test_garbage_header_uses_default(self):
        assert RateLimitPolicy().delay_for(0, "later") == 5.0

    def test_long_header_capped(self):
        assert RateLimitPolicy().delay_for(0, "86400") == 60.0

    def test_custom_cap(self):
        assert RateLimitPolicy(max_delay=3.0).delay_for(0, "10") == 3.0

    def test_backoff_capped(self):
        assert RateLimitPolicy(retries=10).delay_for(8) == 60.0

    @pytest.mark.parametrize("value", ["inf", "Infinity", "nan", "-inf"])
    def test_non_finite_header_uses_default(self, value):
        assert RateLimitPolicy().delay_for(0, value) == 5.0
