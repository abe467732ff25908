"""Tests for the poll backoff schedule."""

import pytest

from store_app_importer.core.resilience import ExponentialBackoff


# ═══════════════════════════════════════════
# ExponentialBackoff Tests
# ═══════════════════════════════════════════


class TestExponentialBackoff:
    def test_should_continue_within_limit(self):
        backoff = ExponentialBackoff(max_wait=10.0)
        assert backoff.should_continue(0.0) is True
        assert backoff.should_continue(9.9) is True

    def test_should_not_continue_at_limit(self):
        backoff = ExponentialBackoff(max_wait=10.0)
        assert backoff.should_continue(10.0) is False
        assert backoff.should_continue(42.0) is False

    def test_delay_capped_at_max(self):
        backoff = ExponentialBackoff(base_delay=1.0, max_delay=10.0)
        delay = backoff.calculate_delay(100)
        # Even with jitter, should not exceed max_delay + 25%
        assert delay <= 10.0 * 1.25

    def test_delay_within_jitter_of_base(self):
        backoff = ExponentialBackoff(base_delay=2.0, max_delay=60.0)
        for attempt in range(4):
            expected = 2.0 * (2**attempt)
            delay = backoff.calculate_delay(attempt)
            assert expected * 0.75 <= delay <= expected * 1.25

    def test_delay_never_negative(self):
        backoff = ExponentialBackoff(base_delay=0.1, max_delay=1.0)
        for attempt in range(10):
            assert backoff.calculate_delay(attempt) >= 0
