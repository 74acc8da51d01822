"""Tests for pwrtest/retry.py — fixed-delay retry policy."""

from __future__ import annotations

import pytest

from pwrtest.mocks import MockClock
from pwrtest.retry import RetryExhaustedError, RetryPolicy, TransientError


def _flaky(failures: int, value="ok"):
    """Callable that fails *failures* times before returning *value*."""
    calls = {"n": 0}

    def attempt_fn():
        calls["n"] += 1
        if calls["n"] <= failures:
            raise TransientError(f"failure {calls['n']}")
        return value

    return attempt_fn, calls


class TestRetryPolicy:
    def test_first_attempt_success_does_not_sleep(self):
        clock = MockClock()
        attempt_fn, calls = _flaky(0)
        assert RetryPolicy(delay=5).call(attempt_fn, clock) == "ok"
        assert calls["n"] == 1
        assert clock.get_sleep_calls() == []

    def test_unbounded_retries_until_success(self):
        clock = MockClock()
        attempt_fn, calls = _flaky(25, value=42)
        assert RetryPolicy(delay=30).call(attempt_fn, clock) == 42
        assert calls["n"] == 26
        assert clock.get_sleep_calls() == [30] * 25

    def test_bounded_policy_gives_up(self):
        clock = MockClock()
        attempt_fn, calls = _flaky(10)
        with pytest.raises(RetryExhaustedError, match="after 3 attempts"):
            RetryPolicy(delay=1, max_attempts=3).call(attempt_fn, clock, name="read")
        assert calls["n"] == 3
        # No sleep after the final attempt
        assert clock.get_sleep_calls() == [1, 1]

    def test_bounded_policy_succeeds_within_cap(self):
        clock = MockClock()
        attempt_fn, _ = _flaky(2)
        assert RetryPolicy(delay=1, max_attempts=3).call(attempt_fn, clock) == "ok"

    def test_non_transient_error_propagates_immediately(self):
        clock = MockClock()

        def attempt_fn():
            raise KeyError("boom")

        with pytest.raises(KeyError):
            RetryPolicy(delay=1).call(attempt_fn, clock)
        assert clock.get_sleep_calls() == []

    def test_on_retry_called_before_each_sleep(self):
        clock = MockClock()
        attempt_fn, _ = _flaky(2)
        seen = []
        RetryPolicy(delay=1).call(attempt_fn, clock, on_retry=lambda attempt, err: seen.append((attempt, str(err))))
        assert seen == [(1, "failure 1"), (2, "failure 2")]

    def test_zero_delay_skips_sleep(self):
        clock = MockClock()
        attempt_fn, _ = _flaky(3)
        RetryPolicy(delay=0).call(attempt_fn, clock)
        assert clock.get_sleep_calls() == []

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            RetryPolicy(delay=-1)
        with pytest.raises(ValueError):
            RetryPolicy(delay=1, max_attempts=-2)
