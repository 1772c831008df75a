"""Tests for armkit.services.resilience — retry with backoff."""

from unittest.mock import patch

import pytest

from armkit.errors import PollError, TransportError
from armkit.services.resilience import STATUS_CODES_FOR_RETRY, retry


# ── Retry ─────────────────────────────────────────────────────────────────


class TestRetry:
    def test_succeeds_first_try(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0.01)
        def succeed():
            nonlocal call_count
            call_count += 1
            return "ok"

        assert succeed() == "ok"
        assert call_count == 1

    def test_retries_on_failure_then_succeeds(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0.01, jitter=False, retryable_exceptions=(TransportError,))
        def flaky():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise TransportError("connection reset")
            return "recovered"

        assert flaky() == "recovered"
        assert call_count == 3

    def test_raises_after_max_attempts(self):
        @retry(max_attempts=2, base_delay=0.01, retryable_exceptions=(PollError,))
        def always_fail():
            raise PollError("still down")

        with pytest.raises(PollError, match="still down"):
            always_fail()

    def test_respects_retryable_exceptions(self):
        call_count = 0

        @retry(max_attempts=3, base_delay=0.01, retryable_exceptions=(TransportError,))
        def wrong_exception():
            nonlocal call_count
            call_count += 1
            raise TypeError("not retryable")

        with pytest.raises(TypeError):
            wrong_exception()
        assert call_count == 1  # No retry for non-matching exception

    def test_backoff_is_exponential_and_capped(self):
        @retry(max_attempts=5, base_delay=1.0, max_delay=3.0, backoff_factor=2.0, jitter=False)
        def always_fail():
            raise ConnectionError("down")

        with patch("armkit.services.resilience.time.sleep") as sleep:
            with pytest.raises(ConnectionError):
                always_fail()
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0, 3.0, 3.0]

    def test_jitter_stays_within_bounds(self):
        @retry(max_attempts=2, base_delay=4.0, jitter=True)
        def always_fail():
            raise ConnectionError("down")

        with patch("armkit.services.resilience.time.sleep") as sleep:
            with pytest.raises(ConnectionError):
                always_fail()
        (delay,) = sleep.call_args.args
        assert 3.0 <= delay <= 5.0

    def test_custom_sleep(self):
        delays = []

        @retry(max_attempts=3, base_delay=2.0, jitter=False, sleep=delays.append)
        def always_fail():
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            always_fail()
        assert delays == [2.0, 4.0]


def test_transient_status_codes():
    assert {429, 500, 502, 503, 504} <= STATUS_CODES_FOR_RETRY
    assert 404 not in STATUS_CODES_FOR_RETRY
    assert 409 not in STATUS_CODES_FOR_RETRY
