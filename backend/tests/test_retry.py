"""Tests for the retry executor."""

import logging
import random

import pytest

from services.errors import ErrorClass, UpstreamError
from services.retry import DEFAULT_POLICY, RetryPolicy, backoff_delay, execute


class Recorder:
    """Counts invocations and replays outcomes (exceptions are raised)."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SleepLog:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def _transient():
    return UpstreamError("connection reset", ErrorClass.TRANSIENT_NETWORK)


NO_JITTER = RetryPolicy(max_attempts=3, base_delay_ms=2000, backoff_multiplier=1.5, jitter_ms=0)


class TestBackoffDelay:
    def test_default_policy_values(self):
        assert DEFAULT_POLICY == RetryPolicy(3, 2000, 1.5, 1000)

    def test_no_jitter_is_exact(self):
        assert backoff_delay(1, NO_JITTER) == pytest.approx(2.0)
        assert backoff_delay(2, NO_JITTER) == pytest.approx(3.0)
        assert backoff_delay(3, NO_JITTER) == pytest.approx(4.5)

    def test_monotonic_without_jitter(self):
        policy = RetryPolicy(max_attempts=10, base_delay_ms=250, backoff_multiplier=2.0, jitter_ms=0)
        delays = [backoff_delay(k, policy) for k in range(1, 10)]
        assert delays == sorted(delays)

    def test_jitter_stays_in_range(self):
        rng = random.Random(7)
        for _ in range(100):
            d = backoff_delay(2, DEFAULT_POLICY, rng)
            # 2000 * 1.5 = 3000ms, plus up to 1000ms jitter
            assert 3.0 <= d <= 4.0


class TestRetryPolicy:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"base_delay_ms": -1},
            {"backoff_multiplier": 1.0},
            {"jitter_ms": -5},
        ],
    )
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


class TestExecute:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        op = Recorder("ok")
        sleep = SleepLog()
        assert await execute(op, NO_JITTER, sleep=sleep) == "ok"
        assert op.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_retry_bound(self):
        op = Recorder(_transient())
        sleep = SleepLog()
        with pytest.raises(UpstreamError):
            await execute(op, NO_JITTER, sleep=sleep)
        assert op.calls == 3
        assert sleep.delays == [pytest.approx(2.0), pytest.approx(3.0)]

    @pytest.mark.asyncio
    async def test_giving_up_logs_attempt_trace(self, caplog):
        op = Recorder(
            UpstreamError("429", ErrorClass.RATE_LIMIT, http_status=429),
            _transient(),
            UpstreamError("503", ErrorClass.SERVER_ERROR, http_status=503),
        )
        with caplog.at_level(logging.ERROR, logger="services.retry"):
            with pytest.raises(UpstreamError):
                await execute(op, NO_JITTER, sleep=SleepLog())
        assert "#1 rate-limit, #2 transient-network, #3 server-error" in caplog.text

    @pytest.mark.asyncio
    async def test_raises_last_error(self):
        last = UpstreamError("503", ErrorClass.SERVER_ERROR, http_status=503)
        op = Recorder(_transient(), _transient(), last)
        with pytest.raises(UpstreamError) as exc_info:
            await execute(op, NO_JITTER, sleep=SleepLog())
        assert exc_info.value is last

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self):
        op = Recorder(
            UpstreamError("429", ErrorClass.RATE_LIMIT, http_status=429),
            UpstreamError("502", ErrorClass.SERVER_ERROR, http_status=502),
            "done",
        )
        trace = []
        result = await execute(op, NO_JITTER, sleep=SleepLog(), trace=trace)
        assert result == "done"
        assert op.calls == 3
        assert [o.succeeded for o in trace] == [False, False, True]
        assert [o.attempt_number for o in trace] == [1, 2, 3]
        assert trace[0].error_class is ErrorClass.RATE_LIMIT
        assert trace[2].value == "done"

    @pytest.mark.asyncio
    async def test_fatal_short_circuit(self):
        op = Recorder(UpstreamError("unauthorized", ErrorClass.FATAL, http_status=401))
        sleep = SleepLog()
        with pytest.raises(UpstreamError):
            await execute(op, NO_JITTER, sleep=sleep)
        assert op.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_unclassified_errors_are_not_retried(self):
        op = Recorder(ValueError("bad prompt"))
        with pytest.raises(ValueError):
            await execute(op, NO_JITTER, sleep=SleepLog())
        assert op.calls == 1

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self):
        op = Recorder(_transient())
        policy = RetryPolicy(max_attempts=1, base_delay_ms=0, jitter_ms=0)
        with pytest.raises(UpstreamError):
            await execute(op, policy, sleep=SleepLog())
        assert op.calls == 1
