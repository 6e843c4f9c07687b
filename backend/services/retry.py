"""Retry executor for upstream generation calls.

Exponential backoff with additive jitter:

    delay(k) = base_delay_ms * multiplier^(k-1) + uniform(0, jitter_ms)

where k is the number of the attempt that just failed. Only errors the client
boundary classified as transient are retried; anything else propagates on the
first failure.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from services.errors import ErrorClass, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_ms: int = 2000
    backoff_multiplier: float = 1.5
    jitter_ms: int = 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")
        if self.backoff_multiplier <= 1:
            raise ValueError("backoff_multiplier must be > 1")
        if self.jitter_ms < 0:
            raise ValueError("jitter_ms must be >= 0")

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay_ms=settings.retry_base_delay_ms,
            backoff_multiplier=settings.retry_backoff_multiplier,
            jitter_ms=settings.retry_jitter_ms,
        )


DEFAULT_POLICY = RetryPolicy()


@dataclass
class AttemptOutcome:
    attempt_number: int
    succeeded: bool
    error_class: ErrorClass | None = None
    value: Any = None


def backoff_delay(attempt: int, policy: RetryPolicy, rng: random.Random | None = None) -> float:
    """Seconds to wait after failed attempt ``attempt`` (1-based)."""
    rng = rng or random
    delay_ms = policy.base_delay_ms * policy.backoff_multiplier ** (attempt - 1)
    if policy.jitter_ms:
        delay_ms += rng.uniform(0, policy.jitter_ms)
    return delay_ms / 1000


def is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, UpstreamError) and exc.retryable


def _summarize(outcomes: list[AttemptOutcome]) -> str:
    return ", ".join(
        f"#{o.attempt_number} ok" if o.succeeded else f"#{o.attempt_number} {o.error_class.value}"
        for o in outcomes
    )


async def execute(
    operation: Callable[[], Awaitable[Any]],
    policy: RetryPolicy = DEFAULT_POLICY,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    rng: random.Random | None = None,
    trace: list[AttemptOutcome] | None = None,
) -> Any:
    """Run ``operation`` until it succeeds, fails fatally or attempts run out.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        policy: Attempt bound and backoff parameters.
        sleep: Awaitable sleep, replaceable in tests.
        rng: Random source for jitter.
        trace: Optional list that receives one AttemptOutcome per attempt.

    Raises:
        The last error once ``policy.max_attempts`` retryable failures have
        been observed, or the first non-retryable error immediately.
    """
    outcomes = trace if trace is not None else []

    for attempt in range(1, policy.max_attempts + 1):
        try:
            value = await operation()
        except Exception as exc:
            error_class = exc.error_class if isinstance(exc, UpstreamError) else ErrorClass.FATAL
            outcomes.append(AttemptOutcome(attempt, False, error_class=error_class))

            if not is_retryable(exc):
                logger.info("Attempt %d failed with non-retryable error: %s", attempt, exc)
                raise
            if attempt >= policy.max_attempts:
                logger.error(
                    "Giving up after %d attempts (%s): %s [trace: %s]",
                    attempt, error_class.value, exc, _summarize(outcomes),
                )
                raise

            delay = backoff_delay(attempt, policy, rng)
            logger.warning(
                "Retry %d/%d after %s error, waiting %.2fs",
                attempt, policy.max_attempts - 1, error_class.value, delay,
            )
            await sleep(delay)
        else:
            outcomes.append(AttemptOutcome(attempt, True, value=value))
            if attempt > 1:
                logger.info("Upstream call succeeded on attempt %d", attempt)
            return value

    # max_attempts >= 1 guarantees the loop returns or raises
    raise RuntimeError("retry loop exited without a result")
