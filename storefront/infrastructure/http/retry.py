"""
Retry with exponential backoff for ApiClient calls.

Only transient outcomes are retried: network failures (0), timeouts (408),
rate limiting (429) and server faults (>= 500). Any other 4xx, and any
exception that is not an ApiError, propagates on the first attempt.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from storefront.infrastructure.http.errors import ApiError
from storefront.utils.logger import get_logger

logger = get_logger("http")

T = TypeVar("T")

BACKOFF_MULTIPLIER = 2


def is_retryable(error: BaseException) -> bool:
    return isinstance(error, ApiError) and error.is_retryable


def backoff_delay(base_delay: float, attempt: int) -> float:
    """Delay before `attempt` (1-based; attempt 1 has no delay)."""
    if attempt <= 1:
        return 0.0
    return base_delay * BACKOFF_MULTIPLIER ** (attempt - 2)


def with_retry(
    operation: Callable[[], T],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call `operation` until it succeeds or the attempts run out.

    Args:
        operation: Zero-arg callable, typically a bound ApiClient request.
        max_attempts: Total attempts, the first call included.
        base_delay: Seconds to wait before the second attempt; doubles after.
        sleep: Injected for tests.

    Returns:
        The operation's result.

    Raises:
        The last error once attempts are exhausted, or the first
        non-retryable error immediately.
    """
    attempts = max(1, max_attempts)
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            sleep(backoff_delay(base_delay, attempt))
        try:
            return operation()
        except ApiError as e:
            if not e.is_retryable or attempt == attempts:
                raise
            logger.warning(
                "Request failed (attempt %d/%d, status %s), retrying in %.2fs",
                attempt, attempts, e.status, backoff_delay(base_delay, attempt + 1),
            )
    raise AssertionError("unreachable")
