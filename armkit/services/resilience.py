"""Resilience utilities — retry with exponential backoff."""

from __future__ import annotations

import logging
import random
import time
from functools import wraps
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

# Status codes ARM documents as transient.
STATUS_CODES_FOR_RETRY: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504})


def retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
    sleep: Optional[Callable[[float], None]] = None,
) -> Callable:
    """Decorator: retry a function with exponential backoff.

    Args:
        max_attempts: Total attempts (including first try).
        base_delay: Initial delay in seconds.
        max_delay: Maximum delay cap in seconds.
        backoff_factor: Multiplier applied to delay each retry.
        jitter: Add random jitter (±25%) to prevent thundering herd.
        retryable_exceptions: Exception types that trigger retry.
        sleep: Called with each backoff delay; defaults to time.sleep.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = base_delay
            last_exception: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    last_exception = e
                    if attempt == max_attempts:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            func.__name__, max_attempts, e,
                        )
                        raise

                    actual_delay = delay
                    if jitter:
                        actual_delay *= 0.75 + random.random() * 0.5

                    logger.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        func.__name__, attempt, max_attempts, e, actual_delay,
                    )
                    (sleep or time.sleep)(actual_delay)
                    delay = min(delay * backoff_factor, max_delay)

            raise last_exception  # type: ignore[misc]
        return wrapper
    return decorator
