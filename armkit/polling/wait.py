"""Caller-side polling cadence for AsyncOperation."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, TypeVar

from ..config import settings
from ..errors import PollError, PollingCanceled, PollingTimeout
from ..services.resilience import retry
from ..transport import HttpSender
from .future import AsyncOperation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def wait_for_completion(
    operation: AsyncOperation[T],
    sender: HttpSender,
    *,
    interval: Optional[float] = None,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    retry_attempts: Optional[int] = None,
    retry_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Optional[T]:
    """Poll *operation* until it is terminal, then return its result.

    Honours ``Retry-After`` when the service sends it, otherwise waits
    *interval* seconds between polls. Transport failures during a poll are
    retried with backoff through *sleep*; ``cancel`` is checked before every
    request, retries included.

    Raises:
        PollingCanceled: *cancel* was set.
        PollingTimeout: the next poll would start after *timeout* seconds.
        PollError: a poll kept failing after all retry attempts.
    """
    interval = settings.poll_interval if interval is None else interval
    timeout = settings.poll_timeout if timeout is None else timeout
    deadline = clock() + timeout

    polls = 0

    def poll_once() -> bool:
        nonlocal polls
        if cancel is not None and cancel.is_set():
            raise PollingCanceled(f"stopped waiting for {operation.polling_url} after {polls} polls")
        polls += 1
        return operation.done(sender)

    poll = retry(
        max_attempts=settings.retry_attempts if retry_attempts is None else retry_attempts,
        base_delay=settings.retry_delay if retry_delay is None else retry_delay,
        retryable_exceptions=(PollError,),
        sleep=sleep,
    )(poll_once)

    while True:
        if poll():
            break

        delay = operation.retry_after
        if delay is None:
            delay = interval
        if clock() + delay > deadline:
            raise PollingTimeout(
                f"operation at {operation.polling_url} still {operation.status.value} after {timeout:.0f}s"
            )

        logger.debug("Operation %s still %s; next poll in %.1fs", operation.polling_url, operation.status.value, delay)
        sleep(delay)

    logger.info("Operation %s finished as %s after %d polls", operation.polling_url, operation.status.value, polls)
    return operation.result(sender)
