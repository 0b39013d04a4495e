from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """
    Re-runs a fallible async operation a fixed number of times.

    Attempts run back to back, with no backoff. The policy knows
    nothing about what the operation does: if the operation needs rate
    limiting, it must acquire the limiter itself.

    Only exceptions matching `retry_on` are retried; anything else
    propagates on the attempt that raised it.
    """

    def __init__(self, retry_on: tuple[type[BaseException], ...] = (Exception,)) -> None:
        self._retry_on = retry_on

    async def execute(self, operation: Callable[[], Awaitable[T]], attempts: int) -> T:
        """
        Call `operation()` up to `attempts` times and return the first success.

        The error from the final attempt is re-raised unchanged.
        """
        if attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {attempts}")

        for attempt in range(1, attempts + 1):
            try:
                return await operation()
            except self._retry_on as exc:
                if attempt == attempts:
                    raise
                log.debug("Attempt %d/%d failed, retrying: %s", attempt, attempts, exc)

        raise AssertionError("unreachable")
