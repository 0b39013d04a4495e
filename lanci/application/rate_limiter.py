from __future__ import annotations

import asyncio
import logging
import random

from lanci.domain.errors import ZeroRateLimitError

log = logging.getLogger(__name__)

DEFAULT_JITTER = (0.2, 0.5)   # seconds


class RateLimiter:
    """
    One shared budget for every outbound call, API and browser alike.

    Grants are spaced at least 1/quota seconds apart. The asyncio.Lock
    hands slots out in arrival order, so a burst of concurrent callers is
    served first-come first-served. After its slot, each caller also
    sleeps a random jitter so requests never land on an exact beat.

    Build exactly one per crawl and inject it into every client.
    """

    def __init__(self, quota: int, jitter: tuple[float, float] = DEFAULT_JITTER, rng: random.Random | None = None) -> None:
        if quota <= 0:
            raise ZeroRateLimitError(quota)

        low, high = jitter
        if low < 0 or high < low:
            raise ValueError(f"Invalid jitter window: {jitter}")

        self._interval  = 1.0 / quota
        self._jitter    = (low, high)
        self._rng       = rng or random.Random()
        self._lock      = asyncio.Lock()
        self._next_slot = 0.0

    async def acquire(self) -> None:
        """Wait until this caller may issue one outbound call."""
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait = self._next_slot - loop.time()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_slot = max(loop.time(), self._next_slot) + self._interval

        delay = self._rng.uniform(*self._jitter)
        if delay > 0:
            log.debug("Rate limiter jitter: sleeping %.3fs", delay)
            await asyncio.sleep(delay)
