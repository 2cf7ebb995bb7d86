"""
Client-side request pacing.

One `RateLimiter` is owned by each client and shared by every request it makes.
It enforces a minimum spacing between dispatches regardless of how many
operations are in flight. The last-dispatch timestamp is private and only
changes under the limiter's lock.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

DEFAULT_MIN_INTERVAL = 0.5


class RateLimiter:
    """
    Minimum-interval gate.

    `wait_for_slot()` suspends the caller until at least `min_interval` seconds
    have passed since the previous dispatch, then reserves the slot. Callers are
    served one at a time, so concurrent operations cannot burst through.
    `record_dispatch()` moves the timestamp forward once a dispatch attempt
    completes, so slow responses and retries are paced from their end.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_dispatch: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def wait_for_slot(self) -> float:
        """Wait until dispatch is allowed; returns the reserved dispatch time."""
        async with self._lock:
            if self._last_dispatch is not None:
                elapsed = self._clock() - self._last_dispatch
                if elapsed < self._min_interval:
                    delay = self._min_interval - elapsed
                    logger.debug("Rate limiter delaying dispatch by %.3fs", delay)
                    await self._sleep(delay)
            now = self._clock()
            self._last_dispatch = now
            return now

    async def record_dispatch(self) -> None:
        """Mark a dispatch attempt as finished (success or failure)."""
        async with self._lock:
            now = self._clock()
            if self._last_dispatch is None or now > self._last_dispatch:
                self._last_dispatch = now


__all__ = ["Clock", "DEFAULT_MIN_INTERVAL", "RateLimiter", "Sleep"]
