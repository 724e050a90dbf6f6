"""Sliding-window admission gate shared by every remote call in the process."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

type Clock = Callable[[], float]
type Sleep = Callable[[float], Awaitable[None]]


class SlidingWindowLimiter:
    """Admit at most ``max_requests`` calls within any trailing ``window_seconds``.

    One instance is meant to be shared by all concurrent reconciliation runs.
    Admission and recording happen under a lock, so concurrent callers queue
    behind each other instead of observing the same free slot.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def timestamps(self) -> tuple[float, ...]:
        return tuple(self._timestamps)

    async def wait_if_needed(self) -> None:
        async with self._lock:
            now = self._clock()
            self._evict(now)
            while len(self._timestamps) >= self.max_requests:
                remaining = self.window_seconds - (now - self._timestamps[0])
                if remaining > 0:
                    log.debug("Rate window full, waiting %.3fs", remaining)
                    await self._sleep(remaining)
                # the oldest entry has aged out by now
                self._timestamps.popleft()
                now = self._clock()
                self._evict(now)
            self._timestamps.append(now)

    def _evict(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()
