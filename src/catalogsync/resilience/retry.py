"""Exponential backoff with jitter for throttled remote calls."""

from __future__ import annotations

import asyncio
import random
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import RateLimitedError, RemoteClientError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]
type Jitter = Callable[[float, float], float]


class ThrottleMonitor:
    """Count throttling hits and warn once they pass ``alert_threshold``."""

    def __init__(self, alert_threshold: int = 50) -> None:
        self.alert_threshold = alert_threshold
        self.hits = 0

    def track(self) -> None:
        self.hits += 1
        if self.hits > self.alert_threshold:
            log.warning("High rate limit hits detected: %s", self.hits)

    def reset(self) -> None:
        self.hits = 0


class BackoffRetrier:
    """Retry operations that fail with ``RateLimitedError``.

    The delay before retry ``n`` (zero based) is ``base_delay * 2**n`` plus a
    uniform jitter in ``[0, jitter)``. Client errors and unknown errors are
    raised on first sight.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        jitter: float = 1.0,
        monitor: ThrottleMonitor | None = None,
        sleep: Sleep = asyncio.sleep,
        jitter_source: Jitter = random.uniform,
    ) -> None:
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.jitter = jitter
        self.monitor = monitor or ThrottleMonitor()
        self._sleep = sleep
        self._jitter_source = jitter_source

    def backoff_delay(self, attempt: int, base_delay: float) -> float:
        return base_delay * 2**attempt + self._jitter_source(0.0, self.jitter)

    async def retry[T](
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        max_attempts: int | None = None,
        base_delay: float | None = None,
    ) -> T:
        attempts = max_attempts if max_attempts is not None else self.max_attempts
        delay_base = base_delay if base_delay is not None else self.base_delay
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(attempts):
            try:
                return await operation()
            except RemoteClientError:
                raise
            except RateLimitedError:
                self.monitor.track()
                if attempt == attempts - 1:
                    log.warning("Rate limited after %s attempts, giving up", attempts)
                    raise
                wait = self.backoff_delay(attempt, delay_base)
                log.info(
                    "Rate limited (attempt %s/%s), retrying in %.2fs",
                    attempt + 1,
                    attempts,
                    wait,
                )
                await self._sleep(wait)
        raise AssertionError("unreachable")
