from __future__ import annotations

import asyncio
import logging

import pytest

from catalogsync.domain.errors import (
    RateLimitedError,
    RemoteClientError,
    UpstreamError,
)
from catalogsync.resilience import BackoffRetrier, ThrottleMonitor


class FlakyOperation:
    def __init__(self, failures: list[Exception], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


def _retrier(sleeps: list[float], **kwargs: object) -> BackoffRetrier:
    async def sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return BackoffRetrier(
        sleep=sleep,
        jitter_source=lambda _low, _high: 0.5,
        **kwargs,  # type: ignore[arg-type]
    )


def test_retries_rate_limited_calls_with_exponential_backoff() -> None:
    sleeps: list[float] = []
    operation = FlakyOperation([RateLimitedError(), RateLimitedError()])

    result = asyncio.run(_retrier(sleeps, max_attempts=3, base_delay=1.0).retry(operation))

    assert result == "ok"
    assert operation.calls == 3
    assert sleeps == [pytest.approx(1.5), pytest.approx(2.5)]


def test_gives_up_after_max_attempts() -> None:
    sleeps: list[float] = []
    operation = FlakyOperation([RateLimitedError() for _ in range(5)])

    with pytest.raises(RateLimitedError):
        asyncio.run(_retrier(sleeps, max_attempts=3).retry(operation))

    assert operation.calls == 3
    assert len(sleeps) == 2


def test_per_call_overrides_take_precedence() -> None:
    sleeps: list[float] = []
    operation = FlakyOperation([RateLimitedError()])
    retrier = _retrier(sleeps, max_attempts=1, base_delay=1.0)

    result = asyncio.run(retrier.retry(operation, max_attempts=2, base_delay=0.25))

    assert result == "ok"
    assert sleeps == [pytest.approx(0.75)]


@pytest.mark.parametrize(
    "error",
    [
        RemoteClientError("forbidden", status_code=403),
        UpstreamError("bad gateway", status_code=502),
        ValueError("boom"),
    ],
)
def test_does_not_retry_other_errors(error: Exception) -> None:
    sleeps: list[float] = []
    operation = FlakyOperation([error])

    with pytest.raises(type(error)):
        asyncio.run(_retrier(sleeps, max_attempts=3).retry(operation))

    assert operation.calls == 1
    assert sleeps == []


def test_rejects_non_positive_attempts() -> None:
    operation = FlakyOperation([])

    with pytest.raises(ValueError):
        asyncio.run(_retrier([]).retry(operation, max_attempts=0))

    assert operation.calls == 0


def test_throttle_hits_are_tracked() -> None:
    monitor = ThrottleMonitor(alert_threshold=10)
    operation = FlakyOperation([RateLimitedError(), RateLimitedError()])

    asyncio.run(_retrier([], max_attempts=3, monitor=monitor).retry(operation))

    assert monitor.hits == 2


def test_monitor_warns_past_threshold(caplog: pytest.LogCaptureFixture) -> None:
    monitor = ThrottleMonitor(alert_threshold=2)

    with caplog.at_level(logging.WARNING, logger="catalogsync.resilience.retry"):
        for _ in range(3):
            monitor.track()

    assert "High rate limit hits detected: 3" in caplog.text
    assert caplog.text.count("High rate limit hits detected") == 1

    monitor.reset()
    assert monitor.hits == 0
