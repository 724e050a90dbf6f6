"""Settings for the resilient HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retries for transient network and gateway failures.

    HTTP 429 is absent from ``status_forcelist``: throttling is surfaced to the
    caller as ``RateLimitedError`` and retried by ``BackoffRetrier`` so that
    every attempt passes the shared admission gate.
    """

    total: int = 2
    backoff_factor: float = 0.5
    backoff_jitter: float = 1.0
    max_backoff_wait: float = 10.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})
    status_forcelist: frozenset[int] = frozenset({502, 503, 504})
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    """Client-side token bucket: ``max_calls`` per ``per_seconds``."""

    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None

    def bound_to(self, base_url: str, headers: Mapping[str, str]) -> ResilienceConfig:
        """Copy targeting ``base_url``, with ``headers`` layered over the defaults."""

        merged = {**(self.default_headers or {}), **headers}
        return replace(self, base_url=base_url, default_headers=merged)
