"""Admission, retry and batching primitives for remote calls."""

from __future__ import annotations

from .batching import BatchRunner
from .limiter import SlidingWindowLimiter
from .retry import BackoffRetrier, ThrottleMonitor

__all__ = [
    "BackoffRetrier",
    "BatchRunner",
    "SlidingWindowLimiter",
    "ThrottleMonitor",
]
