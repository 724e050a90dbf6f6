"""Reconciliation defaults: admission gate, retries, batching and loop bounds."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_number

DEFAULT_WINDOW_SECONDS = 1.0
DEFAULT_MAX_REQUESTS = 2
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_JITTER = 1.0
DEFAULT_ARTICLE_BATCH_SIZE = 10
DEFAULT_ARTICLE_BATCH_COOLDOWN = 2.0
DEFAULT_VERIFY_BATCH_SIZE = 50
DEFAULT_VERIFY_BATCH_COOLDOWN = 1.0
DEFAULT_MAX_MULTIPLIER = 4
DEFAULT_MAX_RUN_SECONDS = 30.0
DEFAULT_THROTTLE_ALERT_THRESHOLD = 50


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    window_seconds: float = DEFAULT_WINDOW_SECONDS
    max_requests: int = DEFAULT_MAX_REQUESTS
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    retry_jitter: float = DEFAULT_RETRY_JITTER
    article_batch_size: int = DEFAULT_ARTICLE_BATCH_SIZE
    article_batch_cooldown: float = DEFAULT_ARTICLE_BATCH_COOLDOWN
    verify_batch_size: int = DEFAULT_VERIFY_BATCH_SIZE
    verify_batch_cooldown: float = DEFAULT_VERIFY_BATCH_COOLDOWN
    max_multiplier: int = DEFAULT_MAX_MULTIPLIER
    max_run_seconds: float = DEFAULT_MAX_RUN_SECONDS
    throttle_alert_threshold: int = DEFAULT_THROTTLE_ALERT_THRESHOLD


def get_reconcile_config() -> ReconcileConfig:
    return ReconcileConfig(
        max_multiplier=optional_env_number(
            "CATALOGSYNC_MAX_MULTIPLIER", DEFAULT_MAX_MULTIPLIER, int
        ),
        max_run_seconds=optional_env_number(
            "CATALOGSYNC_MAX_RUN_SECONDS", DEFAULT_MAX_RUN_SECONDS, float
        ),
    )
