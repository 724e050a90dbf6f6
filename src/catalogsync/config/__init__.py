"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_number, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .shopify import ShopifyConfig, get_shopify_config, shop_domain
from .storage import DatabaseConfig, data_dir, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ReconcileConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "configure_logging",
    "data_dir",
    "get_database_config",
    "get_reconcile_config",
    "get_shopify_config",
    "optional_env_number",
    "require_env_vars",
    "shop_domain",
]
