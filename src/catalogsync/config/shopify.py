"""Shopify Admin API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SHOPIFY_API_VERSION = "2024-10"
SHOPIFY_TIMEOUT_SECONDS = 30.0
# Shopify's REST bucket holds 40 requests and leaks 2 per second.
SHOPIFY_BUCKET_SIZE = 40
SHOPIFY_BUCKET_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class ShopifyConfig:
    api_version: str
    resilience: ResilienceConfig

    def base_url(self, shop_name: str) -> str:
        return f"https://{shop_domain(shop_name)}/admin/api/{self.api_version}/"


def shop_domain(shop_name: str) -> str:
    """Normalise ``shop`` or ``shop.myshopify.com`` into the full shop domain."""

    name = shop_name.strip().lower()
    name = name.removeprefix("https://").removeprefix("http://").rstrip("/")
    if not name.endswith(".myshopify.com"):
        name = f"{name}.myshopify.com"
    return name


def get_shopify_config(*, resilience: ResilienceConfig | None = None) -> ShopifyConfig:
    api_version = os.getenv("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION
    return ShopifyConfig(
        api_version=api_version,
        resilience=resilience
        or ResilienceConfig(
            name="shopify",
            timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
            retry=RetryPolicy(),
            ratelimit=RateLimit(max_calls=SHOPIFY_BUCKET_SIZE, per_seconds=SHOPIFY_BUCKET_SECONDS),
        ),
    )
