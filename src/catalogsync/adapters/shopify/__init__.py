"""Public interface for the Shopify adapter."""

from __future__ import annotations

from .client import ShopifyClient, next_page_info, raise_for_remote_status
from .schema import ArticlePayload, BlogPayload, ProductPayload, ShopPayload
from .session import ShopifySessionFactory

__all__ = [
    "ArticlePayload",
    "BlogPayload",
    "ProductPayload",
    "ShopPayload",
    "ShopifyClient",
    "ShopifySessionFactory",
    "next_page_info",
    "raise_for_remote_status",
]
