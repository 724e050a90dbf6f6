"""Pydantic models describing the Shopify Admin REST payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ShopifyBaseModel(BaseModel):
    # Keep every field Shopify sends; only the ids are relied upon.
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ImagePayload(ShopifyBaseModel):
    id: int | None = None
    src: str | None = None


class ProductPayload(ShopifyBaseModel):
    id: int
    title: str | None = None
    handle: str | None = None
    images: list[ImagePayload] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None


class BlogPayload(ShopifyBaseModel):
    id: int
    title: str | None = None
    handle: str | None = None
    tags: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ArticlePayload(ShopifyBaseModel):
    id: int
    blog_id: int
    title: str | None = None
    author: str | None = None
    handle: str | None = None
    body_html: str | None = None
    summary_html: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None


class ShopPayload(ShopifyBaseModel):
    id: int
    name: str | None = None
    domain: str | None = None
    myshopify_domain: str | None = None


class ErrorResponse(ShopifyBaseModel):
    errors: Any = None

    @field_validator("errors", mode="before")
    @classmethod
    def _flatten(cls, value: object) -> object:
        if isinstance(value, dict):
            return "; ".join(f"{key}: {detail}" for key, detail in value.items())
        if isinstance(value, list):
            return "; ".join(str(item) for item in value)
        return value

    @property
    def message(self) -> str | None:
        return str(self.errors) if self.errors is not None else None
