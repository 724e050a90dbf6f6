"""HTTP client for the Shopify Admin REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from catalogsync.adapters.http_resilience import ResilientClient
from catalogsync.domain.errors import (
    RateLimitedError,
    RemoteClientError,
    RemoteNotFoundError,
    UpstreamError,
)
from catalogsync.domain.ports.remote import RemotePage

from .schema import ArticlePayload, BlogPayload, ErrorResponse, ProductPayload, ShopPayload

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from catalogsync.config.http_resilience import ResilienceConfig
    from catalogsync.config.shopify import ShopifyConfig

log = getLogger(__name__)

PAGE_SIZE = 250
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


class ShopifyClient:
    """One shop's Admin REST API, one HTTP request per call."""

    def __init__(
        self,
        *,
        shop_name: str,
        access_token: str,
        config: ShopifyConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = config.resilience.bound_to(
            config.base_url(shop_name),
            {ACCESS_TOKEN_HEADER: access_token, "Accept": "application/json"},
        )
        self.shop_name = shop_name
        self._client = (client_factory or ResilientClient)(self._resilience)

    async def __aenter__(self) -> ShopifyClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_shop(self) -> ShopPayload:
        response = await self._request("shop.json")
        return _validate(ShopPayload, _unwrap(response, "shop"))

    async def list_products(self, *, cursor: str | None = None) -> RemotePage:
        return await self._list("products.json", "products", ProductPayload, cursor)

    async def list_blogs(self, *, cursor: str | None = None) -> RemotePage:
        return await self._list("blogs.json", "blogs", BlogPayload, cursor)

    async def list_articles(self, blog_id: str, *, cursor: str | None = None) -> RemotePage:
        return await self._list(f"blogs/{blog_id}/articles.json", "articles", ArticlePayload, cursor)

    async def get_product(self, product_id: str) -> ProductPayload | None:
        return await self._get_one(f"products/{product_id}.json", "product", ProductPayload)

    async def get_blog(self, blog_id: str) -> BlogPayload | None:
        return await self._get_one(f"blogs/{blog_id}.json", "blog", BlogPayload)

    async def get_article(self, blog_id: str, article_id: str) -> ArticlePayload | None:
        return await self._get_one(
            f"blogs/{blog_id}/articles/{article_id}.json", "article", ArticlePayload
        )

    async def _list[TModel: BaseModel](
        self,
        path: str,
        key: str,
        model: type[TModel],
        cursor: str | None,
    ) -> RemotePage:
        params: dict[str, str | int] = {"limit": PAGE_SIZE}
        if cursor:
            params["page_info"] = cursor
        response = await self._request(path, params=params)
        raw_items = _unwrap(response, key)
        if not isinstance(raw_items, list):
            raise UpstreamError(f"Unexpected Shopify payload for {path}")
        items = [_validate(model, item) for item in raw_items]
        return RemotePage(items=items, next_cursor=next_page_info(response))

    async def _get_one[TModel: BaseModel](
        self,
        path: str,
        key: str,
        model: type[TModel],
    ) -> TModel | None:
        try:
            response = await self._request(path)
        except RemoteNotFoundError:
            return None
        return _validate(model, _unwrap(response, key))

    async def _request(
        self,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Shopify request {path} failed: {exc}") from exc
        raise_for_remote_status(response)
        return response


def raise_for_remote_status(response: httpx.Response) -> None:
    """Translate a non-2xx Shopify response into the remote error taxonomy."""

    status = response.status_code
    if status < 400:
        return

    message = f"Shopify responded {status} for {response.request.url.path}"
    detail = _error_detail(response)
    if detail:
        message = f"{message}: {detail}"

    if status == 429:
        raise RateLimitedError(message, status_code=status, retry_after=_retry_after(response))
    if status == 404:
        raise RemoteNotFoundError(message, status_code=status)
    if 400 <= status < 500:
        raise RemoteClientError(message, status_code=status)
    raise UpstreamError(message, status_code=status)


def next_page_info(response: httpx.Response) -> str | None:
    """Return the ``page_info`` cursor of the ``rel="next"`` link, if any."""

    next_link = response.links.get("next")
    if not next_link or "url" not in next_link:
        return None
    return httpx.URL(next_link["url"]).params.get("page_info")


def _unwrap(response: httpx.Response, key: str) -> object:
    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamError("Shopify returned a non-JSON payload") from exc
    if not isinstance(payload, dict) or key not in payload:
        raise UpstreamError(f"Shopify payload is missing '{key}'")
    return payload[key]


def _validate[TModel: BaseModel](model: type[TModel], payload: object) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        log.error("Unexpected %s payload: %s", model.__name__, exc)
        raise UpstreamError(f"Invalid {model.__name__} payload from Shopify") from exc


def _error_detail(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict) or "errors" not in payload:
        return None
    return ErrorResponse.model_validate(payload).message


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


__all__ = [
    "ShopifyClient",
    "next_page_info",
    "raise_for_remote_status",
]
