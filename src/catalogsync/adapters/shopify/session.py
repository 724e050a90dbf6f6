"""Open validated Shopify sessions from shop credentials."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from catalogsync.adapters.http_resilience import ResilientClient
from catalogsync.config.shopify import get_shopify_config
from catalogsync.domain.errors import (
    ClientInitializationError,
    InvalidSessionError,
    RateLimitedError,
    RemoteClientError,
    RemoteError,
)

from .client import ShopifyClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.config.http_resilience import ResilienceConfig
    from catalogsync.config.shopify import ShopifyConfig
    from catalogsync.resilience import BackoffRetrier, SlidingWindowLimiter

log = getLogger(__name__)

_AUTH_STATUSES = frozenset({401, 403})


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class ShopifySessionFactory:
    """Build a ``ShopifyClient`` and validate it with a ``shop.json`` request.

    With ``limiter`` and ``retrier`` set, the validation request waits for
    admission and is retried when throttled like every other catalog call. A
    throttle that outlasts the retries propagates as ``RateLimitedError``.
    """

    config: ShopifyConfig = field(default_factory=get_shopify_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    limiter: SlidingWindowLimiter | None = None
    retrier: BackoffRetrier | None = None

    async def __call__(self, shop_name: str, access_token: str) -> ShopifyClient:
        if not shop_name or not access_token:
            raise InvalidSessionError("Missing credentials")

        try:
            client = ShopifyClient(
                shop_name=shop_name,
                access_token=access_token,
                config=self.config,
                client_factory=self.client_factory,
            )
        except (ValueError, httpx.InvalidURL) as exc:
            raise ClientInitializationError(f"Cannot build Shopify client: {exc}") from exc

        try:
            await self._validate(client)
        except RateLimitedError:
            await client.aclose()
            log.warning("Shopify kept throttling session validation for %s", shop_name)
            raise
        except RemoteClientError as exc:
            await client.aclose()
            if exc.status_code in _AUTH_STATUSES:
                log.info("Shopify rejected credentials for %s", shop_name)
                raise InvalidSessionError("Unable to validate Shopify connection") from exc
            raise ClientInitializationError(str(exc)) from exc
        except RemoteError as exc:
            await client.aclose()
            log.error("Shopify connection validation failed for %s: %s", shop_name, exc)
            raise ClientInitializationError(str(exc)) from exc
        return client

    async def _validate(self, client: ShopifyClient) -> None:
        async def admitted() -> None:
            if self.limiter is not None:
                await self.limiter.wait_if_needed()
            await client.get_shop()

        if self.retrier is None:
            await admitted()
        else:
            await self.retrier.retry(admitted)
