from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

import httpx

from catalogsync.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

type Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    """Resilient clients answered by ``handler``, without transport retries."""

    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(
            replace(resilience, retry=RetryPolicy(total=0)),
            transport=httpx.MockTransport(async_handler),
        )

    return factory
