"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

from catalogsync.adapters.shopify import ShopifySessionFactory
from catalogsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContentUnitOfWork,
    is_started,
    startup,
)
from catalogsync.config.reconcile import ReconcileConfig, get_reconcile_config
from catalogsync.domain.errors import ShopNotFoundError
from catalogsync.domain.model import ContentCategory, ContentRecord, ShopRecord
from catalogsync.domain.reconciliation import (
    ReconcileRequest,
    ReconciliationEngine,
    RemoteCatalogFetcher,
    VerificationCache,
)
from catalogsync.resilience import (
    BackoffRetrier,
    BatchRunner,
    SlidingWindowLimiter,
    ThrottleMonitor,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from catalogsync.domain.model import ContentPage
    from catalogsync.domain.ports.remote import RemoteCatalogClient, RemoteSessionFactory
    from catalogsync.domain.ports.unit_of_work import ContentUnitOfWork

type UnitOfWorkFactory = Callable[[], ContentUnitOfWork]

log = getLogger(__name__)


@dataclass(slots=True)
class CatalogServices:
    """Process-wide collaborators shared by every request.

    ``limiter`` and ``engine.cache`` are single instances: all in-flight
    requests are admitted through the same gate and share verification
    results.
    """

    config: ReconcileConfig
    limiter: SlidingWindowLimiter
    retrier: BackoffRetrier
    batch_runner: BatchRunner
    engine: ReconciliationEngine
    session_factory: RemoteSessionFactory
    unit_of_work_factory: UnitOfWorkFactory

    def fetcher_for(self, client: RemoteCatalogClient) -> RemoteCatalogFetcher:
        return RemoteCatalogFetcher(
            client=client,
            limiter=self.limiter,
            retrier=self.retrier,
            batch_runner=self.batch_runner,
            article_batch_size=self.config.article_batch_size,
            article_batch_cooldown=self.config.article_batch_cooldown,
        )


def build_services(
    *,
    config: ReconcileConfig | None = None,
    session_factory: RemoteSessionFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    batch_runner: BatchRunner | None = None,
) -> CatalogServices:
    effective_config = config or get_reconcile_config()
    runner = batch_runner or BatchRunner()
    uow_factory = unit_of_work_factory or SqlAlchemyContentUnitOfWork
    limiter = SlidingWindowLimiter(
        max_requests=effective_config.max_requests,
        window_seconds=effective_config.window_seconds,
    )
    retrier = BackoffRetrier(
        max_attempts=effective_config.retry_attempts,
        base_delay=effective_config.retry_base_delay,
        jitter=effective_config.retry_jitter,
        monitor=ThrottleMonitor(effective_config.throttle_alert_threshold),
    )
    engine = ReconciliationEngine(
        unit_of_work_factory=uow_factory,
        cache=VerificationCache(),
        config=effective_config,
        batch_runner=runner,
    )
    return CatalogServices(
        config=effective_config,
        limiter=limiter,
        retrier=retrier,
        batch_runner=runner,
        engine=engine,
        session_factory=session_factory
        or ShopifySessionFactory(limiter=limiter, retrier=retrier),
        unit_of_work_factory=uow_factory,
    )


def ensure_storage() -> None:
    """Start the SQLAlchemy adapter unless something already did."""

    if not is_started():
        startup()


async def list_verified_contents(
    services: CatalogServices,
    *,
    shop_name: str,
    access_token: str,
    page: int = 1,
    limit: int = 10,
) -> ContentPage:
    """Return one page of the shop's content that still exists on Shopify."""

    if page < 1 or limit < 1:
        raise ValueError("page and limit must be at least 1")
    remote = await services.session_factory(shop_name, access_token)
    async with remote:
        shop = await asyncio.to_thread(find_shop, services.unit_of_work_factory, shop_name)
        log.info("Listing verified content for %s: page=%s, limit=%s", shop_name, page, limit)
        request = ReconcileRequest(shop_id=shop.id, page=page, limit=limit)
        return await services.engine.reconcile(services.fetcher_for(remote), request)


def find_shop(unit_of_work_factory: UnitOfWorkFactory, shop_name: str) -> ShopRecord:
    with unit_of_work_factory() as uow:
        shop = uow.repositories.shops.get_by_name(shop_name)
    if shop is None:
        raise ShopNotFoundError(f"Shop not found: {shop_name}")
    return shop


def seed_contents(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Load shops and content records from a JSON document into the local store.

    Expected shape::

        {"shops": [{"name": "demo-shop", "contents": [
            {"contentId": "42", "category": "BLOG", "output": {...},
             "createdAt": "2024-05-01T10:00:00Z"}
        ]}]}
    """

    document = json.loads(path.read_text(encoding="utf-8"))
    uow_factory = unit_of_work_factory or SqlAlchemyContentUnitOfWork
    stored = 0
    with uow_factory() as uow:
        for shop_payload in document.get("shops", []):
            name = shop_payload["name"]
            shop = uow.repositories.shops.get_by_name(name)
            if shop is None:
                shop = ShopRecord(name=name)
                uow.repositories.shops.add(shop)
                # no ORM relationship orders the inserts, so the shop row goes first
                uow.commit()
            for content_payload in shop_payload.get("contents", []):
                uow.repositories.contents.add(_content_from_payload(shop, content_payload))
                stored += 1
        uow.commit()
    log.info("Seeded %s content records from %s", stored, path)
    return stored


def _content_from_payload(shop: ShopRecord, payload: dict[str, Any]) -> ContentRecord:
    record = ContentRecord(
        content_id=str(payload["contentId"]),
        category=ContentCategory(payload["category"]),
        shop_id=shop.id,
        output=dict(payload.get("output") or {}),
        published_at=_parse_timestamp(payload.get("publishedAt")),
        updated_at=_parse_timestamp(payload.get("updatedAt")),
    )
    created_at = _parse_timestamp(payload.get("createdAt"))
    if created_at is not None:
        record.created_at = created_at
    return record


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    return datetime.fromisoformat(normalized)
