"""Pagination-aware reconciliation of local content against the remote catalog."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.config.reconcile import ReconcileConfig
from catalogsync.domain.model import ContentPage
from catalogsync.resilience import BatchRunner

from .assemble import ResponseAssembler
from .cache import VerificationCache

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from catalogsync.domain.model import ContentRecord, RemoteEntity
    from catalogsync.domain.ports.unit_of_work import ContentUnitOfWork

    from .fetcher import RemoteCatalogFetcher

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ReconcileRequest:
    shop_id: UUID
    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if self.limit < 1:
            raise ValueError("limit must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class ReconcileStats:
    """Bookkeeping of one run.

    Pass an instance to ``ReconciliationEngine.reconcile`` to observe a run;
    each run fills only the instance it was handed.
    """

    remote_total: int = 0
    iterations: int = 0
    requested: list[int] = field(default_factory=list)
    verified: int = 0
    direct: bool = False


@dataclass(slots=True)
class ReconciliationEngine:
    """Return a page of local content whose remote counterpart still exists.

    The run starts by listing the remote catalog, which primes the
    verification cache and yields the remote total. When the remote total is
    below ``limit`` the local page is verified once. Otherwise the local
    window grows (``limit * multiplier``, capped at the remote total) until
    enough records verify, the local store runs dry, the multiplier ceiling is
    passed or the wall-clock budget is spent. Whatever verified at that point
    is returned.
    """

    unit_of_work_factory: Callable[[], ContentUnitOfWork]
    cache: VerificationCache = field(default_factory=VerificationCache)
    config: ReconcileConfig = field(default_factory=ReconcileConfig)
    batch_runner: BatchRunner = field(default_factory=BatchRunner)
    assembler: ResponseAssembler = field(default_factory=ResponseAssembler)
    clock: Callable[[], float] = time.monotonic

    async def reconcile(
        self,
        fetcher: RemoteCatalogFetcher,
        request: ReconcileRequest,
        stats: ReconcileStats | None = None,
    ) -> ContentPage:
        started = self.clock()
        if stats is None:
            stats = ReconcileStats()
        if request.page == 1:
            self.cache.clear()

        catalog = await fetcher.fetch_catalog()
        self.cache.prime(catalog)
        stats.remote_total = catalog.total

        if catalog.total < request.limit:
            stats.direct = True
            candidates = await self._load_candidates(request, request.limit, stats)
            verified = await self._verify(fetcher, candidates)
        else:
            verified = await self._expand(fetcher, request, catalog.total, started, stats)

        stats.verified = len(verified)
        total = await asyncio.to_thread(self._count, request.shop_id)
        log.info(
            "Reconciled page %s (limit %s): verified=%s, remote_total=%s, local_total=%s, "
            "iterations=%s",
            request.page,
            request.limit,
            stats.verified,
            stats.remote_total,
            total,
            stats.iterations,
        )
        return ContentPage(total=total, content=self.assembler.assemble(verified))

    async def _expand(
        self,
        fetcher: RemoteCatalogFetcher,
        request: ReconcileRequest,
        remote_total: int,
        started: float,
        stats: ReconcileStats,
    ) -> list[ContentRecord]:
        limit = request.limit
        current_limit = limit
        multiplier = 1
        while True:
            candidates = await self._load_candidates(request, current_limit, stats)
            verified = await self._verify(fetcher, candidates)
            log.debug(
                "Expansion %s: requested=%s, candidates=%s, verified=%s",
                multiplier,
                current_limit,
                len(candidates),
                len(verified),
            )
            if len(verified) >= limit:
                break
            if len(candidates) < current_limit:
                break
            if current_limit >= remote_total:
                break
            multiplier += 1
            if multiplier > self.config.max_multiplier:
                log.info("Stopping expansion at multiplier ceiling %s", self.config.max_multiplier)
                break
            if self.clock() - started >= self.config.max_run_seconds:
                log.warning(
                    "Stopping expansion after %.1fs with %s/%s verified",
                    self.clock() - started,
                    len(verified),
                    limit,
                )
                break
            current_limit = min(limit * multiplier, remote_total)
        return verified

    async def _verify(
        self,
        fetcher: RemoteCatalogFetcher,
        candidates: Sequence[ContentRecord],
    ) -> list[ContentRecord]:
        # verdicts for this run; a concurrent page-1 request may clear the shared cache
        known: dict[str, RemoteEntity | None] = {}
        misses: dict[str, ContentRecord] = {}
        for record in candidates:
            key = record.cache_key
            if key in known or key in misses:
                continue
            if key in self.cache:
                known[key] = self.cache.get(key)
            else:
                misses[key] = record

        if misses:

            async def load(record: ContentRecord) -> RemoteEntity | None:
                return await self.cache.get_or_load(
                    record.category,
                    record.content_id,
                    lambda: fetcher.lookup(record.category, record.content_id, record.parent_id),
                )

            results = await self.batch_runner.run(
                list(misses.values()),
                self.config.verify_batch_size,
                load,
                self.config.verify_batch_cooldown,
            )
            known.update(zip(misses, results, strict=True))

        return [record for record in candidates if known.get(record.cache_key) is not None]

    async def _load_candidates(
        self,
        request: ReconcileRequest,
        limit: int,
        stats: ReconcileStats,
    ) -> list[ContentRecord]:
        stats.iterations += 1
        stats.requested.append(limit)
        # the store is synchronous; keep its queries off the event loop
        return await asyncio.to_thread(self._page, request.shop_id, request.offset, limit)

    def _page(self, shop_id: UUID, offset: int, limit: int) -> list[ContentRecord]:
        with self.unit_of_work_factory() as uow:
            return uow.repositories.contents.page(shop_id, offset=offset, limit=limit)

    def _count(self, shop_id: UUID) -> int:
        with self.unit_of_work_factory() as uow:
            return uow.repositories.contents.count(shop_id)
