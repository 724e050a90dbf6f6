"""Run-scoped memoization of remote existence checks."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.model import ContentCategory, verification_key

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from catalogsync.domain.model import RemoteEntity
    from catalogsync.domain.ports.remote import RemoteCatalog

log = getLogger(__name__)

type Loader = Callable[[], Awaitable[RemoteEntity | None]]


class VerificationCache:
    """Map ``CATEGORY:id`` to the remote entity, or ``None`` for confirmed absence.

    Concurrent ``get_or_load`` calls for the same key share one in-flight
    lookup, so a key is looked up remotely at most once until ``clear``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RemoteEntity | None] = {}
        self._inflight: dict[str, asyncio.Task[RemoteEntity | None]] = {}
        self._generation = 0
        self.lookups = 0

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> RemoteEntity | None:
        return self._entries.get(key)

    def store(self, key: str, entity: RemoteEntity | None) -> None:
        self._entries[key] = entity

    def clear(self) -> None:
        log.debug("Clearing verification cache (%s entries)", len(self._entries))
        self._entries.clear()
        # lookups still running belong to the previous run and must not land here
        self._inflight.clear()
        self._generation += 1
        self.lookups = 0

    def prime(self, catalog: RemoteCatalog) -> None:
        """Record every listed entity as present."""

        for category, entities in (
            (ContentCategory.PRODUCT, catalog.products),
            (ContentCategory.BLOG, catalog.blogs),
            (ContentCategory.ARTICLE, catalog.articles),
        ):
            for entity in entities:
                self._entries[verification_key(category, entity.id)] = entity

    async def get_or_load(
        self,
        category: ContentCategory,
        content_id: str,
        loader: Loader,
    ) -> RemoteEntity | None:
        key = verification_key(category, content_id)
        if key in self._entries:
            return self._entries[key]

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader, self._generation))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _load(self, key: str, loader: Loader, generation: int) -> RemoteEntity | None:
        try:
            self.lookups += 1
            entity = await loader()
            if entity is None:
                log.debug("Remote entity %s no longer exists", key)
            if generation == self._generation:
                self._entries[key] = entity
            return entity
        finally:
            if generation == self._generation:
                self._inflight.pop(key, None)
