"""Listing and lookup of remote entities behind the shared admission gate."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import chain
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.config.reconcile import (
    DEFAULT_ARTICLE_BATCH_COOLDOWN,
    DEFAULT_ARTICLE_BATCH_SIZE,
)
from catalogsync.domain.errors import RemoteError
from catalogsync.domain.model import ContentCategory
from catalogsync.domain.ports.remote import RemoteCatalog
from catalogsync.resilience import BatchRunner

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from catalogsync.domain.model import RemoteEntity
    from catalogsync.domain.ports.remote import RemoteCatalogClient, RemotePage
    from catalogsync.resilience import BackoffRetrier, SlidingWindowLimiter

log = getLogger(__name__)

type PageFetch = Callable[[str | None], Awaitable[RemotePage]]


@dataclass(slots=True)
class RemoteCatalogFetcher:
    """Read the remote catalog through limiter, retrier and batch runner.

    Every single HTTP request (each page of a listing, each lookup) waits for
    admission on ``limiter`` and is retried by ``retrier`` when throttled.
    """

    client: RemoteCatalogClient
    limiter: SlidingWindowLimiter
    retrier: BackoffRetrier
    batch_runner: BatchRunner = field(default_factory=BatchRunner)
    article_batch_size: int = DEFAULT_ARTICLE_BATCH_SIZE
    article_batch_cooldown: float = DEFAULT_ARTICLE_BATCH_COOLDOWN

    async def fetch_catalog(self) -> RemoteCatalog:
        products = await self._list_all(lambda cursor: self.client.list_products(cursor=cursor))
        blogs = await self._list_all(lambda cursor: self.client.list_blogs(cursor=cursor))
        per_blog = await self.batch_runner.run(
            blogs,
            self.article_batch_size,
            self._articles_for_blog,
            self.article_batch_cooldown,
        )
        articles = list(chain.from_iterable(per_blog))
        log.info(
            "Fetched remote catalog: products=%s, blogs=%s, articles=%s",
            len(products),
            len(blogs),
            len(articles),
        )
        return RemoteCatalog(products=products, blogs=blogs, articles=articles)

    async def lookup(
        self,
        category: ContentCategory,
        content_id: str,
        parent_id: str | None = None,
    ) -> RemoteEntity | None:
        """Fetch one entity, or ``None`` if the platform no longer has it."""

        match category:
            case ContentCategory.PRODUCT:
                return await self._call(lambda: self.client.get_product(content_id))
            case ContentCategory.BLOG:
                return await self._call(lambda: self.client.get_blog(content_id))
            case ContentCategory.ARTICLE:
                if parent_id is None:
                    log.debug("Article %s has no blog id, cannot verify", content_id)
                    return None
                return await self._call(lambda: self.client.get_article(parent_id, content_id))

    async def _articles_for_blog(self, blog: RemoteEntity) -> list[RemoteEntity]:
        blog_id = str(blog.id)
        try:
            return await self._list_all(
                lambda cursor: self.client.list_articles(blog_id, cursor=cursor)
            )
        except RemoteError as exc:
            if exc.fatal:
                raise
            log.warning("Error fetching articles for blog %s: %s", blog_id, exc)
            return []

    async def _list_all(self, fetch_page: PageFetch) -> list[RemoteEntity]:
        items: list[RemoteEntity] = []
        cursor: str | None = None
        while True:
            page = await self._call(lambda: fetch_page(cursor))
            items.extend(page.items)
            if not page.next_cursor:
                return items
            cursor = page.next_cursor

    async def _call[T](self, operation: Callable[[], Awaitable[T]]) -> T:
        async def admitted() -> T:
            await self.limiter.wait_if_needed()
            return await operation()

        return await self.retrier.retry(admitted)
