from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Literal
from uuid import UUID

from catalogsync.domain.errors import RateLimitedError
from catalogsync.domain.model import ContentCategory, ContentRecord, ShopRecord
from catalogsync.domain.ports.remote import RemotePage
from catalogsync.domain.ports.unit_of_work import ContentRepositories
from catalogsync.domain.reconciliation import RemoteCatalogFetcher
from catalogsync.resilience import BackoffRetrier, BatchRunner

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from types import TracebackType

BASE_TIME = datetime(2024, 6, 1, 12, tzinfo=UTC)


async def no_sleep(_: float) -> None:
    return None


@dataclass(frozen=True)
class FakeEntity:
    id: int | str
    blog_id: int | str | None = None


def products(*ids: int | str) -> list[FakeEntity]:
    return [FakeEntity(id=value) for value in ids]


class FakeCatalogClient:
    """In-memory remote catalog with cursor pagination and call recording."""

    def __init__(
        self,
        *,
        products: Iterable[FakeEntity] = (),
        blogs: Iterable[FakeEntity] = (),
        articles: dict[str, list[FakeEntity]] | None = None,
        unlisted: Iterable[FakeEntity] = (),
        article_errors: dict[str, Exception] | None = None,
        throttle: dict[str, int] | None = None,
        page_size: int = 250,
    ) -> None:
        self.products = list(products)
        self.blogs = list(blogs)
        self.articles = dict(articles or {})
        self.unlisted = list(unlisted)
        self.article_errors = dict(article_errors or {})
        self.throttle = dict(throttle or {})
        self.page_size = page_size
        self.calls: list[tuple[str, ...]] = []
        self.closed = False

    async def __aenter__(self) -> FakeCatalogClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.closed = True

    @property
    def lookup_calls(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0].startswith("get_")]

    async def list_products(self, *, cursor: str | None = None) -> RemotePage:
        self._record("list_products", cursor or "")
        return self._page(self.products, cursor)

    async def list_blogs(self, *, cursor: str | None = None) -> RemotePage:
        self._record("list_blogs", cursor or "")
        return self._page(self.blogs, cursor)

    async def list_articles(self, blog_id: str, *, cursor: str | None = None) -> RemotePage:
        self._record("list_articles", blog_id, cursor or "")
        error = self.article_errors.get(blog_id)
        if error is not None:
            raise error
        return self._page(self.articles.get(blog_id, []), cursor)

    async def get_product(self, product_id: str) -> FakeEntity | None:
        self._record("get_product", product_id)
        return self._find(self.products, product_id)

    async def get_blog(self, blog_id: str) -> FakeEntity | None:
        self._record("get_blog", blog_id)
        return self._find(self.blogs, blog_id)

    async def get_article(self, blog_id: str, article_id: str) -> FakeEntity | None:
        self._record("get_article", blog_id, article_id)
        return self._find(self.articles.get(blog_id, []), article_id)

    def _record(self, name: str, *args: str) -> None:
        self.calls.append((name, *args))
        remaining = self.throttle.get(name, 0)
        if remaining > 0:
            self.throttle[name] = remaining - 1
            raise RateLimitedError(f"{name} throttled")

    def _page(self, items: Sequence[FakeEntity], cursor: str | None) -> RemotePage:
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        next_cursor = str(end) if end < len(items) else None
        return RemotePage(items=list(items[start:end]), next_cursor=next_cursor)

    def _find(self, entities: Iterable[FakeEntity], content_id: str) -> FakeEntity | None:
        for entity in [*entities, *self.unlisted]:
            if str(entity.id) == str(content_id):
                return entity
        return None


class FakeSessionFactory:
    def __init__(
        self,
        client: FakeCatalogClient | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.client = client or FakeCatalogClient()
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def __call__(self, shop_name: str, access_token: str) -> FakeCatalogClient:
        self.calls.append((shop_name, access_token))
        if self.error is not None:
            raise self.error
        return self.client


class RecordingLimiter:
    """Admits immediately and counts admissions."""

    def __init__(self) -> None:
        self.admissions = 0

    async def wait_if_needed(self) -> None:
        self.admissions += 1


def make_fetcher(
    client: FakeCatalogClient,
    *,
    limiter: RecordingLimiter | None = None,
    max_attempts: int = 3,
    article_batch_size: int = 10,
) -> RemoteCatalogFetcher:
    return RemoteCatalogFetcher(
        client=client,
        limiter=limiter or RecordingLimiter(),  # type: ignore[arg-type]
        retrier=BackoffRetrier(max_attempts=max_attempts, sleep=no_sleep),
        batch_runner=BatchRunner(sleep=no_sleep),
        article_batch_size=article_batch_size,
        article_batch_cooldown=0.0,
    )


def make_record(
    shop_id: UUID,
    content_id: str | int,
    category: ContentCategory = ContentCategory.PRODUCT,
    *,
    age: int = 0,
    output: dict[str, Any] | None = None,
) -> ContentRecord:
    """Build a record created ``age`` minutes before ``BASE_TIME``."""

    return ContentRecord(
        content_id=str(content_id),
        category=category,
        shop_id=shop_id,
        output=dict(output or {"title": f"{category.lower()} {content_id}"}),
        created_at=BASE_TIME - timedelta(minutes=age),
    )


class FakeShopRepository:
    def __init__(self) -> None:
        self.items: dict[str, ShopRecord] = {}

    def add(self, entity: ShopRecord) -> None:
        self.items[entity.name] = entity

    def get_by_name(self, name: str) -> ShopRecord | None:
        return self.items.get(name)


class FakeContentRepository:
    def __init__(self) -> None:
        self.items: list[ContentRecord] = []
        self.page_requests: list[tuple[int, int]] = []

    def add(self, entity: ContentRecord) -> None:
        self.items.append(entity)

    def page(self, shop_id: UUID, *, offset: int, limit: int) -> list[ContentRecord]:
        self.page_requests.append((offset, limit))
        ordered = sorted(
            (record for record in self.items if record.shop_id == shop_id),
            key=lambda record: record.created_at,
            reverse=True,
        )
        return ordered[offset : offset + limit]

    def count(self, shop_id: UUID) -> int:
        return sum(1 for record in self.items if record.shop_id == shop_id)


class FakeContentUnitOfWork:
    def __init__(self, repositories: ContentRepositories) -> None:
        self._repositories = repositories
        self.committed = False

    @property
    def repositories(self) -> ContentRepositories:
        return self._repositories

    def __enter__(self) -> FakeContentUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        return False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.committed = False


@dataclass
class FakeContentStore:
    shops: FakeShopRepository = field(default_factory=FakeShopRepository)
    contents: FakeContentRepository = field(default_factory=FakeContentRepository)

    def unit_of_work(self) -> FakeContentUnitOfWork:
        return FakeContentUnitOfWork(ContentRepositories(shops=self.shops, contents=self.contents))

    def add_shop(self, name: str = "demo") -> ShopRecord:
        shop = ShopRecord(name=name)
        self.shops.add(shop)
        return shop

    def add_records(self, records: Iterable[ContentRecord]) -> None:
        for record in records:
            self.contents.add(record)
