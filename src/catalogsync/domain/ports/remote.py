"""Ports for reading the authoritative remote catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from catalogsync.domain.model import RemoteEntity


@runtime_checkable
class RemoteCatalogClient(Protocol):
    """Single-request operations against the remote catalog.

    Listing methods return one page at a time; pass the previous page's
    ``next_cursor`` to continue. Implementations raise the
    ``catalogsync.domain.errors`` taxonomy. Lookups return ``None`` when the
    entity does not exist remotely.
    """

    async def list_products(self, *, cursor: str | None = None) -> RemotePage: ...

    async def list_blogs(self, *, cursor: str | None = None) -> RemotePage: ...

    async def list_articles(self, blog_id: str, *, cursor: str | None = None) -> RemotePage: ...

    async def get_product(self, product_id: str) -> RemoteEntity | None: ...

    async def get_blog(self, blog_id: str) -> RemoteEntity | None: ...

    async def get_article(self, blog_id: str, article_id: str) -> RemoteEntity | None: ...


@runtime_checkable
class RemoteSession(RemoteCatalogClient, Protocol):
    """A remote client bound to one shop's credentials, closed after use."""

    async def __aenter__(self) -> RemoteSession: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class RemoteSessionFactory(Protocol):
    """Open a validated remote session for a shop.

    Raises ``InvalidSessionError`` when the credentials are rejected,
    ``ClientInitializationError`` when the client cannot be built and
    ``RateLimitedError`` when validation stays throttled.
    """

    async def __call__(self, shop_name: str, access_token: str) -> RemoteSession: ...


@dataclass(slots=True)
class RemoteCatalog:
    """Snapshot of every entity currently listed by the remote platform."""

    products: list[RemoteEntity] = field(default_factory=list)
    blogs: list[RemoteEntity] = field(default_factory=list)
    articles: list[RemoteEntity] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.products) + len(self.blogs) + len(self.articles)


@dataclass(slots=True, frozen=True)
class RemotePage:
    """One page of a cursor-paginated listing."""

    items: Sequence[RemoteEntity]
    next_cursor: str | None = None
