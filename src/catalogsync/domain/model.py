"""Local content records and the grouped listing returned to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Protocol
from uuid import UUID, uuid4


class ContentCategory(StrEnum):
    PRODUCT = "PRODUCT"
    BLOG = "BLOG"
    ARTICLE = "ARTICLE"


class RemoteEntity(Protocol):
    """Any remote payload carrying the platform id."""

    @property
    def id(self) -> int | str: ...


_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(eq=False, kw_only=True)
class ShopRecord:
    """A shop known to the local store."""

    name: str
    id: UUID = field(default_factory=uuid4)


@dataclass(eq=False, kw_only=True)
class ContentRecord:
    """Published content as stored locally.

    ``content_id`` is the id of the entity on the remote platform; ``output`` is
    the generated payload that was published (title, body, ``blog_id`` for
    articles, and so on).
    """

    content_id: str
    category: ContentCategory
    shop_id: UUID
    output: dict[str, Any] = field(default_factory=dict)
    published_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    updated_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)

    @property
    def cache_key(self) -> str:
        return verification_key(self.category, self.content_id)

    @property
    def parent_id(self) -> str | None:
        """Remote id of the parent blog, for articles only."""

        if self.category is not ContentCategory.ARTICLE:
            return None
        blog_id = self.output.get("blog_id")
        if blog_id is None or str(blog_id) == "":
            return None
        return str(blog_id)

    @property
    def latest_timestamp(self) -> datetime:
        stamps = [
            _aware(value)
            for value in (self.published_at, self.created_at, self.updated_at)
            if value is not None
        ]
        return max(stamps, default=_EPOCH)


def verification_key(category: ContentCategory | str, content_id: object) -> str:
    return f"{ContentCategory(category)}:{content_id}"


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


type Entry = dict[str, Any]


@dataclass(slots=True)
class GroupedContent:
    products: list[Entry] = field(default_factory=list)
    blogs: list[Entry] = field(default_factory=list)
    articles: list[Entry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.products) + len(self.blogs) + len(self.articles)


@dataclass(slots=True)
class ContentPage:
    """Response body of the verified listing."""

    total: int
    content: GroupedContent

    def to_payload(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "products": self.content.products,
            "blogs": self.content.blogs,
            "articles": self.content.articles,
        }
