"""Ports for the local content store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from catalogsync.domain.model import ContentRecord, ShopRecord


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ShopRepository(Repository["ShopRecord"], Protocol):
    def get_by_name(self, name: str) -> ShopRecord | None: ...


@runtime_checkable
class ContentRepository(Repository["ContentRecord"], Protocol):
    """Read access to a shop's content, newest first."""

    def page(self, shop_id: UUID, *, offset: int, limit: int) -> list[ContentRecord]: ...

    def count(self, shop_id: UUID) -> int: ...
