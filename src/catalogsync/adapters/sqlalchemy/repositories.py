"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from catalogsync.adapters.sqlalchemy.mappings import content_table, shop_table
from catalogsync.domain.model import ContentRecord, ShopRecord

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyShopRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ShopRecord) -> None:
        self.session.add(entity)

    def get_by_name(self, name: str) -> ShopRecord | None:
        stmt = select(ShopRecord).where(shop_table.c.name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyContentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ContentRecord) -> None:
        self.session.add(entity)

    def page(self, shop_id: UUID, *, offset: int, limit: int) -> list[ContentRecord]:
        stmt = (
            select(ContentRecord)
            .where(content_table.c.shop_id == shop_id)
            .order_by(content_table.c.created_at.desc(), content_table.c.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self, shop_id: UUID) -> int:
        stmt = select(func.count()).select_from(content_table).where(
            content_table.c.shop_id == shop_id
        )
        return self.session.execute(stmt).scalar_one()
