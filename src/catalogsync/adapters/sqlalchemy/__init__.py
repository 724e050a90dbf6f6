"""SQLAlchemy adapter package for catalogsync."""

from __future__ import annotations

from .mappings import content_table, create_all_tables, mapper_registry, shop_table, start_mappers
from .repositories import SqlAlchemyContentRepository, SqlAlchemyShopRepository
from .unit_of_work import (
    SqlAlchemyContentUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyContentRepository",
    "SqlAlchemyContentUnitOfWork",
    "SqlAlchemyShopRepository",
    "StartupError",
    "configured_engine",
    "content_table",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shop_table",
    "shutdown",
    "start_mappers",
]
