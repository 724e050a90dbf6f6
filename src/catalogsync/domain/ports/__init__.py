"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ContentRepository, Repository, ShopRepository
from .remote import (
    RemoteCatalog,
    RemoteCatalogClient,
    RemotePage,
    RemoteSession,
    RemoteSessionFactory,
)
from .unit_of_work import ContentRepositories, ContentUnitOfWork

__all__ = [
    "ContentRepositories",
    "ContentRepository",
    "ContentUnitOfWork",
    "RemoteCatalog",
    "RemoteCatalogClient",
    "RemotePage",
    "RemoteSession",
    "RemoteSessionFactory",
    "Repository",
    "ShopRepository",
]
