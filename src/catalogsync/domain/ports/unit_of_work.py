"""Transaction boundary around the local content store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from catalogsync.domain.ports.persistence import ContentRepository, ShopRepository


@dataclass(slots=True, frozen=True)
class ContentRepositories:
    shops: ShopRepository
    contents: ContentRepository


@runtime_checkable
class ContentUnitOfWork(Protocol):
    """Context manager yielding the repositories of one store session.

    Leaving the block with an exception rolls back; anything not committed
    is discarded when the session closes.
    """

    @property
    def repositories(self) -> ContentRepositories: ...

    def __enter__(self) -> ContentUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool | None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
