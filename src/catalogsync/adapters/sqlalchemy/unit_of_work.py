"""Engine lifecycle and the SQLAlchemy unit of work for shops and content."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catalogsync.config.storage import get_database_config
from catalogsync.domain.ports.unit_of_work import ContentRepositories

from .mappings import create_all_tables, start_mappers
from .repositories import SqlAlchemyContentRepository, SqlAlchemyShopRepository

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the store is used before ``startup`` or configured twice."""


class _StoreState:
    """The engine bound by ``startup`` and its session factory."""

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self._sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def sessions(self) -> sessionmaker[Session]:
        if self._sessions is None:
            raise StartupError(
                "Content store not started; call catalogsync.adapters.sqlalchemy."
                "unit_of_work.startup() first."
            )
        return self._sessions


_STATE = _StoreState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the store to ``engine`` (or a new engine for ``database_uri``) and create tables."""

    if _STATE.engine is not None and not force:
        raise StartupError("Content store already started; pass force=True to rebind.")

    if engine is None:
        uri = database_uri or get_database_config().uri
        engine = create_engine(uri, future=True)
    start_mappers()
    create_all_tables(engine)
    _STATE.bind(engine)
    log.info("Content store started on %s", engine.url.render_as_string(hide_password=True))


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine; tests call this between cases."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyContentUnitOfWork:
    """One ORM session exposing shop and content repositories."""

    def __init__(self) -> None:
        self._make_session = _STATE.sessions()
        self._session: Session | None = None
        self._repositories: ContentRepositories | None = None

    def __enter__(self) -> SqlAlchemyContentUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = self._make_session()
        self._repositories = ContentRepositories(
            shops=SqlAlchemyShopRepository(self._session),
            contents=SqlAlchemyContentRepository(self._session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self._session = None
        self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with-block")
        return self._session

    @property
    def repositories(self) -> ContentRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside its with-block")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from catalogsync.domain.ports.unit_of_work import ContentUnitOfWork

    _uow_check: ContentUnitOfWork = SqlAlchemyContentUnitOfWork()
