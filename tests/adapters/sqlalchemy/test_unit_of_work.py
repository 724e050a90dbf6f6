from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from catalogsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContentUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from catalogsync.domain.model import ShopRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyContentUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_from_database_uri() -> None:
    startup(database_uri="sqlite+pysqlite:///:memory:")

    engine = configured_engine()
    assert engine is not None
    assert engine.url.get_backend_name() == "sqlite"


def test_commit_persists_and_exception_rolls_back(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyContentUnitOfWork() as uow:
        uow.repositories.shops.add(ShopRecord(name="kept"))
        uow.commit()

    with pytest.raises(RuntimeError), SqlAlchemyContentUnitOfWork() as uow:
        uow.repositories.shops.add(ShopRecord(name="discarded"))
        uow.session.flush()
        raise RuntimeError("abort")

    with SqlAlchemyContentUnitOfWork() as uow:
        assert uow.repositories.shops.get_by_name("kept") is not None
        assert uow.repositories.shops.get_by_name("discarded") is None


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyContentUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
