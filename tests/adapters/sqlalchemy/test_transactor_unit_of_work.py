from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from transactor.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from transactor.domain.model import Record

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True, migrate=False)

    with pytest.raises(StartupError):
        startup(engine=engine_b, migrate=False)

    startup(engine=engine_b, force=True, migrate=False)
    assert configured_engine() is engine_b


def test_repositories_require_entered_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True, migrate=False)

    with pytest.raises(StartupError):
        _ = SqlAlchemyUnitOfWork().repositories


def test_unit_of_work_commits_records(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True, migrate=False)

    with SqlAlchemyUnitOfWork() as uow:
        item = Record(record_type="inventory_item", bundle="tools", label="Socket wrench")
        uow.repositories.records.add(item)
        uow.commit()
        item_id = item.id

    assert item_id is not None
    with SqlAlchemyUnitOfWork() as uow:
        stored = uow.repositories.records.get("inventory_item", item_id)
        assert stored is not None
        assert stored.label == "Socket wrench"


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True, migrate=False)

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyUnitOfWork() as uow:
        item = Record(record_type="inventory_item", bundle="tools", label="Discarded")
        uow.repositories.records.add(item)
        item_id = item.id
        raise RuntimeError("boom")

    assert item_id is not None
    with SqlAlchemyUnitOfWork() as uow:
        assert uow.repositories.records.get("inventory_item", item_id) is None
