from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from metaevo.adapters.memory import InMemoryMetamodelStore
from metaevo.adapters.sqlalchemy.migrations import upgrade_head
from metaevo.adapters.sqlalchemy.store import SqlAlchemyMetamodelStore
from metaevo.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMetamodelUnitOfWork,
    shutdown,
    startup,
)
from metaevo.domain.evolution import EvolutionSession
from tests.helpers.metamodels import make_people_package

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from metaevo.domain.model import MetaPackage


@pytest.fixture
def people_package() -> MetaPackage:
    return make_people_package()


@pytest.fixture
def memory_store(people_package: MetaPackage) -> InMemoryMetamodelStore:
    return InMemoryMetamodelStore(people_package)


@pytest.fixture
def session(memory_store: InMemoryMetamodelStore) -> EvolutionSession:
    return EvolutionSession(memory_store)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    db_session = session_factory()
    try:
        yield db_session
    finally:
        db_session.close()


@pytest.fixture
def sql_store(sqlite_session: Session) -> SqlAlchemyMetamodelStore:
    return SqlAlchemyMetamodelStore(sqlite_session)


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyMetamodelUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyMetamodelUnitOfWork:
        return SqlAlchemyMetamodelUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
