"""SQLAlchemy-backed unit of work for metamodel evolution.

``startup`` binds one engine per process; every unit of work opens its own
session from it. Nothing a unit of work does is persisted until ``commit``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from metaevo.adapters.sqlalchemy.migrations import upgrade_head
from metaevo.adapters.sqlalchemy.store import SqlAlchemyMetamodelStore
from metaevo.config import get_database_config

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


class SqlAlchemyMetamodelUnitOfWork:
    _engine: ClassVar[Engine | None] = None
    _session_factory: ClassVar[sessionmaker[Session] | None] = None

    def __init__(self) -> None:
        if self._session_factory is None:
            raise StartupError(
                "No database bound. Call metaevo.adapters.sqlalchemy.startup() "
                "before opening a unit of work."
            )
        self._bound_factory = self._session_factory
        self._session: Session | None = None
        self._store: SqlAlchemyMetamodelStore | None = None

    @classmethod
    def bind(cls, engine: Engine | None) -> None:
        """Point new units of work at ``engine``, or at nothing when ``None``."""

        cls._engine = engine
        cls._session_factory = (
            None if engine is None else sessionmaker(bind=engine, expire_on_commit=False)
        )

    @classmethod
    def bound_engine(cls) -> Engine | None:
        return cls._engine

    def __enter__(self) -> SqlAlchemyMetamodelUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._bound_factory()
        self._store = SqlAlchemyMetamodelStore(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._store = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def store(self) -> SqlAlchemyMetamodelStore:
        if self._store is None:
            raise StartupError("Unit of work is not open")
        return self._store

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Migrate the database to head and bind it for new units of work."""

    if is_started() and not force:
        raise StartupError("Database already bound. Pass force=True to rebind.")
    if engine is None:
        engine = create_engine(database_uri or get_database_config().resolve_uri(), future=True)
    upgrade_head(engine=engine)
    SqlAlchemyMetamodelUnitOfWork.bind(engine)


def is_started() -> bool:
    return SqlAlchemyMetamodelUnitOfWork.bound_engine() is not None


def shutdown() -> None:
    """Dispose the bound engine and unbind it."""

    engine = SqlAlchemyMetamodelUnitOfWork.bound_engine()
    SqlAlchemyMetamodelUnitOfWork.bind(None)
    if engine is not None:
        engine.dispose()


if TYPE_CHECKING:
    from metaevo.domain.ports import MetamodelUnitOfWork

    _uow_check: MetamodelUnitOfWork = SqlAlchemyMetamodelUnitOfWork()
