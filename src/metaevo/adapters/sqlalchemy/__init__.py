"""SQLAlchemy adapter package for metaevo."""

from __future__ import annotations

from .mappings import create_all_tables, metadata
from .package_io import export_package, import_package
from .store import SqlAlchemyMetamodelStore
from .unit_of_work import (
    SqlAlchemyMetamodelUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyMetamodelStore",
    "SqlAlchemyMetamodelUnitOfWork",
    "StartupError",
    "create_all_tables",
    "export_package",
    "import_package",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
