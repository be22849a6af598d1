"""Domain port definitions for adapters."""

from __future__ import annotations

from .store import MetamodelStore, SchemaClass
from .unit_of_work import MetamodelUnitOfWork

__all__ = [
    "MetamodelStore",
    "MetamodelUnitOfWork",
    "SchemaClass",
]
