"""JSON document adapter: metamodels, change batches, resolutions and reports."""

from __future__ import annotations

from .loader import (
    load_change_batch,
    load_metamodel,
    load_resolutions,
    render_report,
    save_metamodel,
)
from .schema import (
    ChangeBatchDocument,
    MetamodelDocument,
    ReportDocument,
    ResolutionBatchDocument,
    ResolutionDocument,
)
from .translator import (
    descriptor_from_document,
    document_from_package,
    package_from_document,
    snake_case_keys,
)

__all__ = [
    "ChangeBatchDocument",
    "MetamodelDocument",
    "ReportDocument",
    "ResolutionBatchDocument",
    "ResolutionDocument",
    "descriptor_from_document",
    "document_from_package",
    "load_change_batch",
    "load_metamodel",
    "load_resolutions",
    "package_from_document",
    "render_report",
    "save_metamodel",
    "snake_case_keys",
]
