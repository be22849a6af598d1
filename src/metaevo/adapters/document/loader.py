"""File-level entry points for JSON metamodels, change batches and reports."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .schema import ChangeBatchDocument, MetamodelDocument, ResolutionBatchDocument
from .translator import (
    descriptor_from_document,
    document_from_package,
    package_from_document,
    report_document,
    snake_case_keys,
)

if TYPE_CHECKING:
    from pathlib import Path

    from metaevo.domain.evolution import ChangeDescriptor, EvolutionReport
    from metaevo.domain.model import MetaPackage

    from .schema import ResolutionDocument

log = logging.getLogger(__name__)


def load_metamodel(path: Path) -> MetaPackage:
    document = MetamodelDocument.model_validate_json(path.read_text(encoding="utf-8"))
    package = package_from_document(document)
    log.debug(
        "Loaded metamodel %s with %d class(es) from %s", package.name, len(package.classes), path
    )
    return package


def save_metamodel(package: MetaPackage, path: Path) -> None:
    document = document_from_package(package)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")
    log.debug("Saved metamodel %s to %s", package.name, path)


def load_change_batch(path: Path) -> list[ChangeDescriptor]:
    batch = ChangeBatchDocument.model_validate_json(path.read_text(encoding="utf-8"))
    return [descriptor_from_document(change) for change in batch.changes]


def load_resolutions(path: Path) -> list[ResolutionDocument]:
    """Resolution entries with their payload keys converted to snake_case."""

    batch = ResolutionBatchDocument.model_validate_json(path.read_text(encoding="utf-8"))
    return [
        entry.model_copy(update={"resolution": snake_case_keys(entry.resolution)})
        for entry in batch.resolutions
    ]


def render_report(report: EvolutionReport) -> str:
    return report_document(report).model_dump_json(by_alias=True, indent=2)
