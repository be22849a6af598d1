"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from metaevo.adapters.document import (
    load_change_batch,
    load_metamodel,
    load_resolutions,
    save_metamodel,
)
from metaevo.adapters.memory import InMemoryMetamodelStore
from metaevo.adapters.sqlalchemy import (
    SqlAlchemyMetamodelUnitOfWork,
    export_package,
    import_package,
    is_started,
    startup,
)
from metaevo.config import get_evolution_config
from metaevo.domain.evolution import EvolutionSession, co_evolve_model

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from metaevo.adapters.document import ResolutionDocument
    from metaevo.config import EvolutionConfig
    from metaevo.domain.evolution import (
        BatchApplyResult,
        ChangeDescriptor,
        CoEvolutionResult,
        EvolutionReport,
    )
    from metaevo.domain.model import MetaPackage

UnitOfWorkFactory = Callable[[], SqlAlchemyMetamodelUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EvolutionOutcome:
    report: EvolutionReport
    apply_result: BatchApplyResult | None = None

    @property
    def success(self) -> bool:
        return self.apply_result is not None and self.apply_result.success


def _ensure_started(database_uri: str | None) -> None:
    if not is_started():
        startup(database_uri=database_uri)


def apply_resolutions(
    session: EvolutionSession,
    resolutions: Sequence[ResolutionDocument],
) -> None:
    """Feed resolution entries to ``session``, addressing by id or batch position."""

    operations = session.operations
    for entry in resolutions:
        if entry.operation_id is not None:
            operation_id = entry.operation_id
        else:
            index = entry.change_index
            if index is None or not 0 <= index < len(operations):
                raise ValueError(f"Resolution refers to unknown change index {index}")
            operation_id = operations[index].operation_id
        session.resolve(operation_id, entry.resolution)


def run_evolution(
    session: EvolutionSession,
    descriptors: Sequence[ChangeDescriptor],
    resolutions: Sequence[ResolutionDocument] = (),
    *,
    apply: bool = True,
) -> EvolutionOutcome:
    """Interpret a batch, resolve what the caller resolved, then apply it."""

    session.interpret_all(descriptors)
    apply_resolutions(session, resolutions)
    if not apply:
        return EvolutionOutcome(report=session.report())

    result = session.apply_pending()
    for error in result.errors:
        log.warning(error)
    return EvolutionOutcome(report=session.report(), apply_result=result)


def evolve_document(
    *,
    metamodel_path: Path,
    changes_path: Path,
    resolutions_path: Path | None = None,
    output_path: Path | None = None,
    config: EvolutionConfig | None = None,
    dry_run: bool = False,
) -> EvolutionOutcome:
    """Evolve a JSON metamodel file in memory and write the result back out.

    Nothing is written on a dry run or when the batch was refused.
    """

    package = load_metamodel(metamodel_path)
    descriptors = load_change_batch(changes_path)
    resolutions = load_resolutions(resolutions_path) if resolutions_path else []

    session = EvolutionSession(InMemoryMetamodelStore(package), config or get_evolution_config())
    outcome = run_evolution(session, descriptors, resolutions, apply=not dry_run)

    if outcome.apply_result is not None and outcome.apply_result.applied:
        target = output_path or metamodel_path
        save_metamodel(package, target)
        log.info("Wrote evolved metamodel to %s", target)
    return outcome


def import_metamodel(
    metamodel_path: Path,
    *,
    replace: bool = False,
    database_uri: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MetaPackage:
    """Load a JSON metamodel and persist it in the configured database."""

    _ensure_started(database_uri)
    package = load_metamodel(metamodel_path)
    effective_uow = unit_of_work_factory or SqlAlchemyMetamodelUnitOfWork
    with effective_uow() as uow:
        import_package(uow.store, package, replace=replace)
        uow.commit()
    return package


def evolve_database(
    *,
    changes_path: Path,
    resolutions_path: Path | None = None,
    config: EvolutionConfig | None = None,
    dry_run: bool = False,
    database_uri: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EvolutionOutcome:
    """Evolve the persisted metamodel inside one unit of work.

    Operations applied before a failing one stay applied and are committed
    together with the rest of the batch.
    """

    _ensure_started(database_uri)
    descriptors = load_change_batch(changes_path)
    resolutions = load_resolutions(resolutions_path) if resolutions_path else []
    effective_uow = unit_of_work_factory or SqlAlchemyMetamodelUnitOfWork

    with effective_uow() as uow:
        session = EvolutionSession(uow.store, config or get_evolution_config())
        outcome = run_evolution(session, descriptors, resolutions, apply=not dry_run)
        if outcome.apply_result is not None and outcome.apply_result.applied:
            uow.commit()
            log.info("Committed %d applied operation(s)", len(outcome.apply_result.applied))
    return outcome


def export_metamodel(
    output_path: Path,
    *,
    database_uri: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MetaPackage:
    """Write the persisted metamodel to a JSON file."""

    _ensure_started(database_uri)
    effective_uow = unit_of_work_factory or SqlAlchemyMetamodelUnitOfWork
    with effective_uow() as uow:
        package = export_package(uow.store)
    save_metamodel(package, output_path)
    log.info("Exported metamodel %s to %s", package.name, output_path)
    return package


def co_evolve(model_path: Path, output_path: Path) -> CoEvolutionResult:
    return co_evolve_model(model_path, output_path)
