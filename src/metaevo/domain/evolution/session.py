"""Evolution session: one store, one ledger, the whole pipeline around them."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from metaevo.domain.model import DEFAULT_ATTRIBUTE_TYPE

from .apply import BatchApplier
from .coevolution import co_evolve_model
from .interpret import OperationInterpreter
from .ledger import EvolutionLedger
from .report import build_report
from .resolve import AmbiguityResolver

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from metaevo.config import EvolutionConfig
    from metaevo.domain.ports import MetamodelStore

    from .apply import BatchApplyResult
    from .coevolution import CoEvolutionResult
    from .descriptors import ChangeDescriptor
    from .operations import EvolutionOperation, OperationId
    from .report import EvolutionReport


log = getLogger(__name__)


class EvolutionSession:
    """Facade over interpreter, ledger, resolver, applier and reporter.

    The session never owns the store's transaction; callers backed by a
    database commit through their unit of work after ``apply_pending``.
    """

    def __init__(self, store: MetamodelStore, config: EvolutionConfig | None = None) -> None:
        self.store = store
        self.ledger = EvolutionLedger()
        revalidate = config.revalidate_on_apply if config is not None else False
        default_type = (
            config.default_attribute_type if config is not None else DEFAULT_ATTRIBUTE_TYPE
        )
        self._interpreter = OperationInterpreter(
            store, self.ledger, default_attribute_type=default_type
        )
        self._resolver = AmbiguityResolver(self.ledger)
        self._applier = BatchApplier(store, self.ledger, revalidate=revalidate)

    @property
    def operations(self) -> tuple[EvolutionOperation, ...]:
        return self.ledger.operations

    @property
    def pending(self) -> tuple[EvolutionOperation, ...]:
        return self.ledger.pending

    @property
    def ambiguities(self) -> tuple[EvolutionOperation, ...]:
        return self.ledger.ambiguities

    def interpret(self, descriptor: ChangeDescriptor) -> EvolutionOperation:
        return self._interpreter.interpret(descriptor)

    def interpret_all(self, descriptors: Iterable[ChangeDescriptor]) -> list[EvolutionOperation]:
        operations = [self._interpreter.interpret(descriptor) for descriptor in descriptors]
        log.info(
            "Interpreted %d change(s): %d pending, %d ambiguous",
            len(operations),
            len(self.ledger.pending),
            len(self.ledger.ambiguities),
        )
        return operations

    def resolve(
        self,
        operation_id: OperationId,
        resolution: Mapping[str, object],
    ) -> EvolutionOperation:
        return self._resolver.resolve(operation_id, resolution)

    def apply_pending(self) -> BatchApplyResult:
        return self._applier.apply_pending()

    def report(self) -> EvolutionReport:
        return build_report(self.ledger)

    def co_evolve_model(self, model_path: str | Path, output_path: str | Path) -> CoEvolutionResult:
        return co_evolve_model(model_path, output_path)
