"""Read-only projection of the ledger for presentation."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from metaevo.domain.model import LifecycleState

if TYPE_CHECKING:
    from .ledger import EvolutionLedger
    from .operations import EvolutionOperation, OperationId


@dataclass(frozen=True, slots=True, kw_only=True)
class OperationSummary:
    operation_id: OperationId
    change_type: str
    element_kind: str
    details: dict[str, object]
    state: LifecycleState
    ambiguity_reason: str | None = None
    failure_detail: str | None = None

    @classmethod
    def of(cls, operation: EvolutionOperation) -> OperationSummary:
        return cls(
            operation_id=operation.operation_id,
            change_type=operation.change_type,
            element_kind=operation.element_kind,
            details=dict(operation.details),
            state=operation.state,
            ambiguity_reason=operation.ambiguity_reason,
            failure_detail=operation.failure_detail,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class EvolutionReport:
    total_operations: int
    pending_count: int
    ambiguous_count: int
    applied_count: int
    failed_count: int
    operations: tuple[OperationSummary, ...] = field(default_factory=tuple)


def build_report(ledger: EvolutionLedger) -> EvolutionReport:
    """Summarize every operation the ledger has seen, in interpretation order.

    ``pending_count`` and ``ambiguous_count`` are taken from the two indices;
    the terminal counts are taken from operation states.
    """

    operations = ledger.operations
    states = Counter(operation.state for operation in operations)
    return EvolutionReport(
        total_operations=len(operations),
        pending_count=len(ledger.pending),
        ambiguous_count=len(ledger.ambiguities),
        applied_count=states[LifecycleState.APPLIED],
        failed_count=states[LifecycleState.FAILED],
        operations=tuple(OperationSummary.of(operation) for operation in operations),
    )
