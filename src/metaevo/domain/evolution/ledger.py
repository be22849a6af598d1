"""Evolution ledger: append-only operation log plus two derived indices.

- the log holds every interpreted operation in interpretation order
- the pending queue holds ids of operations waiting for ``apply_pending``
- the ambiguity set holds ids of operations waiting for a resolution

Indices hold identifiers, never copies, so a transition is a key move between
two containers and cannot drift from the operation it refers to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from metaevo.domain.model import LifecycleState

if TYPE_CHECKING:
    from .operations import EvolutionOperation, OperationId


@dataclass(slots=True)
class EvolutionLedger:
    _operations_by_id: dict[OperationId, EvolutionOperation] = field(
        default_factory=dict["OperationId", "EvolutionOperation"], repr=False
    )
    # dicts as insertion-ordered sets: O(1) membership, deterministic order
    _pending_ids: dict[OperationId, None] = field(
        default_factory=dict["OperationId", None], repr=False
    )
    _ambiguous_ids: dict[OperationId, None] = field(
        default_factory=dict["OperationId", None], repr=False
    )

    @property
    def operations(self) -> tuple[EvolutionOperation, ...]:
        return tuple(self._operations_by_id.values())

    @property
    def pending(self) -> tuple[EvolutionOperation, ...]:
        return tuple(self._operations_by_id[op_id] for op_id in self._pending_ids)

    @property
    def ambiguities(self) -> tuple[EvolutionOperation, ...]:
        return tuple(self._operations_by_id[op_id] for op_id in self._ambiguous_ids)

    def __len__(self) -> int:
        return len(self._operations_by_id)

    def get(self, operation_id: OperationId) -> EvolutionOperation | None:
        return self._operations_by_id.get(operation_id)

    def record(self, operation: EvolutionOperation) -> None:
        """Append ``operation`` to the log and file it into one index by state."""

        if operation.operation_id in self._operations_by_id:
            raise ValueError(f"Operation {operation.operation_id} already recorded")
        if operation.state is LifecycleState.PENDING:
            self._pending_ids[operation.operation_id] = None
        elif operation.state is LifecycleState.AMBIGUOUS:
            self._ambiguous_ids[operation.operation_id] = None
        else:
            raise ValueError(
                f"Operation {operation.operation_id} must be pending or ambiguous "
                f"when recorded, got {operation.state}"
            )
        self._operations_by_id[operation.operation_id] = operation

    def move_to_resolved(self, operation_id: OperationId) -> None:
        """Move an operation from the ambiguity set to the end of the pending queue."""

        if operation_id not in self._ambiguous_ids:
            raise ValueError(f"Operation {operation_id} is not in the ambiguity set")
        del self._ambiguous_ids[operation_id]
        self._pending_ids[operation_id] = None

    def discharge(self, operation_id: OperationId) -> None:
        """Drop an operation from the pending queue once the applier is done with it."""

        self._pending_ids.pop(operation_id, None)

    def validate_invariants(self) -> None:
        for op_id in self._pending_ids:
            operation = self._operations_by_id.get(op_id)
            if operation is None:
                raise ValueError(f"Pending queue references missing operation {op_id}")
            if operation.state is not LifecycleState.PENDING:
                raise ValueError(f"Pending queue holds {op_id} in state {operation.state}")

        for op_id in self._ambiguous_ids:
            operation = self._operations_by_id.get(op_id)
            if operation is None:
                raise ValueError(f"Ambiguity set references missing operation {op_id}")
            if operation.state is not LifecycleState.AMBIGUOUS:
                raise ValueError(f"Ambiguity set holds {op_id} in state {operation.state}")

        for op_id, operation in self._operations_by_id.items():
            if operation.state is LifecycleState.PENDING and op_id not in self._pending_ids:
                raise ValueError(f"Pending operation {op_id} missing from pending queue")
            if operation.state is LifecycleState.AMBIGUOUS and op_id not in self._ambiguous_ids:
                raise ValueError(f"Ambiguous operation {op_id} missing from ambiguity set")
            if operation.state is LifecycleState.AMBIGUOUS and operation.ambiguity_reason is None:
                raise ValueError(f"Ambiguous operation {op_id} has no reason")
            if operation.state is LifecycleState.FAILED and operation.failure_detail is None:
                raise ValueError(f"Failed operation {op_id} has no failure detail")
