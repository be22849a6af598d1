"""Ambiguity resolution: merge caller-supplied fields into a stuck intent."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .ledger import EvolutionLedger
    from .operations import EvolutionOperation, OperationId


log = getLogger(__name__)


class OperationNotFoundError(LookupError):
    """Raised when an operation handle is not known to the ledger."""

    def __init__(self, operation_id: OperationId) -> None:
        super().__init__(f"Operation {operation_id} not found")
        self.operation_id = operation_id


@dataclass(slots=True)
class AmbiguityResolver:
    ledger: EvolutionLedger

    def resolve(
        self,
        operation_id: OperationId,
        resolution: Mapping[str, object],
    ) -> EvolutionOperation:
        """Apply ``resolution`` to an ambiguous operation and queue it.

        Values are type-checked; a malformed one keeps the operation ambiguous
        with the problem as its reason. The merged intent is not re-checked
        against the store here; a resolution that introduces a collision
        surfaces when the batch is applied.
        """

        operation = self.ledger.get(operation_id)
        if operation is None:
            raise OperationNotFoundError(operation_id)

        if not operation.is_ambiguous:
            log.debug("Operation %s is %s; nothing to resolve", operation_id, operation.state)
            return operation

        if operation.intent is None:
            log.warning(
                "Operation %s (%s %s) cannot be resolved: %s",
                operation_id,
                operation.change_type,
                operation.element_kind,
                operation.ambiguity_reason,
            )
            return operation

        intent, ignored, problem = operation.intent.merged(resolution)
        if ignored:
            log.warning(
                "Ignoring unknown resolution fields for %s: %s",
                operation_id,
                ", ".join(ignored),
            )
        if problem is not None:
            log.warning("Operation %s stays ambiguous: %s", operation_id, problem)
            operation.ambiguity_reason = problem
            return operation

        operation.mark_resolved(intent)
        self.ledger.move_to_resolved(operation_id)
        log.info("Resolved %s %s (%s)", operation.change_type, operation.element_kind, operation_id)
        return operation
