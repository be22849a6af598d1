"""Evolution operations: the ledger's unit of record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from metaevo.domain.model import LifecycleState

if TYPE_CHECKING:
    from .intents import MutationIntent


type OperationId = UUID


def new_operation_id() -> OperationId:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class EvolutionOperation:
    """An interpreted change and its lifecycle.

    ``ambiguity_reason`` is set iff the state is ``AMBIGUOUS``; ``failure_detail``
    is set iff the state is ``FAILED``. ``intent`` is ``None`` only when the
    change type/element pair was not recognized.
    """

    change_type: str
    element_kind: str
    details: dict[str, object]
    state: LifecycleState
    intent: MutationIntent | None = None
    ambiguity_reason: str | None = None
    failure_detail: str | None = None
    operation_id: OperationId = field(default_factory=new_operation_id)

    @property
    def is_ambiguous(self) -> bool:
        return self.state is LifecycleState.AMBIGUOUS

    @property
    def is_resolvable(self) -> bool:
        """Whether a resolution can ever turn this operation into a pending one."""
        return self.is_ambiguous and self.intent is not None

    def mark_resolved(self, intent: MutationIntent) -> None:
        if not self.is_ambiguous:
            raise ValueError(f"Operation {self.operation_id} is not ambiguous")
        self.intent = intent
        self.state = LifecycleState.PENDING
        self.ambiguity_reason = None

    def mark_applied(self) -> None:
        self._require_pending()
        self.state = LifecycleState.APPLIED

    def mark_failed(self, detail: str) -> None:
        self._require_pending()
        self.state = LifecycleState.FAILED
        self.failure_detail = detail

    def _require_pending(self) -> None:
        if self.state is not LifecycleState.PENDING:
            raise ValueError(
                f"Operation {self.operation_id} cannot leave state {self.state}; "
                "only pending operations are applied"
            )
