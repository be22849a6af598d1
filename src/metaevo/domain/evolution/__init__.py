"""Evolution pipeline: interpret, stage, resolve, apply and report schema changes."""

from __future__ import annotations

from .apply import BatchApplier, BatchApplyResult, apply_intent
from .coevolution import NOT_SUPPORTED_MESSAGE, CoEvolutionResult, co_evolve_model
from .descriptors import ChangeDescriptor
from .intents import (
    AddAttributeIntent,
    AddClassIntent,
    AddReferenceIntent,
    ModifyAttributeIntent,
    ModifyClassIntent,
    ModifyReferenceIntent,
    MutationIntent,
    RemoveAttributeIntent,
    RemoveClassIntent,
    RemoveReferenceIntent,
)
from .interpret import UNKNOWN_CHANGE_REASON, OperationInterpreter, validate_intent
from .ledger import EvolutionLedger
from .operations import EvolutionOperation, OperationId
from .report import EvolutionReport, OperationSummary, build_report
from .resolve import AmbiguityResolver, OperationNotFoundError
from .session import EvolutionSession

__all__ = [  # noqa: RUF022
    # pipeline
    "AmbiguityResolver",
    "BatchApplier",
    "EvolutionLedger",
    "EvolutionSession",
    "OperationInterpreter",
    "apply_intent",
    "build_report",
    "co_evolve_model",
    "validate_intent",
    # records
    "BatchApplyResult",
    "ChangeDescriptor",
    "CoEvolutionResult",
    "EvolutionOperation",
    "EvolutionReport",
    "OperationId",
    "OperationSummary",
    # intents
    "AddAttributeIntent",
    "AddClassIntent",
    "AddReferenceIntent",
    "ModifyAttributeIntent",
    "ModifyClassIntent",
    "ModifyReferenceIntent",
    "MutationIntent",
    "RemoveAttributeIntent",
    "RemoveClassIntent",
    "RemoveReferenceIntent",
    # errors
    "OperationNotFoundError",
    # messages
    "NOT_SUPPORTED_MESSAGE",
    "UNKNOWN_CHANGE_REASON",
]
