"""Batch applier: push every pending operation through the metamodel store.

A batch is refused as a whole while any ambiguity is unresolved. Otherwise each
operation is applied on its own: a ``MetamodelError`` fails that operation and
the sweep moves on. Earlier mutations are not rolled back.

Apply procedures re-resolve every name through the store at apply time and
check what they need before their first mutation, so a failed operation leaves
the schema as it found it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from metaevo.domain.model import ElementConflictError, ElementNotFoundError, InvalidIntentError
from metaevo.domain.model.errors import MetamodelError

from .interpret import validate_intent
from .intents import (
    AddAttributeIntent,
    AddClassIntent,
    AddReferenceIntent,
    ModifyAttributeIntent,
    ModifyClassIntent,
    ModifyReferenceIntent,
    RemoveAttributeIntent,
    RemoveClassIntent,
    RemoveReferenceIntent,
)

if TYPE_CHECKING:
    from metaevo.domain.ports import MetamodelStore

    from .intents import MutationIntent
    from .ledger import EvolutionLedger
    from .operations import EvolutionOperation


log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class BatchApplyResult:
    success: bool
    applied: tuple[EvolutionOperation, ...] = ()
    failed: tuple[EvolutionOperation, ...] = ()
    errors: tuple[str, ...] = ()


def unresolved_ambiguities_message(count: int) -> str:
    return (
        f"There are {count} unresolved ambiguities. "
        "Please resolve them before applying changes."
    )


def _required(value: str | None, label: str) -> str:
    if not value:
        raise InvalidIntentError(f"{label} is required")
    return value


# --- Apply procedures -------------------------------------------------------


def _apply_add_class(store: MetamodelStore, intent: AddClassIntent) -> None:
    store.create_class(
        _required(intent.class_name, "Class name"),
        tuple(intent.super_types),
        intent.abstract,
        intent.interface,
    )


def _apply_add_attribute(store: MetamodelStore, intent: AddAttributeIntent) -> None:
    store.add_attribute(
        _required(intent.class_name, "Class name"),
        _required(intent.attribute_name, "Attribute name"),
        intent.attribute_type,
        intent.lower_bound,
        intent.upper_bound,
    )


def _apply_add_reference(store: MetamodelStore, intent: AddReferenceIntent) -> None:
    store.add_reference(
        _required(intent.source_class_name, "Source class name"),
        _required(intent.target_class_name, "Target class name"),
        _required(intent.reference_name, "Reference name"),
        intent.containment,
        intent.lower_bound,
        intent.upper_bound,
    )


def _apply_remove_class(store: MetamodelStore, intent: RemoveClassIntent) -> None:
    store.remove_class(_required(intent.class_name, "Class name"))


def _apply_remove_attribute(store: MetamodelStore, intent: RemoveAttributeIntent) -> None:
    store.remove_attribute(
        _required(intent.class_name, "Class name"),
        _required(intent.attribute_name, "Attribute name"),
    )


def _apply_remove_reference(store: MetamodelStore, intent: RemoveReferenceIntent) -> None:
    store.remove_reference(
        _required(intent.class_name, "Class name"),
        _required(intent.reference_name, "Reference name"),
    )


def _apply_modify_class(store: MetamodelStore, intent: ModifyClassIntent) -> None:
    class_name = _required(intent.class_name, "Class name")
    if store.find_class_by_name(class_name) is None:
        raise ElementNotFoundError(f"Class {class_name} not found")
    # the super type list and the rename are two store calls; both are checked
    # up front so the second cannot fail after the first has landed
    if (
        intent.new_name
        and intent.new_name != class_name
        and store.find_class_by_name(intent.new_name) is not None
    ):
        raise ElementConflictError(f"Class {intent.new_name} already exists")
    if intent.new_super_types is not None:
        for super_type_name in intent.new_super_types:
            if store.find_class_by_name(super_type_name) is None:
                raise ElementNotFoundError(f"Super type {super_type_name} not found")
        store.set_super_types(class_name, tuple(intent.new_super_types))

    store.update_class(
        class_name,
        new_name=intent.new_name,
        abstract=intent.new_abstract,
        interface=intent.new_interface,
    )


def _apply_modify_attribute(store: MetamodelStore, intent: ModifyAttributeIntent) -> None:
    store.update_attribute(
        _required(intent.class_name, "Class name"),
        _required(intent.attribute_name, "Attribute name"),
        new_name=intent.new_name,
        type_name=intent.new_type,
        lower_bound=intent.new_lower_bound,
        upper_bound=intent.new_upper_bound,
    )


def _apply_modify_reference(store: MetamodelStore, intent: ModifyReferenceIntent) -> None:
    store.update_reference(
        _required(intent.class_name, "Class name"),
        _required(intent.reference_name, "Reference name"),
        new_name=intent.new_name,
        target_class_name=intent.new_target_class_name,
        containment=intent.new_containment,
        lower_bound=intent.new_lower_bound,
        upper_bound=intent.new_upper_bound,
    )


type ApplyProcedure = Callable[[Any, Any], None]

_PROCEDURES: Final[dict[type[Any], ApplyProcedure]] = {
    AddClassIntent: _apply_add_class,
    AddAttributeIntent: _apply_add_attribute,
    AddReferenceIntent: _apply_add_reference,
    RemoveClassIntent: _apply_remove_class,
    RemoveAttributeIntent: _apply_remove_attribute,
    RemoveReferenceIntent: _apply_remove_reference,
    ModifyClassIntent: _apply_modify_class,
    ModifyAttributeIntent: _apply_modify_attribute,
    ModifyReferenceIntent: _apply_modify_reference,
}


def apply_intent(store: MetamodelStore, intent: MutationIntent | None) -> None:
    """Perform ``intent`` against ``store``; raise ``MetamodelError`` on failure."""

    if intent is None:
        raise InvalidIntentError("Operation has no intent")
    try:
        procedure = _PROCEDURES[type(intent)]
    except KeyError as exc:
        raise InvalidIntentError(f"No apply procedure for {type(intent).__name__}") from exc
    procedure(store, intent)


# --- Applier ----------------------------------------------------------------


@dataclass(slots=True)
class BatchApplier:
    store: MetamodelStore
    ledger: EvolutionLedger
    revalidate: bool = False

    def apply_pending(self) -> BatchApplyResult:
        ambiguous_count = len(self.ledger.ambiguities)
        if ambiguous_count:
            message = unresolved_ambiguities_message(ambiguous_count)
            log.warning(message)
            return BatchApplyResult(success=False, errors=(message,))

        applied: list[EvolutionOperation] = []
        failed: list[EvolutionOperation] = []
        errors: list[str] = []

        for operation in self.ledger.pending:
            # an unexpected error leaves the operation pending and queued
            detail = self._apply_one(operation)
            if detail is None:
                operation.mark_applied()
                self.ledger.discharge(operation.operation_id)
                applied.append(operation)
                log.debug(
                    "Applied %s %s (%s)",
                    operation.change_type,
                    operation.element_kind,
                    operation.operation_id,
                )
                continue

            operation.mark_failed(detail)
            self.ledger.discharge(operation.operation_id)
            failed.append(operation)
            errors.append(f"Failed to apply operation: {detail}")
            log.warning(
                "Failed %s %s (%s): %s",
                operation.change_type,
                operation.element_kind,
                operation.operation_id,
                detail,
            )

        log.info("Applied %d operation(s), %d failed", len(applied), len(failed))
        return BatchApplyResult(
            success=not failed,
            applied=tuple(applied),
            failed=tuple(failed),
            errors=tuple(errors),
        )

    def _apply_one(self, operation: EvolutionOperation) -> str | None:
        """Return ``None`` on success, otherwise the failure detail."""

        if self.revalidate and operation.intent is not None:
            reason = validate_intent(operation.intent, self.store)
            if reason is not None:
                return f"Validation failed: {reason}"
        try:
            apply_intent(self.store, operation.intent)
        except MetamodelError as exc:
            return str(exc)
        return None
