"""Operation interpreter: change descriptors to staged evolution operations.

Responsibilities of this stage:
- dispatch each ``(change_type, element_kind)`` pair to its intent parser
- run referential and uniqueness checks for the intent against the store
- record the resulting operation in the ledger as pending or ambiguous

Checks are read-only and short-circuit on the first violation. They reflect
the store's current state only; operations already sitting in the ledger are
not taken into account.

A modify whose ``new_name`` equals the element's current name is a no-op rename,
not a name collision: the element only collides with itself, so the operation
stays pending for its other changes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from metaevo.domain.model import DEFAULT_ATTRIBUTE_TYPE, ChangeType, ElementKind, LifecycleState

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
from .operations import EvolutionOperation

if TYPE_CHECKING:
    from metaevo.domain.ports import MetamodelStore, SchemaClass

    from .descriptors import ChangeDescriptor
    from .intents import MutationIntent
    from .ledger import EvolutionLedger


log = getLogger(__name__)

UNKNOWN_CHANGE_REASON: Final[str] = "Unknown change type or element"

type ChangePair = tuple[ChangeType, ElementKind]
type IntentCheck = Callable[[Any, MetamodelStore], str | None]


# --- Store queries ----------------------------------------------------------


def _attribute_names(store: MetamodelStore, meta_class: SchemaClass) -> set[str]:
    return {attribute.name for attribute in store.get_class_attributes(meta_class)}


def _reference_names(store: MetamodelStore, meta_class: SchemaClass) -> set[str]:
    return {reference.name for reference in store.get_class_references(meta_class)}


def referencing_class_names(store: MetamodelStore, class_name: str) -> list[str]:
    """Names of other classes holding a reference typed by ``class_name``.

    Self-references are ignored; they disappear together with the class.
    """

    names: list[str] = []
    for candidate in store.get_all_classes():
        if candidate.name == class_name or candidate.name in names:
            continue
        if any(ref.type == class_name for ref in store.get_class_references(candidate)):
            names.append(candidate.name)
    return names


# --- Checks -----------------------------------------------------------------


def _check_add_class(intent: AddClassIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if store.find_class_by_name(intent.class_name) is not None:
        return f"Class {intent.class_name} already exists"
    return None


def _check_add_attribute(intent: AddAttributeIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if not intent.attribute_name:
        return "Attribute name is required"
    meta_class = store.find_class_by_name(intent.class_name)
    if meta_class is None:
        return f"Class {intent.class_name} does not exist"
    if intent.attribute_name in _attribute_names(store, meta_class):
        return f"Attribute {intent.attribute_name} already exists in class {intent.class_name}"
    return None


def _check_add_reference(intent: AddReferenceIntent, store: MetamodelStore) -> str | None:
    if not intent.source_class_name:
        return "Source class name is required"
    if not intent.target_class_name:
        return "Target class name is required"
    if not intent.reference_name:
        return "Reference name is required"
    source = store.find_class_by_name(intent.source_class_name)
    if source is None:
        return f"Source class {intent.source_class_name} does not exist"
    if store.find_class_by_name(intent.target_class_name) is None:
        return f"Target class {intent.target_class_name} does not exist"
    if intent.reference_name in _reference_names(store, source):
        return (
            f"Reference {intent.reference_name} already exists in class "
            f"{intent.source_class_name}"
        )
    return None


def _check_remove_class(intent: RemoveClassIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if store.find_class_by_name(intent.class_name) is None:
        return f"Class {intent.class_name} does not exist"
    referencing = referencing_class_names(store, intent.class_name)
    if referencing:
        return f"Class {intent.class_name} is referenced by: {', '.join(referencing)}"
    return None


def _check_remove_attribute(intent: RemoveAttributeIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if not intent.attribute_name:
        return "Attribute name is required"
    meta_class = store.find_class_by_name(intent.class_name)
    if meta_class is None:
        return f"Class {intent.class_name} does not exist"
    if intent.attribute_name not in _attribute_names(store, meta_class):
        return f"Attribute {intent.attribute_name} does not exist in class {intent.class_name}"
    return None


def _check_remove_reference(intent: RemoveReferenceIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if not intent.reference_name:
        return "Reference name is required"
    meta_class = store.find_class_by_name(intent.class_name)
    if meta_class is None:
        return f"Class {intent.class_name} does not exist"
    if intent.reference_name not in _reference_names(store, meta_class):
        return f"Reference {intent.reference_name} does not exist in class {intent.class_name}"
    return None


def _check_modify_class(intent: ModifyClassIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if store.find_class_by_name(intent.class_name) is None:
        return f"Class {intent.class_name} does not exist"
    if (
        intent.new_name
        and intent.new_name != intent.class_name
        and store.find_class_by_name(intent.new_name) is not None
    ):
        return f"Class {intent.new_name} already exists"
    return None


def _check_modify_attribute(intent: ModifyAttributeIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if not intent.attribute_name:
        return "Attribute name is required"
    meta_class = store.find_class_by_name(intent.class_name)
    if meta_class is None:
        return f"Class {intent.class_name} does not exist"
    existing = _attribute_names(store, meta_class)
    if intent.attribute_name not in existing:
        return f"Attribute {intent.attribute_name} does not exist in class {intent.class_name}"
    if intent.new_name and intent.new_name != intent.attribute_name and intent.new_name in existing:
        return f"Attribute {intent.new_name} already exists in class {intent.class_name}"
    return None


def _check_modify_reference(intent: ModifyReferenceIntent, store: MetamodelStore) -> str | None:
    if not intent.class_name:
        return "Class name is required"
    if not intent.reference_name:
        return "Reference name is required"
    meta_class = store.find_class_by_name(intent.class_name)
    if meta_class is None:
        return f"Class {intent.class_name} does not exist"
    existing = _reference_names(store, meta_class)
    if intent.reference_name not in existing:
        return f"Reference {intent.reference_name} does not exist in class {intent.class_name}"
    if intent.new_name and intent.new_name != intent.reference_name and intent.new_name in existing:
        return f"Reference {intent.new_name} already exists in class {intent.class_name}"
    if (
        intent.new_target_class_name
        and store.find_class_by_name(intent.new_target_class_name) is None
    ):
        return f"Target class {intent.new_target_class_name} does not exist"
    return None


# --- Registry ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IntentOps:
    intent_type: type[Any]
    check: IntentCheck


_REGISTRY: Final[dict[ChangePair, IntentOps]] = {
    (ChangeType.ADD, ElementKind.CLASS): IntentOps(AddClassIntent, _check_add_class),
    (ChangeType.ADD, ElementKind.ATTRIBUTE): IntentOps(AddAttributeIntent, _check_add_attribute),
    (ChangeType.ADD, ElementKind.REFERENCE): IntentOps(AddReferenceIntent, _check_add_reference),
    (ChangeType.REMOVE, ElementKind.CLASS): IntentOps(RemoveClassIntent, _check_remove_class),
    (ChangeType.REMOVE, ElementKind.ATTRIBUTE): IntentOps(
        RemoveAttributeIntent, _check_remove_attribute
    ),
    (ChangeType.REMOVE, ElementKind.REFERENCE): IntentOps(
        RemoveReferenceIntent, _check_remove_reference
    ),
    (ChangeType.MODIFY, ElementKind.CLASS): IntentOps(ModifyClassIntent, _check_modify_class),
    (ChangeType.MODIFY, ElementKind.ATTRIBUTE): IntentOps(
        ModifyAttributeIntent, _check_modify_attribute
    ),
    (ChangeType.MODIFY, ElementKind.REFERENCE): IntentOps(
        ModifyReferenceIntent, _check_modify_reference
    ),
}

_CHECKS_BY_INTENT_TYPE: Final[dict[type[Any], IntentCheck]] = {
    ops.intent_type: ops.check for ops in _REGISTRY.values()
}


def change_pair(change_type: str, element_kind: str) -> ChangePair | None:
    """Return the recognized pair for the given tags, or ``None``."""

    try:
        pair = (ChangeType(str(change_type).lower()), ElementKind(str(element_kind).lower()))
    except ValueError:
        return None
    return pair if pair in _REGISTRY else None


def validate_intent(intent: MutationIntent, store: MetamodelStore) -> str | None:
    """Run the interpretation-time checks for ``intent``; return the first violation."""

    try:
        check = _CHECKS_BY_INTENT_TYPE[type(intent)]
    except KeyError as exc:
        raise TypeError(f"No checks registered for {type(intent).__name__}") from exc
    return check(intent, store)


def parse_intent(
    pair: ChangePair,
    details: Mapping[str, object],
    *,
    default_attribute_type: str = DEFAULT_ATTRIBUTE_TYPE,
) -> tuple[MutationIntent, str | None]:
    intent_type = _REGISTRY[pair].intent_type
    if intent_type is AddAttributeIntent:
        return AddAttributeIntent.parse(details, default_type=default_attribute_type)
    return intent_type.parse(details)


# --- Interpreter ------------------------------------------------------------


@dataclass(slots=True)
class OperationInterpreter:
    """Interpret change descriptors and record them in the ledger."""

    store: MetamodelStore
    ledger: EvolutionLedger
    default_attribute_type: str = DEFAULT_ATTRIBUTE_TYPE

    def interpret(self, descriptor: ChangeDescriptor) -> EvolutionOperation:
        details = dict(descriptor.details)
        change_type = str(descriptor.change_type)
        element_kind = str(descriptor.element_kind)

        pair = change_pair(change_type, element_kind)
        if pair is None:
            operation = EvolutionOperation(
                change_type=change_type,
                element_kind=element_kind,
                details=details,
                state=LifecycleState.AMBIGUOUS,
                ambiguity_reason=UNKNOWN_CHANGE_REASON,
            )
        else:
            intent, problem = parse_intent(
                pair,
                details,
                default_attribute_type=self.default_attribute_type,
            )
            reason = problem or validate_intent(intent, self.store)
            operation = EvolutionOperation(
                change_type=change_type,
                element_kind=element_kind,
                details=details,
                state=LifecycleState.AMBIGUOUS if reason else LifecycleState.PENDING,
                intent=intent,
                ambiguity_reason=reason,
            )

        self.ledger.record(operation)
        if operation.is_ambiguous:
            log.info(
                "Ambiguous %s %s (%s): %s",
                change_type,
                element_kind,
                operation.operation_id,
                operation.ambiguity_reason,
            )
        else:
            log.debug("Queued %s %s (%s)", change_type, element_kind, operation.operation_id)
        return operation
