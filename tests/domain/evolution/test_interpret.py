from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from metaevo.domain.evolution import (
    UNKNOWN_CHANGE_REASON,
    AddAttributeIntent,
    ChangeDescriptor,
    EvolutionLedger,
    OperationInterpreter,
    RemoveClassIntent,
    validate_intent,
)
from metaevo.domain.model import LifecycleState
from tests.helpers.metamodels import change

if TYPE_CHECKING:
    from metaevo.adapters.memory import InMemoryMetamodelStore


@pytest.fixture
def ledger() -> EvolutionLedger:
    return EvolutionLedger()


@pytest.fixture
def interpreter(
    memory_store: InMemoryMetamodelStore,
    ledger: EvolutionLedger,
) -> OperationInterpreter:
    return OperationInterpreter(memory_store, ledger)


def test_valid_change_is_queued_as_pending(
    interpreter: OperationInterpreter,
    ledger: EvolutionLedger,
) -> None:
    operation = interpreter.interpret(change("add", "attribute", class_name="Person", name="email"))

    assert operation.state is LifecycleState.PENDING
    assert operation.ambiguity_reason is None
    assert isinstance(operation.intent, AddAttributeIntent)
    assert ledger.pending == (operation,)
    assert ledger.ambiguities == ()


def test_details_are_copied_verbatim(interpreter: OperationInterpreter) -> None:
    details = {"class_name": "Person", "name": "email", "extra": 1}

    operation = interpreter.interpret(
        ChangeDescriptor(change_type="add", element_kind="attribute", details=details)
    )

    assert operation.details == details
    assert operation.details is not details


def test_unknown_pair_is_recorded_as_ambiguous_without_intent(
    interpreter: OperationInterpreter,
    ledger: EvolutionLedger,
) -> None:
    operation = interpreter.interpret(change("rename", "package", name="x"))

    assert operation.state is LifecycleState.AMBIGUOUS
    assert operation.ambiguity_reason == UNKNOWN_CHANGE_REASON
    assert operation.intent is None
    assert ledger.ambiguities == (operation,)
    assert ledger.pending == ()


@pytest.mark.parametrize(
    ("descriptor", "reason"),
    [
        (change("add", "class"), "Class name is required"),
        (change("add", "class", name="Person"), "Class Person already exists"),
        (change("add", "attribute", name="x"), "Class name is required"),
        (change("add", "attribute", class_name="Person"), "Attribute name is required"),
        (
            change("add", "attribute", class_name="Ghost", name="x"),
            "Class Ghost does not exist",
        ),
        (
            change("add", "attribute", class_name="Person", name="age"),
            "Attribute age already exists in class Person",
        ),
        (
            change("add", "reference", target_class_name="Person", name="r"),
            "Source class name is required",
        ),
        (
            change("add", "reference", source_class_name="Person", name="r"),
            "Target class name is required",
        ),
        (
            change("add", "reference", source_class_name="Person", target_class_name="Person"),
            "Reference name is required",
        ),
        (
            change(
                "add", "reference", source_class_name="Ghost", target_class_name="Person", name="r"
            ),
            "Source class Ghost does not exist",
        ),
        (
            change(
                "add", "reference", source_class_name="Person", target_class_name="Ghost", name="r"
            ),
            "Target class Ghost does not exist",
        ),
        (
            change(
                "add",
                "reference",
                source_class_name="Person",
                target_class_name="Company",
                name="employer",
            ),
            "Reference employer already exists in class Person",
        ),
        (change("remove", "class", name="Ghost"), "Class Ghost does not exist"),
        (
            change("remove", "attribute", class_name="Person", name="height"),
            "Attribute height does not exist in class Person",
        ),
        (
            change("remove", "reference", class_name="Person", name="pets"),
            "Reference pets does not exist in class Person",
        ),
        (change("modify", "class", name="Ghost"), "Class Ghost does not exist"),
        (
            change("modify", "class", name="Person", new_name="Company"),
            "Class Company already exists",
        ),
        (
            change("modify", "attribute", class_name="Person", name="height"),
            "Attribute height does not exist in class Person",
        ),
        (
            change("modify", "reference", class_name="Person", name="employer", new_name="friends"),
            "Reference friends already exists in class Person",
        ),
        (
            change(
                "modify",
                "reference",
                class_name="Person",
                name="employer",
                new_target_class_name="Ghost",
            ),
            "Target class Ghost does not exist",
        ),
    ],
)
def test_checks_report_first_violation(
    interpreter: OperationInterpreter,
    descriptor: ChangeDescriptor,
    reason: str,
) -> None:
    operation = interpreter.interpret(descriptor)

    assert operation.state is LifecycleState.AMBIGUOUS
    assert operation.ambiguity_reason == reason


def test_remove_class_lists_every_other_referencing_class(
    interpreter: OperationInterpreter,
) -> None:
    operation = interpreter.interpret(change("remove", "class", name="Person"))

    # Person also references itself through "friends"; that does not count
    assert operation.ambiguity_reason == "Class Person is referenced by: Company"


def test_remove_class_lists_referencing_classes_once_in_schema_order(
    memory_store: InMemoryMetamodelStore,
    interpreter: OperationInterpreter,
) -> None:
    memory_store.add_reference("Person", "Address", "home", False, 0, 1)
    memory_store.add_reference("Person", "Address", "work", False, 0, 1)
    memory_store.add_reference("Company", "Address", "office", False, 0, 1)

    operation = interpreter.interpret(change("remove", "class", name="Address"))

    assert operation.ambiguity_reason == "Class Address is referenced by: Person, Company"


@pytest.mark.parametrize(
    ("element_kind", "details"),
    [
        ("class", {"name": "Person", "new_name": "Person", "new_abstract": True}),
        ("attribute", {"class_name": "Person", "name": "age", "new_name": "age"}),
        ("reference", {"class_name": "Person", "name": "friends", "new_name": "friends"}),
    ],
)
def test_renaming_to_the_same_name_is_not_a_conflict(
    interpreter: OperationInterpreter,
    element_kind: str,
    details: dict[str, object],
) -> None:
    operation = interpreter.interpret(change("modify", element_kind, **details))

    assert operation.state is LifecycleState.PENDING


def test_malformed_detail_becomes_ambiguity(interpreter: OperationInterpreter) -> None:
    operation = interpreter.interpret(
        change("add", "attribute", class_name="Person", name="email", lower_bound="none")
    )

    assert operation.state is LifecycleState.AMBIGUOUS
    assert operation.ambiguity_reason is not None
    assert operation.ambiguity_reason.startswith("Invalid value for lower_bound")


def test_tags_are_matched_case_insensitively(interpreter: OperationInterpreter) -> None:
    operation = interpreter.interpret(change("ADD", "Class", name="Employee"))

    assert operation.state is LifecycleState.PENDING


def test_checks_see_store_state_only(
    interpreter: OperationInterpreter,
    ledger: EvolutionLedger,
) -> None:
    first = interpreter.interpret(change("add", "class", name="Employee"))
    second = interpreter.interpret(change("add", "class", name="Employee"))

    assert first.state is LifecycleState.PENDING
    assert second.state is LifecycleState.PENDING
    assert len(ledger.pending) == 2


def test_validate_intent_is_reusable(memory_store: InMemoryMetamodelStore) -> None:
    assert validate_intent(RemoveClassIntent(class_name="Address"), memory_store) is None

    memory_store.add_reference("Company", "Address", "office", False, 0, 1)

    assert (
        validate_intent(RemoveClassIntent(class_name="Address"), memory_store)
        == "Class Address is referenced by: Company"
    )
