from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from metaevo.config import EvolutionConfig
from metaevo.domain.evolution import (
    AddAttributeIntent,
    EvolutionSession,
    ModifyClassIntent,
    apply_intent,
)
from metaevo.domain.model import (
    UNBOUNDED,
    ElementConflictError,
    InvalidIntentError,
    LifecycleState,
)
from tests.helpers.metamodels import change

if TYPE_CHECKING:
    from metaevo.adapters.memory import InMemoryMetamodelStore
    from metaevo.domain.model import MetaPackage


def test_pending_operations_are_applied_in_order(
    session: EvolutionSession,
    people_package: MetaPackage,
) -> None:
    session.interpret_all(
        [
            change("add", "class", name="Employee", super_types=["Person"]),
            change("add", "attribute", class_name="Person", name="email"),
            change(
                "add",
                "reference",
                source_class_name="Person",
                target_class_name="Address",
                name="addresses",
                containment=True,
                upper_bound=UNBOUNDED,
            ),
        ]
    )

    result = session.apply_pending()

    assert result.success is True
    assert result.errors == ()
    assert len(result.applied) == 3
    assert all(op.state is LifecycleState.APPLIED for op in session.operations)
    assert session.pending == ()

    employee = people_package.get_class("Employee")
    assert [c.name for c in employee.super_types] == ["Person"]
    email = people_package.get_class("Person").get_attribute("email")
    assert (email.type_name, email.lower_bound, email.upper_bound) == ("EString", 0, 1)
    addresses = people_package.get_class("Person").get_reference("addresses")
    assert addresses.containment is True
    assert addresses.upper_bound == UNBOUNDED
    session.ledger.validate_invariants()


def test_batch_is_refused_while_ambiguities_remain(
    session: EvolutionSession,
    people_package: MetaPackage,
) -> None:
    session.interpret(change("add", "class", name="Employee"))
    session.interpret(change("remove", "class", name="Ghost"))
    session.interpret(change("rename", "package", name="x"))

    result = session.apply_pending()

    assert result.success is False
    assert result.errors == (
        "There are 2 unresolved ambiguities. Please resolve them before applying changes.",
    )
    assert result.applied == ()
    assert people_package.find_class("Employee") is None
    assert len(session.pending) == 1
    session.ledger.validate_invariants()


def test_one_failure_does_not_stop_the_batch(
    session: EvolutionSession,
    people_package: MetaPackage,
) -> None:
    session.interpret(change("add", "class", name="Employee"))
    session.interpret(change("add", "class", name="Employee"))

    result = session.apply_pending()

    assert result.success is False
    assert len(result.applied) == 1
    assert len(result.failed) == 1
    assert result.errors == ("Failed to apply operation: Class Employee already exists",)
    failed = result.failed[0]
    assert failed.state is LifecycleState.FAILED
    assert failed.failure_detail == "Class Employee already exists"
    assert people_package.find_class("Employee") is not None
    assert session.pending == ()
    session.ledger.validate_invariants()


def test_revalidation_fails_collisions_introduced_by_resolution(
    memory_store: InMemoryMetamodelStore,
) -> None:
    session = EvolutionSession(memory_store, EvolutionConfig(revalidate_on_apply=True))
    operation = session.interpret(change("add", "class", name="Company"))
    session.resolve(operation.operation_id, {})

    result = session.apply_pending()

    assert result.success is False
    assert operation.failure_detail == "Validation failed: Class Company already exists"
    assert result.errors == (
        "Failed to apply operation: Validation failed: Class Company already exists",
    )


def test_revalidation_sees_earlier_operations_of_the_batch(
    memory_store: InMemoryMetamodelStore,
) -> None:
    session = EvolutionSession(memory_store, EvolutionConfig(revalidate_on_apply=True))
    session.interpret(change("add", "class", name="Employee"))
    session.interpret(change("add", "attribute", class_name="Address", name="city"))
    session.interpret(change("remove", "attribute", class_name="Address", name="street"))

    result = session.apply_pending()

    assert result.success is True
    assert len(result.applied) == 3


def test_applied_operations_are_not_reapplied(session: EvolutionSession) -> None:
    session.interpret(change("add", "class", name="Employee"))
    session.apply_pending()

    second = session.apply_pending()

    assert second.success is True
    assert second.applied == ()


def test_modify_class_checks_everything_before_mutating(
    memory_store: InMemoryMetamodelStore,
    people_package: MetaPackage,
) -> None:
    intent = ModifyClassIntent(
        class_name="Address",
        new_name="Company",
        new_super_types=("Named",),
    )

    with pytest.raises(ElementConflictError, match="Class Company already exists"):
        apply_intent(memory_store, intent)

    assert people_package.get_class("Address").super_types == ()


def test_modify_class_renames_and_reparents(
    memory_store: InMemoryMetamodelStore,
    people_package: MetaPackage,
) -> None:
    apply_intent(
        memory_store,
        ModifyClassIntent(
            class_name="Address",
            new_name="Location",
            new_super_types=("Named",),
            new_abstract=True,
        ),
    )

    location = people_package.get_class("Location")
    assert location.abstract is True
    assert [c.name for c in location.super_types] == ["Named"]


def test_missing_required_name_is_an_invalid_intent(memory_store: InMemoryMetamodelStore) -> None:
    with pytest.raises(InvalidIntentError, match="Attribute name is required"):
        apply_intent(memory_store, AddAttributeIntent(class_name="Person", attribute_name=None))

    with pytest.raises(InvalidIntentError, match="no intent"):
        apply_intent(memory_store, None)


def test_unknown_data_type_fails_at_apply_time(session: EvolutionSession) -> None:
    operation = session.interpret(
        change("add", "attribute", class_name="Person", name="photo", type="EImage")
    )

    result = session.apply_pending()

    assert result.success is False
    assert operation.failure_detail == "DataType EImage not found"


def test_modify_bounds_keep_existing_values_when_absent(
    session: EvolutionSession,
    people_package: MetaPackage,
) -> None:
    session.interpret(
        change("modify", "reference", class_name="Person", name="employer", new_lower_bound=1)
    )
    session.interpret(
        change("modify", "attribute", class_name="Named", name="name", new_lower_bound=0)
    )

    result = session.apply_pending()

    assert result.success is True
    employer = people_package.get_class("Person").get_reference("employer")
    assert (employer.lower_bound, employer.upper_bound) == (1, 1)
    name = people_package.get_class("Named").get_attribute("name")
    assert (name.lower_bound, name.upper_bound) == (0, 1)


def test_unexpected_error_leaves_the_operation_queued(
    session: EvolutionSession,
    memory_store: InMemoryMetamodelStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    operation = session.interpret(change("add", "class", name="Employee"))

    def broken_create_class(*_args: object) -> None:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(memory_store, "create_class", broken_create_class)

    with pytest.raises(RuntimeError, match="disk on fire"):
        session.apply_pending()

    assert operation.state is LifecycleState.PENDING
    assert session.pending == (operation,)
    session.ledger.validate_invariants()
