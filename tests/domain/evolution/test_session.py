from __future__ import annotations

from typing import TYPE_CHECKING

from metaevo.config import EvolutionConfig
from metaevo.domain.evolution import EvolutionSession
from metaevo.domain.model import LifecycleState
from tests.helpers.metamodels import change

if TYPE_CHECKING:
    from metaevo.adapters.memory import InMemoryMetamodelStore
    from metaevo.domain.model import MetaPackage


def test_full_pipeline_with_resolution(
    session: EvolutionSession,
    people_package: MetaPackage,
) -> None:
    operations = session.interpret_all(
        [
            change("add", "class", name="Employee", super_types=["Person"]),
            change("add", "attribute", class_name="Employee", name="salary", type="EDouble"),
            change("modify", "attribute", class_name="Person", name="age", new_name="name"),
            change("remove", "attribute", class_name="Address", name="street"),
        ]
    )

    # Employee does not exist yet when the attribute is checked
    assert [op.state for op in operations] == [
        LifecycleState.PENDING,
        LifecycleState.AMBIGUOUS,
        LifecycleState.PENDING,
        LifecycleState.PENDING,
    ]
    assert session.apply_pending().success is False

    session.resolve(operations[1].operation_id, {"class_name": "Person"})
    result = session.apply_pending()

    # "name" is inherited, not declared on Person, so the rename succeeds
    assert result.success is True
    person = people_package.get_class("Person")
    assert person.find_attribute("name") is not None
    assert person.find_attribute("salary") is not None
    assert people_package.get_class("Address").attributes == ()
    report = session.report()
    assert report.applied_count == 4
    session.ledger.validate_invariants()


def test_configured_default_attribute_type(memory_store: InMemoryMetamodelStore) -> None:
    session = EvolutionSession(memory_store, EvolutionConfig(default_attribute_type="EInt"))

    operation = session.interpret(change("add", "attribute", class_name="Person", name="rank"))

    assert operation.intent.attribute_type == "EInt"  # type: ignore[union-attr]


def test_sessions_do_not_share_ledgers(memory_store: InMemoryMetamodelStore) -> None:
    first = EvolutionSession(memory_store)
    second = EvolutionSession(memory_store)

    first.interpret(change("add", "class", name="Employee"))

    assert len(first.operations) == 1
    assert second.operations == ()


def test_reissued_add_class_is_ambiguous_once_applied(session: EvolutionSession) -> None:
    first = session.interpret(change("add", "class", name="Employee"))
    session.apply_pending()

    second = session.interpret(change("add", "class", name="Employee"))

    assert first.state is LifecycleState.APPLIED
    assert second.state is LifecycleState.AMBIGUOUS
    assert second.ambiguity_reason == "Class Employee already exists"


def test_reissued_add_attribute_is_pending_until_applied(session: EvolutionSession) -> None:
    descriptor = change("add", "attribute", class_name="Address", name="city")

    first = session.interpret(descriptor)
    again = session.interpret(descriptor)
    assert (first.state, again.state) == (LifecycleState.PENDING, LifecycleState.PENDING)

    session.apply_pending()
    after_apply = session.interpret(descriptor)

    assert after_apply.state is LifecycleState.AMBIGUOUS
    assert after_apply.ambiguity_reason == "Attribute city already exists in class Address"
