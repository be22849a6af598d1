from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from metaevo.adapters.memory import InMemoryMetamodelStore
from metaevo.domain.model import (
    UNBOUNDED,
    ClassInfo,
    ElementConflictError,
    ElementNotFoundError,
    MetaPackage,
)

if TYPE_CHECKING:
    from metaevo.domain.model import MetaClass


def test_default_store_starts_empty() -> None:
    store = InMemoryMetamodelStore()

    assert store.package.name == "metamodel"
    assert store.get_all_classes() == ()


def test_queries_accept_detached_handles(memory_store: InMemoryMetamodelStore) -> None:
    attributes = memory_store.get_class_attributes(ClassInfo(name="Named"))

    assert [a.name for a in attributes] == ["name"]
    with pytest.raises(ElementNotFoundError):
        memory_store.get_class_references(ClassInfo(name="Ghost"))


def test_feature_queries_return_snapshots(memory_store: InMemoryMetamodelStore) -> None:
    person = memory_store.find_class_by_name("Person")
    assert person is not None

    (age,) = memory_store.get_class_attributes(person)
    friends, employer = memory_store.get_class_references(person)

    assert (age.name, age.type) == ("age", "EInt")
    assert friends.type == "Person"
    assert friends.upper_bound == UNBOUNDED
    assert employer.type == "Company"


def test_mutations_delegate_to_the_graph(
    memory_store: InMemoryMetamodelStore,
    people_package: MetaPackage,
) -> None:
    memory_store.create_class("Employee", ["Person"], False, False)  # noqa: FBT003
    memory_store.add_attribute("Employee", "salary", "EDouble", 0, 1)
    memory_store.add_reference("Employee", "Address", "office", False, 0, 1)  # noqa: FBT003
    memory_store.update_reference("Employee", "office", target_class_name="Company")
    memory_store.update_class("Employee", new_name="Staff", abstract=True)

    staff: MetaClass = people_package.get_class("Staff")
    assert staff.abstract is True
    assert staff.get_attribute("salary").type_name == "EDouble"
    assert staff.get_reference("office").target is people_package.get_class("Company")


def test_remove_operations(
    memory_store: InMemoryMetamodelStore,
    people_package: MetaPackage,
) -> None:
    memory_store.remove_attribute("Address", "street")
    memory_store.remove_reference("Person", "friends")
    memory_store.remove_class("Address")

    assert people_package.find_class("Address") is None
    assert people_package.get_class("Person").find_reference("friends") is None
    with pytest.raises(ElementConflictError):
        memory_store.remove_class("Company")
    with pytest.raises(ElementNotFoundError):
        memory_store.remove_attribute("Person", "street")


def test_set_super_types_replaces_the_list(
    memory_store: InMemoryMetamodelStore,
    people_package: MetaPackage,
) -> None:
    memory_store.set_super_types("Address", ["Named"])
    memory_store.set_super_types("Person", [])

    assert [c.name for c in people_package.get_class("Address").super_types] == ["Named"]
    assert people_package.get_class("Person").super_types == ()
    with pytest.raises(ElementNotFoundError):
        memory_store.set_super_types("Person", ["Ghost"])
