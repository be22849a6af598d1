from __future__ import annotations

import pytest

from metaevo.domain.model import (
    UNBOUNDED,
    ElementConflictError,
    ElementNotFoundError,
    MetaPackage,
    check_bounds,
)
from tests.helpers.metamodels import make_people_package


def test_create_class_rejects_duplicate_name() -> None:
    package = make_people_package()

    with pytest.raises(ElementConflictError, match="Class Person already exists"):
        package.create_class("Person")


def test_create_class_requires_existing_super_types() -> None:
    package = MetaPackage(name="empty")

    with pytest.raises(ElementNotFoundError, match="Super type Base not found"):
        package.create_class("Derived", super_types=["Base"])

    assert package.classes == ()


def test_all_super_types_is_transitive_nearest_first() -> None:
    package = make_people_package()
    package.create_class("Employee", super_types=["Person"])

    employee = package.get_class("Employee")

    assert [c.name for c in employee.all_super_types] == ["Person", "Named"]


def test_add_attribute_rejects_unknown_data_type() -> None:
    address = make_people_package().get_class("Address")

    with pytest.raises(ElementConflictError, match="DataType EWhatever not found"):
        address.add_attribute("zip", type_name="EWhatever")

    assert address.find_attribute("zip") is None


def test_unbounded_upper_bound_is_kept_verbatim() -> None:
    person = make_people_package().get_class("Person")

    friends = person.get_reference("friends")

    assert friends.upper_bound == UNBOUNDED
    assert friends.info().upper_bound == -1


@pytest.mark.parametrize(
    ("lower", "upper"),
    [(-1, 1), (2, 1), (0, 0), (3, 2)],
)
def test_check_bounds_rejects_unsatisfiable_cardinality(lower: int, upper: int) -> None:
    with pytest.raises(ElementConflictError):
        check_bounds(lower, upper)


@pytest.mark.parametrize(("lower", "upper"), [(0, 1), (1, 1), (0, UNBOUNDED), (5, UNBOUNDED)])
def test_check_bounds_accepts_valid_cardinality(lower: int, upper: int) -> None:
    check_bounds(lower, upper)


def test_remove_class_refuses_while_referenced_by_other_classes() -> None:
    package = make_people_package()

    with pytest.raises(ElementConflictError, match="Class Person is referenced by: Company"):
        package.remove_class("Person")

    assert package.find_class("Person") is not None


def test_remove_class_detaches_it_from_subclasses() -> None:
    package = make_people_package()
    package.create_class("Tagged")
    package.create_class("Note", super_types=["Tagged"])

    package.remove_class("Tagged")

    assert package.get_class("Note").super_types == ()


def test_remove_class_ignores_self_references() -> None:
    package = MetaPackage(name="tree")
    node = package.create_class("Node")
    node.add_reference("children", target=node, containment=True, upper_bound=UNBOUNDED)

    package.remove_class("Node")

    assert package.classes == ()


def test_set_super_types_rejects_inheritance_cycles() -> None:
    package = make_people_package()
    named = package.get_class("Named")
    person = package.get_class("Person")

    with pytest.raises(ElementConflictError, match="inheritance cycle"):
        named.set_super_types([person])

    assert named.super_types == ()


def test_update_attribute_validates_before_mutating() -> None:
    person = make_people_package().get_class("Person")

    with pytest.raises(ElementConflictError):
        person.update_attribute("age", new_name="years", lower_bound=3, upper_bound=2)

    age = person.get_attribute("age")
    assert (age.name, age.lower_bound, age.upper_bound) == ("age", 0, 1)


def test_update_reference_retargets_and_renames() -> None:
    package = make_people_package()
    person = package.get_class("Person")

    person.update_reference("employer", new_name="workplace", target=package.get_class("Address"))

    reference = person.get_reference("workplace")
    assert reference.target.name == "Address"
    assert person.find_reference("employer") is None


def test_rename_class_keeps_references_pointing_at_it() -> None:
    package = make_people_package()

    package.rename_class("Company", "Organisation")

    employer = package.get_class("Person").get_reference("employer")
    assert employer.info().type == "Organisation"
