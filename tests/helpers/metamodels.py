"""Builders for small metamodels and change descriptors used across tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from metaevo.domain.evolution import ChangeDescriptor
from metaevo.domain.model import UNBOUNDED, MetaPackage

if TYPE_CHECKING:
    from pathlib import Path


def make_people_package() -> MetaPackage:
    """A small schema with inheritance, a self-reference and a containment.

    - Named (abstract): name
    - Person(Named): age, friends -> Person [0..*], employer -> Company
    - Company(Named): employees -> Person [0..*, containment]
    - Address: street
    """

    package = MetaPackage(name="people", ns_uri="http://example.org/people", ns_prefix="people")
    named = package.create_class("Named", abstract=True)
    named.add_attribute("name", type_name="EString", lower_bound=1, upper_bound=1)

    person = package.create_class("Person", super_types=["Named"])
    person.add_attribute("age", type_name="EInt")
    company = package.create_class("Company", super_types=["Named"])
    address = package.create_class("Address")
    address.add_attribute("street")

    person.add_reference("friends", target=person, upper_bound=UNBOUNDED)
    person.add_reference("employer", target=company)
    company.add_reference("employees", target=person, containment=True, upper_bound=UNBOUNDED)
    return package


def change(change_type: str, element_kind: str, **details: object) -> ChangeDescriptor:
    return ChangeDescriptor(change_type=change_type, element_kind=element_kind, details=details)


def write_changes(path: Path, changes: list[dict[str, object]]) -> Path:
    path.write_text(json.dumps({"changes": changes}), encoding="utf-8")
    return path


def write_resolutions(path: Path, resolutions: list[dict[str, object]]) -> Path:
    path.write_text(json.dumps(resolutions), encoding="utf-8")
    return path
