"""In-memory metamodel graph (Ecore-like). Ownership lives on the package.

Ownership:
- MetaPackage owns its MetaClasses
- MetaClass owns its features (attributes and references) and its super type list
- MetaReference points at a target MetaClass by object; stores translate to names
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from metaevo.domain.model.errors import ElementConflictError, ElementNotFoundError
from metaevo.domain.model.primitives import (
    DEFAULT_ATTRIBUTE_TYPE,
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
    UNBOUNDED,
    is_known_data_type,
)
from metaevo.domain.model.views import AttributeInfo, ReferenceInfo

if TYPE_CHECKING:
    from collections.abc import Iterable


def check_bounds(lower_bound: int, upper_bound: int) -> None:
    """Raise ``ElementConflictError`` for a cardinality that cannot hold values."""

    if lower_bound < 0:
        raise ElementConflictError(f"Lower bound must be non-negative, got {lower_bound}")
    if upper_bound == UNBOUNDED:
        return
    if upper_bound < max(lower_bound, 1):
        raise ElementConflictError(
            f"Upper bound {upper_bound} is incompatible with lower bound {lower_bound}"
        )


def check_data_type(type_name: str) -> None:
    if not is_known_data_type(type_name):
        raise ElementConflictError(f"DataType {type_name} not found")


@dataclass(eq=False, kw_only=True)
class MetaAttribute:
    name: str
    type_name: str = DEFAULT_ATTRIBUTE_TYPE
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND

    def info(self) -> AttributeInfo:
        return AttributeInfo(
            name=self.name,
            type=self.type_name,
            lower_bound=self.lower_bound,
            upper_bound=self.upper_bound,
        )


@dataclass(eq=False, kw_only=True)
class MetaReference:
    name: str
    target: MetaClass
    containment: bool = False
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND

    def info(self) -> ReferenceInfo:
        return ReferenceInfo(
            name=self.name,
            type=self.target.name,
            containment=self.containment,
            lower_bound=self.lower_bound,
            upper_bound=self.upper_bound,
        )


type MetaFeature = MetaAttribute | MetaReference


@dataclass(eq=False, kw_only=True)
class MetaClass:
    name: str
    abstract: bool = False
    interface: bool = False

    _super_types: list[MetaClass] = field(default_factory=list["MetaClass"], repr=False)
    _features: list[MetaFeature] = field(default_factory=list["MetaFeature"], repr=False)

    @property
    def super_types(self) -> tuple[MetaClass, ...]:
        return tuple(self._super_types)

    @property
    def all_super_types(self) -> tuple[MetaClass, ...]:
        """Transitive super types, nearest first, without duplicates."""

        seen: list[MetaClass] = []
        stack = list(self._super_types)
        while stack:
            current = stack.pop(0)
            if current in seen:
                continue
            seen.append(current)
            stack.extend(current.super_types)
        return tuple(seen)

    @property
    def features(self) -> tuple[MetaFeature, ...]:
        return tuple(self._features)

    @property
    def attributes(self) -> tuple[MetaAttribute, ...]:
        return tuple(f for f in self._features if isinstance(f, MetaAttribute))

    @property
    def references(self) -> tuple[MetaReference, ...]:
        return tuple(f for f in self._features if isinstance(f, MetaReference))

    def find_attribute(self, name: str) -> MetaAttribute | None:
        return next((a for a in self.attributes if a.name == name), None)

    def find_reference(self, name: str) -> MetaReference | None:
        return next((r for r in self.references if r.name == name), None)

    def get_attribute(self, name: str) -> MetaAttribute:
        attribute = self.find_attribute(name)
        if attribute is None:
            raise ElementNotFoundError(f"Attribute {name} not found in class {self.name}")
        return attribute

    def get_reference(self, name: str) -> MetaReference:
        reference = self.find_reference(name)
        if reference is None:
            raise ElementNotFoundError(f"Reference {name} not found in class {self.name}")
        return reference

    # Commands

    def add_attribute(
        self,
        name: str,
        *,
        type_name: str = DEFAULT_ATTRIBUTE_TYPE,
        lower_bound: int = DEFAULT_LOWER_BOUND,
        upper_bound: int = DEFAULT_UPPER_BOUND,
    ) -> MetaAttribute:
        if self.find_attribute(name) is not None:
            raise ElementConflictError(f"Attribute {name} already exists in class {self.name}")
        check_data_type(type_name)
        check_bounds(lower_bound, upper_bound)
        attribute = MetaAttribute(
            name=name,
            type_name=type_name,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )
        self._features.append(attribute)
        return attribute

    def add_reference(
        self,
        name: str,
        *,
        target: MetaClass,
        containment: bool = False,
        lower_bound: int = DEFAULT_LOWER_BOUND,
        upper_bound: int = DEFAULT_UPPER_BOUND,
    ) -> MetaReference:
        if self.find_reference(name) is not None:
            raise ElementConflictError(f"Reference {name} already exists in class {self.name}")
        check_bounds(lower_bound, upper_bound)
        reference = MetaReference(
            name=name,
            target=target,
            containment=containment,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )
        self._features.append(reference)
        return reference

    def remove_attribute(self, name: str) -> None:
        self._features.remove(self.get_attribute(name))

    def remove_reference(self, name: str) -> None:
        self._features.remove(self.get_reference(name))

    def update_attribute(
        self,
        name: str,
        *,
        new_name: str | None = None,
        type_name: str | None = None,
        lower_bound: int | None = None,
        upper_bound: int | None = None,
    ) -> MetaAttribute:
        attribute = self.get_attribute(name)
        if new_name and new_name != name and self.find_attribute(new_name) is not None:
            raise ElementConflictError(f"Attribute {new_name} already exists in class {self.name}")
        if type_name:
            check_data_type(type_name)
        lower = attribute.lower_bound if lower_bound is None else lower_bound
        upper = attribute.upper_bound if upper_bound is None else upper_bound
        check_bounds(lower, upper)

        if new_name:
            attribute.name = new_name
        if type_name:
            attribute.type_name = type_name
        attribute.lower_bound = lower
        attribute.upper_bound = upper
        return attribute

    def update_reference(
        self,
        name: str,
        *,
        new_name: str | None = None,
        target: MetaClass | None = None,
        containment: bool | None = None,
        lower_bound: int | None = None,
        upper_bound: int | None = None,
    ) -> MetaReference:
        reference = self.get_reference(name)
        if new_name and new_name != name and self.find_reference(new_name) is not None:
            raise ElementConflictError(f"Reference {new_name} already exists in class {self.name}")
        lower = reference.lower_bound if lower_bound is None else lower_bound
        upper = reference.upper_bound if upper_bound is None else upper_bound
        check_bounds(lower, upper)

        if new_name:
            reference.name = new_name
        if target is not None:
            reference.target = target
        if containment is not None:
            reference.containment = containment
        reference.lower_bound = lower
        reference.upper_bound = upper
        return reference

    def set_super_types(self, super_types: Iterable[MetaClass]) -> None:
        """Clear the super type list and rebuild it in the given order."""

        candidates = list(super_types)
        for candidate in candidates:
            if candidate is self or self in candidate.all_super_types:
                raise ElementConflictError(
                    f"Class {candidate.name} cannot be a super type of {self.name}: "
                    "inheritance cycle"
                )
        self._super_types.clear()
        for candidate in candidates:
            if candidate not in self._super_types:
                self._super_types.append(candidate)

    def _drop_super_type(self, super_type: MetaClass) -> None:
        if super_type in self._super_types:
            self._super_types.remove(super_type)


@dataclass(eq=False, kw_only=True)
class MetaPackage:
    """Root container of a metamodel; the unit loaded from and saved to a document."""

    name: str
    ns_uri: str | None = None
    ns_prefix: str | None = None

    _classes: list[MetaClass] = field(default_factory=list["MetaClass"], repr=False)

    @property
    def classes(self) -> tuple[MetaClass, ...]:
        return tuple(self._classes)

    def find_class(self, name: str) -> MetaClass | None:
        return next((c for c in self._classes if c.name == name), None)

    def get_class(self, name: str) -> MetaClass:
        found = self.find_class(name)
        if found is None:
            raise ElementNotFoundError(f"Class {name} not found")
        return found

    def create_class(
        self,
        name: str,
        *,
        super_types: Iterable[str] = (),
        abstract: bool = False,
        interface: bool = False,
    ) -> MetaClass:
        if self.find_class(name) is not None:
            raise ElementConflictError(f"Class {name} already exists")
        resolved: list[MetaClass] = []
        for super_type_name in super_types:
            super_type = self.find_class(super_type_name)
            if super_type is None:
                raise ElementNotFoundError(f"Super type {super_type_name} not found")
            resolved.append(super_type)

        meta_class = MetaClass(name=name, abstract=abstract, interface=interface)
        meta_class.set_super_types(resolved)
        self._classes.append(meta_class)
        return meta_class

    def referencing_classes(self, target: MetaClass) -> tuple[MetaClass, ...]:
        """Classes other than ``target`` holding at least one reference typed by it."""

        return tuple(
            candidate
            for candidate in self._classes
            if candidate is not target
            and any(reference.target is target for reference in candidate.references)
        )

    def remove_class(self, name: str) -> None:
        target = self.get_class(name)
        referencing = self.referencing_classes(target)
        if referencing:
            names = ", ".join(c.name for c in referencing)
            raise ElementConflictError(f"Class {name} is referenced by: {names}")
        for candidate in self._classes:
            candidate._drop_super_type(target)  # noqa: SLF001
        self._classes.remove(target)

    def rename_class(self, name: str, new_name: str) -> MetaClass:
        target = self.get_class(name)
        if new_name != name and self.find_class(new_name) is not None:
            raise ElementConflictError(f"Class {new_name} already exists")
        target.name = new_name
        return target
