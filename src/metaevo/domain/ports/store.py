"""Port for the metamodel store consumed by the evolution pipeline.

The store owns the schema graph. The pipeline only ever addresses elements by
name: handles returned by ``find_class_by_name`` are used for feature queries
within one call and are never captured in intents.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from metaevo.domain.model import AttributeInfo, ReferenceInfo


@runtime_checkable
class SchemaClass(Protocol):
    """Minimal view of a class handle returned by a store."""

    @property
    def name(self) -> str: ...


@runtime_checkable
class MetamodelStore(Protocol):
    """Query and mutation primitives over one metamodel.

    Mutations raise ``ElementNotFoundError`` when a named element is missing and
    ``ElementConflictError`` when they would violate a metamodel constraint. A
    primitive that raises leaves the metamodel unchanged.
    """

    def find_class_by_name(self, name: str) -> SchemaClass | None: ...

    def get_all_classes(self) -> Sequence[SchemaClass]: ...

    def get_class_attributes(self, meta_class: SchemaClass) -> Sequence[AttributeInfo]: ...

    def get_class_references(self, meta_class: SchemaClass) -> Sequence[ReferenceInfo]: ...

    def create_class(
        self,
        name: str,
        super_types: Sequence[str] = (),
        abstract: bool = False,  # noqa: FBT001, FBT002
        interface: bool = False,  # noqa: FBT001, FBT002
    ) -> SchemaClass: ...

    def add_attribute(
        self,
        class_name: str,
        attribute_name: str,
        type_name: str,
        lower_bound: int,
        upper_bound: int,
    ) -> AttributeInfo: ...

    def add_reference(
        self,
        source_class_name: str,
        target_class_name: str,
        reference_name: str,
        containment: bool,  # noqa: FBT001
        lower_bound: int,
        upper_bound: int,
    ) -> ReferenceInfo: ...

    def remove_class(self, name: str) -> None: ...

    def remove_attribute(self, class_name: str, attribute_name: str) -> None: ...

    def remove_reference(self, class_name: str, reference_name: str) -> None: ...

    def update_class(
        self,
        name: str,
        *,
        new_name: str | None = None,
        abstract: bool | None = None,
        interface: bool | None = None,
    ) -> SchemaClass: ...

    def set_super_types(self, class_name: str, super_type_names: Sequence[str]) -> None: ...

    def update_attribute(
        self,
        class_name: str,
        attribute_name: str,
        *,
        new_name: str | None = None,
        type_name: str | None = None,
        lower_bound: int | None = None,
        upper_bound: int | None = None,
    ) -> AttributeInfo: ...

    def update_reference(
        self,
        class_name: str,
        reference_name: str,
        *,
        new_name: str | None = None,
        target_class_name: str | None = None,
        containment: bool | None = None,
        lower_bound: int | None = None,
        upper_bound: int | None = None,
    ) -> ReferenceInfo: ...
