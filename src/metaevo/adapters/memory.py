"""In-memory metamodel store over a ``MetaPackage`` graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from metaevo.domain.model import MetaClass, MetaPackage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from metaevo.domain.model import AttributeInfo, ReferenceInfo
    from metaevo.domain.ports import SchemaClass


class InMemoryMetamodelStore:
    """Metamodel store holding live ``MetaClass`` objects.

    Class handles are the graph's own objects; feature queries return detached
    snapshots so callers cannot mutate the graph behind the store's back.
    """

    def __init__(self, package: MetaPackage | None = None) -> None:
        self.package = package if package is not None else MetaPackage(name="metamodel")

    def _resolve(self, meta_class: SchemaClass) -> MetaClass:
        if isinstance(meta_class, MetaClass):
            return meta_class
        return self.package.get_class(meta_class.name)

    # Queries

    def find_class_by_name(self, name: str) -> MetaClass | None:
        return self.package.find_class(name)

    def get_all_classes(self) -> Sequence[MetaClass]:
        return self.package.classes

    def get_class_attributes(self, meta_class: SchemaClass) -> Sequence[AttributeInfo]:
        return [attribute.info() for attribute in self._resolve(meta_class).attributes]

    def get_class_references(self, meta_class: SchemaClass) -> Sequence[ReferenceInfo]:
        return [reference.info() for reference in self._resolve(meta_class).references]

    # Mutations

    def create_class(
        self,
        name: str,
        super_types: Sequence[str] = (),
        abstract: bool = False,  # noqa: FBT001, FBT002
        interface: bool = False,  # noqa: FBT001, FBT002
    ) -> MetaClass:
        return self.package.create_class(
            name,
            super_types=super_types,
            abstract=abstract,
            interface=interface,
        )

    def add_attribute(
        self,
        class_name: str,
        attribute_name: str,
        type_name: str,
        lower_bound: int,
        upper_bound: int,
    ) -> AttributeInfo:
        attribute = self.package.get_class(class_name).add_attribute(
            attribute_name,
            type_name=type_name,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )
        return attribute.info()

    def add_reference(
        self,
        source_class_name: str,
        target_class_name: str,
        reference_name: str,
        containment: bool,  # noqa: FBT001
        lower_bound: int,
        upper_bound: int,
    ) -> ReferenceInfo:
        source = self.package.get_class(source_class_name)
        target = self.package.get_class(target_class_name)
        reference = source.add_reference(
            reference_name,
            target=target,
            containment=containment,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )
        return reference.info()

    def remove_class(self, name: str) -> None:
        self.package.remove_class(name)

    def remove_attribute(self, class_name: str, attribute_name: str) -> None:
        self.package.get_class(class_name).remove_attribute(attribute_name)

    def remove_reference(self, class_name: str, reference_name: str) -> None:
        self.package.get_class(class_name).remove_reference(reference_name)

    def update_class(
        self,
        name: str,
        *,
        new_name: str | None = None,
        abstract: bool | None = None,
        interface: bool | None = None,
    ) -> MetaClass:
        meta_class = self.package.get_class(name)
        if new_name:
            self.package.rename_class(name, new_name)
        if abstract is not None:
            meta_class.abstract = abstract
        if interface is not None:
            meta_class.interface = interface
        return meta_class

    def set_super_types(self, class_name: str, super_type_names: Sequence[str]) -> None:
        meta_class = self.package.get_class(class_name)
        meta_class.set_super_types(self.package.get_class(name) for name in super_type_names)

    def update_attribute(
        self,
        class_name: str,
        attribute_name: str,
        *,
        new_name: str | None = None,
        type_name: str | None = None,
        lower_bound: int | None = None,
        upper_bound: int | None = None,
    ) -> AttributeInfo:
        attribute = self.package.get_class(class_name).update_attribute(
            attribute_name,
            new_name=new_name,
            type_name=type_name,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )
        return attribute.info()

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
    ) -> ReferenceInfo:
        meta_class = self.package.get_class(class_name)
        target = self.package.get_class(target_class_name) if target_class_name else None
        reference = meta_class.update_reference(
            reference_name,
            new_name=new_name,
            target=target,
            containment=containment,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )
        return reference.info()
