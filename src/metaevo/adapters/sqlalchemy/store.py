"""Metamodel store backed by a SQLAlchemy session.

Class handles are detached ``ClassInfo`` snapshots; every call re-reads rows by
name. Each mutation checks what it needs before its first write, so a raised
``MetamodelError`` leaves the session's pending state untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from metaevo.adapters.sqlalchemy.mappings import (
    meta_attribute_table,
    meta_class_table,
    meta_package_table,
    meta_reference_table,
    meta_super_type_table,
)
from metaevo.domain.model import (
    AttributeInfo,
    ClassInfo,
    ElementConflictError,
    ElementNotFoundError,
    MetaPackage,
    ReferenceInfo,
    check_bounds,
    check_data_type,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from metaevo.domain.ports import SchemaClass

_PACKAGE_ROW_ID = 1
DEFAULT_PACKAGE_NAME = "metamodel"


class SqlAlchemyMetamodelStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    # Rows

    def _class_row(self, name: str) -> Row[Any] | None:
        stmt = select(meta_class_table).where(meta_class_table.c.name == name)
        return self.session.execute(stmt).one_or_none()

    def _require_class(self, name: str) -> Row[Any]:
        row = self._class_row(name)
        if row is None:
            raise ElementNotFoundError(f"Class {name} not found")
        return row

    def _attribute_row(self, class_row: Row[Any], name: str) -> Row[Any]:
        stmt = (
            select(meta_attribute_table)
            .where(meta_attribute_table.c.class_id == class_row.id)
            .where(meta_attribute_table.c.name == name)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            raise ElementNotFoundError(f"Attribute {name} not found in class {class_row.name}")
        return row

    def _reference_row(self, class_row: Row[Any], name: str) -> Row[Any]:
        stmt = (
            select(meta_reference_table)
            .where(meta_reference_table.c.class_id == class_row.id)
            .where(meta_reference_table.c.name == name)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            raise ElementNotFoundError(f"Reference {name} not found in class {class_row.name}")
        return row

    def _has_attribute(self, class_id: int, name: str) -> bool:
        stmt = (
            select(meta_attribute_table.c.id)
            .where(meta_attribute_table.c.class_id == class_id)
            .where(meta_attribute_table.c.name == name)
        )
        return self.session.execute(stmt).first() is not None

    def _has_reference(self, class_id: int, name: str) -> bool:
        stmt = (
            select(meta_reference_table.c.id)
            .where(meta_reference_table.c.class_id == class_id)
            .where(meta_reference_table.c.name == name)
        )
        return self.session.execute(stmt).first() is not None

    def _super_type_names(self, class_id: int) -> tuple[str, ...]:
        stmt = (
            select(meta_class_table.c.name)
            .select_from(
                meta_super_type_table.join(
                    meta_class_table,
                    meta_super_type_table.c.super_type_id == meta_class_table.c.id,
                )
            )
            .where(meta_super_type_table.c.class_id == class_id)
            .order_by(meta_super_type_table.c.position)
        )
        return tuple(self.session.scalars(stmt))

    def _ancestor_ids(self, class_id: int) -> set[int]:
        seen: set[int] = set()
        frontier = [class_id]
        while frontier:
            stmt = select(meta_super_type_table.c.super_type_id).where(
                meta_super_type_table.c.class_id.in_(frontier)
            )
            frontier = [sid for sid in self.session.scalars(stmt) if sid not in seen]
            seen.update(frontier)
        return seen

    def _resolve_super_types(self, names: Sequence[str]) -> list[Row[Any]]:
        rows: list[Row[Any]] = []
        for name in names:
            row = self._class_row(name)
            if row is None:
                raise ElementNotFoundError(f"Super type {name} not found")
            if all(existing.id != row.id for existing in rows):
                rows.append(row)
        return rows

    def _write_super_types(self, class_id: int, super_rows: Sequence[Row[Any]]) -> None:
        self.session.execute(
            delete(meta_super_type_table).where(meta_super_type_table.c.class_id == class_id)
        )
        for position, super_row in enumerate(super_rows):
            self.session.execute(
                insert(meta_super_type_table).values(
                    class_id=class_id,
                    super_type_id=super_row.id,
                    position=position,
                )
            )

    def _info(self, row: Row[Any]) -> ClassInfo:
        return ClassInfo(
            name=row.name,
            abstract=row.abstract,
            interface=row.interface,
            super_types=self._super_type_names(row.id),
        )

    # Queries

    def find_class_by_name(self, name: str) -> ClassInfo | None:
        row = self._class_row(name)
        return None if row is None else self._info(row)

    def get_all_classes(self) -> Sequence[ClassInfo]:
        stmt = select(meta_class_table).order_by(meta_class_table.c.id)
        return [self._info(row) for row in self.session.execute(stmt)]

    def get_class_attributes(self, meta_class: SchemaClass) -> Sequence[AttributeInfo]:
        class_row = self._require_class(meta_class.name)
        stmt = (
            select(meta_attribute_table)
            .where(meta_attribute_table.c.class_id == class_row.id)
            .order_by(meta_attribute_table.c.id)
        )
        return [
            AttributeInfo(
                name=row.name,
                type=row.type_name,
                lower_bound=row.lower_bound,
                upper_bound=row.upper_bound,
            )
            for row in self.session.execute(stmt)
        ]

    def get_class_references(self, meta_class: SchemaClass) -> Sequence[ReferenceInfo]:
        class_row = self._require_class(meta_class.name)
        target = meta_class_table.alias("target")
        stmt = (
            select(meta_reference_table, target.c.name.label("target_name"))
            .join(target, meta_reference_table.c.target_id == target.c.id)
            .where(meta_reference_table.c.class_id == class_row.id)
            .order_by(meta_reference_table.c.id)
        )
        return [
            ReferenceInfo(
                name=row.name,
                type=row.target_name,
                containment=row.containment,
                lower_bound=row.lower_bound,
                upper_bound=row.upper_bound,
            )
            for row in self.session.execute(stmt)
        ]

    # Mutations

    def create_class(
        self,
        name: str,
        super_types: Sequence[str] = (),
        abstract: bool = False,  # noqa: FBT001, FBT002
        interface: bool = False,  # noqa: FBT001, FBT002
    ) -> ClassInfo:
        if self._class_row(name) is not None:
            raise ElementConflictError(f"Class {name} already exists")
        super_rows = self._resolve_super_types(super_types)

        self.session.execute(
            insert(meta_class_table).values(name=name, abstract=abstract, interface=interface)
        )
        class_id = self._require_class(name).id
        self._write_super_types(class_id, super_rows)
        return ClassInfo(
            name=name,
            abstract=abstract,
            interface=interface,
            super_types=tuple(row.name for row in super_rows),
        )

    def add_attribute(
        self,
        class_name: str,
        attribute_name: str,
        type_name: str,
        lower_bound: int,
        upper_bound: int,
    ) -> AttributeInfo:
        class_row = self._require_class(class_name)
        if self._has_attribute(class_row.id, attribute_name):
            raise ElementConflictError(
                f"Attribute {attribute_name} already exists in class {class_name}"
            )
        check_data_type(type_name)
        check_bounds(lower_bound, upper_bound)

        self.session.execute(
            insert(meta_attribute_table).values(
                class_id=class_row.id,
                name=attribute_name,
                type_name=type_name,
                lower_bound=lower_bound,
                upper_bound=upper_bound,
            )
        )
        return AttributeInfo(
            name=attribute_name,
            type=type_name,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )

    def add_reference(
        self,
        source_class_name: str,
        target_class_name: str,
        reference_name: str,
        containment: bool,  # noqa: FBT001
        lower_bound: int,
        upper_bound: int,
    ) -> ReferenceInfo:
        source_row = self._require_class(source_class_name)
        target_row = self._require_class(target_class_name)
        if self._has_reference(source_row.id, reference_name):
            raise ElementConflictError(
                f"Reference {reference_name} already exists in class {source_class_name}"
            )
        check_bounds(lower_bound, upper_bound)

        self.session.execute(
            insert(meta_reference_table).values(
                class_id=source_row.id,
                target_id=target_row.id,
                name=reference_name,
                containment=containment,
                lower_bound=lower_bound,
                upper_bound=upper_bound,
            )
        )
        return ReferenceInfo(
            name=reference_name,
            type=target_class_name,
            containment=containment,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )

    def remove_class(self, name: str) -> None:
        class_row = self._require_class(name)
        stmt = (
            select(meta_class_table.c.name)
            .select_from(
                meta_reference_table.join(
                    meta_class_table,
                    meta_reference_table.c.class_id == meta_class_table.c.id,
                )
            )
            .where(meta_reference_table.c.target_id == class_row.id)
            .where(meta_reference_table.c.class_id != class_row.id)
            .order_by(meta_class_table.c.id)
        )
        referencing = list(dict.fromkeys(self.session.scalars(stmt)))
        if referencing:
            raise ElementConflictError(f"Class {name} is referenced by: {', '.join(referencing)}")

        # SQLite does not enforce ON DELETE CASCADE unless asked to; delete explicitly
        self.session.execute(
            delete(meta_super_type_table).where(
                (meta_super_type_table.c.class_id == class_row.id)
                | (meta_super_type_table.c.super_type_id == class_row.id)
            )
        )
        self.session.execute(
            delete(meta_attribute_table).where(meta_attribute_table.c.class_id == class_row.id)
        )
        self.session.execute(
            delete(meta_reference_table).where(meta_reference_table.c.class_id == class_row.id)
        )
        self.session.execute(delete(meta_class_table).where(meta_class_table.c.id == class_row.id))

    def remove_attribute(self, class_name: str, attribute_name: str) -> None:
        row = self._attribute_row(self._require_class(class_name), attribute_name)
        self.session.execute(
            delete(meta_attribute_table).where(meta_attribute_table.c.id == row.id)
        )

    def remove_reference(self, class_name: str, reference_name: str) -> None:
        row = self._reference_row(self._require_class(class_name), reference_name)
        self.session.execute(
            delete(meta_reference_table).where(meta_reference_table.c.id == row.id)
        )

    def update_class(
        self,
        name: str,
        *,
        new_name: str | None = None,
        abstract: bool | None = None,
        interface: bool | None = None,
    ) -> ClassInfo:
        class_row = self._require_class(name)
        if new_name and new_name != name and self._class_row(new_name) is not None:
            raise ElementConflictError(f"Class {new_name} already exists")

        values: dict[str, object] = {}
        if new_name:
            values["name"] = new_name
        if abstract is not None:
            values["abstract"] = abstract
        if interface is not None:
            values["interface"] = interface
        if values:
            self.session.execute(
                update(meta_class_table).where(meta_class_table.c.id == class_row.id).values(values)
            )
        return self._info(self._require_class(new_name or name))

    def set_super_types(self, class_name: str, super_type_names: Sequence[str]) -> None:
        class_row = self._require_class(class_name)
        super_rows = self._resolve_super_types(super_type_names)
        for super_row in super_rows:
            if super_row.id == class_row.id or class_row.id in self._ancestor_ids(super_row.id):
                raise ElementConflictError(
                    f"Class {super_row.name} cannot be a super type of {class_name}: "
                    "inheritance cycle"
                )
        self._write_super_types(class_row.id, super_rows)

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
        class_row = self._require_class(class_name)
        row = self._attribute_row(class_row, attribute_name)
        if (
            new_name
            and new_name != attribute_name
            and self._has_attribute(class_row.id, new_name)
        ):
            raise ElementConflictError(f"Attribute {new_name} already exists in class {class_name}")
        if type_name:
            check_data_type(type_name)
        lower = row.lower_bound if lower_bound is None else lower_bound
        upper = row.upper_bound if upper_bound is None else upper_bound
        check_bounds(lower, upper)

        info = AttributeInfo(
            name=new_name or row.name,
            type=type_name or row.type_name,
            lower_bound=lower,
            upper_bound=upper,
        )
        self.session.execute(
            update(meta_attribute_table)
            .where(meta_attribute_table.c.id == row.id)
            .values(
                name=info.name,
                type_name=info.type,
                lower_bound=info.lower_bound,
                upper_bound=info.upper_bound,
            )
        )
        return info

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
        class_row = self._require_class(class_name)
        row = self._reference_row(class_row, reference_name)
        if (
            new_name
            and new_name != reference_name
            and self._has_reference(class_row.id, new_name)
        ):
            raise ElementConflictError(f"Reference {new_name} already exists in class {class_name}")
        target_id = row.target_id
        if target_class_name:
            target_id = self._require_class(target_class_name).id
        lower = row.lower_bound if lower_bound is None else lower_bound
        upper = row.upper_bound if upper_bound is None else upper_bound
        check_bounds(lower, upper)

        self.session.execute(
            update(meta_reference_table)
            .where(meta_reference_table.c.id == row.id)
            .values(
                name=new_name or row.name,
                target_id=target_id,
                containment=row.containment if containment is None else containment,
                lower_bound=lower,
                upper_bound=upper,
            )
        )
        target_name = self.session.scalars(
            select(meta_class_table.c.name).where(meta_class_table.c.id == target_id)
        ).one()
        return ReferenceInfo(
            name=new_name or row.name,
            type=target_name,
            containment=row.containment if containment is None else containment,
            lower_bound=lower,
            upper_bound=upper,
        )

    # Package header and bulk helpers

    def package_header(self) -> MetaPackage:
        """Empty ``MetaPackage`` carrying the stored name and namespace."""

        row = self.session.execute(
            select(meta_package_table).where(meta_package_table.c.id == _PACKAGE_ROW_ID)
        ).one_or_none()
        if row is None:
            return MetaPackage(name=DEFAULT_PACKAGE_NAME)
        return MetaPackage(name=row.name, ns_uri=row.ns_uri, ns_prefix=row.ns_prefix)

    def save_package_header(self, package: MetaPackage) -> None:
        self.session.execute(
            delete(meta_package_table).where(meta_package_table.c.id == _PACKAGE_ROW_ID)
        )
        self.session.execute(
            insert(meta_package_table).values(
                id=_PACKAGE_ROW_ID,
                name=package.name,
                ns_uri=package.ns_uri,
                ns_prefix=package.ns_prefix,
            )
        )

    def clear(self) -> None:
        """Delete every stored class, feature and the package header."""

        for table in (
            meta_super_type_table,
            meta_attribute_table,
            meta_reference_table,
            meta_class_table,
            meta_package_table,
        ):
            self.session.execute(delete(table))


if TYPE_CHECKING:
    from metaevo.domain.ports import MetamodelStore

    def _store_check(session: Session) -> MetamodelStore:
        return SqlAlchemyMetamodelStore(session)
