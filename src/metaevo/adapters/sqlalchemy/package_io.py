"""Copy whole metamodels between a ``MetaPackage`` graph and the database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from metaevo.domain.model import ElementConflictError

if TYPE_CHECKING:
    from metaevo.adapters.sqlalchemy.store import SqlAlchemyMetamodelStore
    from metaevo.domain.model import MetaPackage

log = logging.getLogger(__name__)


def import_package(
    store: SqlAlchemyMetamodelStore,
    package: MetaPackage,
    *,
    replace: bool = False,
) -> None:
    """Write ``package`` into an empty store, or over the stored one with ``replace``.

    Classes go in first, then super type lists, then features, so forward
    references within the package resolve.
    """

    if store.get_all_classes():
        if not replace:
            raise ElementConflictError(
                "Database already holds a metamodel; pass replace=True to overwrite it"
            )
        log.info("Replacing stored metamodel with %s", package.name)
        store.clear()

    store.save_package_header(package)
    for meta_class in package.classes:
        store.create_class(
            meta_class.name,
            abstract=meta_class.abstract,
            interface=meta_class.interface,
        )
    for meta_class in package.classes:
        if meta_class.super_types:
            store.set_super_types(meta_class.name, [s.name for s in meta_class.super_types])
    for meta_class in package.classes:
        for attribute in meta_class.attributes:
            store.add_attribute(
                meta_class.name,
                attribute.name,
                attribute.type_name,
                attribute.lower_bound,
                attribute.upper_bound,
            )
        for reference in meta_class.references:
            store.add_reference(
                meta_class.name,
                reference.target.name,
                reference.name,
                reference.containment,
                reference.lower_bound,
                reference.upper_bound,
            )
    log.info("Imported %d class(es) from %s", len(package.classes), package.name)


def export_package(store: SqlAlchemyMetamodelStore) -> MetaPackage:
    """Rebuild the stored metamodel as a detached ``MetaPackage`` graph."""

    package = store.package_header()
    classes = store.get_all_classes()
    for info in classes:
        package.create_class(info.name, abstract=info.abstract, interface=info.interface)
    for info in classes:
        if info.super_types:
            package.get_class(info.name).set_super_types(
                package.get_class(name) for name in info.super_types
            )
    for info in classes:
        meta_class = package.get_class(info.name)
        for attribute in store.get_class_attributes(info):
            meta_class.add_attribute(
                attribute.name,
                type_name=attribute.type,
                lower_bound=attribute.lower_bound,
                upper_bound=attribute.upper_bound,
            )
        for reference in store.get_class_references(info):
            meta_class.add_reference(
                reference.name,
                target=package.get_class(reference.type),
                containment=reference.containment,
                lower_bound=reference.lower_bound,
                upper_bound=reference.upper_bound,
            )
    return package
