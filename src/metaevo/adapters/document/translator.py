"""Translate between JSON document models and domain objects."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from metaevo.domain.evolution import ChangeDescriptor
from metaevo.domain.model import MetaPackage

from .schema import (
    AttributeDocument,
    ClassDocument,
    MetamodelDocument,
    OperationSummaryDocument,
    ReferenceDocument,
    ReportDocument,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from metaevo.domain.evolution import EvolutionReport

    from .schema import ChangeDocument

_CAMEL_BOUNDARY: Final = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case_keys(details: Mapping[str, object]) -> dict[str, object]:
    """``className`` -> ``class_name``; snake_case keys pass through."""

    return {_CAMEL_BOUNDARY.sub("_", key).lower(): value for key, value in details.items()}


def package_from_document(document: MetamodelDocument) -> MetaPackage:
    package = MetaPackage(
        name=document.name,
        ns_uri=document.ns_uri,
        ns_prefix=document.ns_prefix,
    )
    # classes first so super types and reference targets may point forward
    for class_doc in document.classes:
        package.create_class(
            class_doc.name,
            abstract=class_doc.abstract,
            interface=class_doc.interface,
        )
    for class_doc in document.classes:
        if class_doc.super_types:
            package.get_class(class_doc.name).set_super_types(
                package.get_class(name) for name in class_doc.super_types
            )
    for class_doc in document.classes:
        meta_class = package.get_class(class_doc.name)
        for attribute in class_doc.attributes:
            meta_class.add_attribute(
                attribute.name,
                type_name=attribute.type,
                lower_bound=attribute.lower_bound,
                upper_bound=attribute.upper_bound,
            )
        for reference in class_doc.references:
            meta_class.add_reference(
                reference.name,
                target=package.get_class(reference.type),
                containment=reference.containment,
                lower_bound=reference.lower_bound,
                upper_bound=reference.upper_bound,
            )
    return package


def document_from_package(package: MetaPackage) -> MetamodelDocument:
    return MetamodelDocument(
        name=package.name,
        ns_uri=package.ns_uri,
        ns_prefix=package.ns_prefix,
        classes=[
            ClassDocument(
                name=meta_class.name,
                abstract=meta_class.abstract,
                interface=meta_class.interface,
                super_types=[super_type.name for super_type in meta_class.super_types],
                attributes=[
                    AttributeDocument(
                        name=attribute.name,
                        type=attribute.type_name,
                        lower_bound=attribute.lower_bound,
                        upper_bound=attribute.upper_bound,
                    )
                    for attribute in meta_class.attributes
                ],
                references=[
                    ReferenceDocument(
                        name=reference.name,
                        type=reference.target.name,
                        containment=reference.containment,
                        lower_bound=reference.lower_bound,
                        upper_bound=reference.upper_bound,
                    )
                    for reference in meta_class.references
                ],
            )
            for meta_class in package.classes
        ],
    )


def descriptor_from_document(change: ChangeDocument) -> ChangeDescriptor:
    return ChangeDescriptor(
        change_type=change.change_type,
        element_kind=change.element_kind,
        details=snake_case_keys(change.details),
    )


def report_document(report: EvolutionReport) -> ReportDocument:
    return ReportDocument(
        total_operations=report.total_operations,
        pending_count=report.pending_count,
        ambiguous_count=report.ambiguous_count,
        applied_count=report.applied_count,
        failed_count=report.failed_count,
        operations=[
            OperationSummaryDocument(
                operation_id=summary.operation_id,
                change_type=summary.change_type,
                element_kind=summary.element_kind,
                details=summary.details,
                state=str(summary.state),
                ambiguity_reason=summary.ambiguity_reason,
                failure_detail=summary.failure_detail,
            )
            for summary in report.operations
        ],
    )
