"""Public domain model surface."""

from __future__ import annotations

from metaevo.domain.model.enums import ChangeType, DataType, ElementKind, LifecycleState
from metaevo.domain.model.errors import (
    ElementConflictError,
    ElementNotFoundError,
    InvalidIntentError,
    MetamodelError,
)
from metaevo.domain.model.metamodel import (
    MetaAttribute,
    MetaClass,
    MetaFeature,
    MetaPackage,
    MetaReference,
    check_bounds,
    check_data_type,
)
from metaevo.domain.model.primitives import (
    DEFAULT_ATTRIBUTE_TYPE,
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
    KNOWN_DATA_TYPES,
    UNBOUNDED,
    is_known_data_type,
)
from metaevo.domain.model.views import AttributeInfo, ClassInfo, ReferenceInfo

__all__ = [  # noqa: RUF022
    # metamodel graph
    "MetaAttribute",
    "MetaClass",
    "MetaFeature",
    "MetaPackage",
    "MetaReference",
    "check_bounds",
    "check_data_type",
    # views
    "AttributeInfo",
    "ClassInfo",
    "ReferenceInfo",
    # errors
    "ElementConflictError",
    "ElementNotFoundError",
    "InvalidIntentError",
    "MetamodelError",
    # enums
    "ChangeType",
    "DataType",
    "ElementKind",
    "LifecycleState",
    # primitives
    "DEFAULT_ATTRIBUTE_TYPE",
    "DEFAULT_LOWER_BOUND",
    "DEFAULT_UPPER_BOUND",
    "KNOWN_DATA_TYPES",
    "UNBOUNDED",
    "is_known_data_type",
]
