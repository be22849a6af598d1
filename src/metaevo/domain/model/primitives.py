"""Domain primitives: cardinality and data type constants."""

from __future__ import annotations

from typing import Final

from metaevo.domain.model.enums import DataType

UNBOUNDED: Final[int] = -1
"""Upper bound sentinel for "many"; never normalized to a finite number."""

DEFAULT_LOWER_BOUND: Final[int] = 0
DEFAULT_UPPER_BOUND: Final[int] = 1
DEFAULT_ATTRIBUTE_TYPE: Final[str] = DataType.ESTRING.value

KNOWN_DATA_TYPES: Final[frozenset[str]] = frozenset(item.value for item in DataType)


def is_known_data_type(type_name: str) -> bool:
    return type_name in KNOWN_DATA_TYPES
