"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ChangeType(StrEnum):
    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"


class ElementKind(StrEnum):
    CLASS = "class"
    ATTRIBUTE = "attribute"
    REFERENCE = "reference"


class LifecycleState(StrEnum):
    """Staged lifecycle of an evolution operation.

    ``PENDING`` and ``AMBIGUOUS`` are the two entry states; ``APPLIED`` and
    ``FAILED`` are terminal.
    """

    PENDING = "pending"
    AMBIGUOUS = "ambiguous"
    APPLIED = "applied"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (LifecycleState.APPLIED, LifecycleState.FAILED)


class DataType(StrEnum):
    """Built-in Ecore data types accepted as attribute types."""

    ESTRING = "EString"
    EINT = "EInt"
    EINTEGER_OBJECT = "EIntegerObject"
    ELONG = "ELong"
    ESHORT = "EShort"
    EBYTE = "EByte"
    ECHAR = "EChar"
    EFLOAT = "EFloat"
    EDOUBLE = "EDouble"
    EBOOLEAN = "EBoolean"
    EBOOLEAN_OBJECT = "EBooleanObject"
    EDATE = "EDate"
    EBIG_DECIMAL = "EBigDecimal"
    EBIG_INTEGER = "EBigInteger"
    EJAVA_OBJECT = "EJavaObject"
