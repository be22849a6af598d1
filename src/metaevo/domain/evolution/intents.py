"""Mutation intents: the nine concrete, kind-specific mutation descriptions.

An intent holds everything needed to perform one mutation against a metamodel
store, addressed by names. Intents are frozen; ambiguity resolution produces a
new intent through ``merged`` instead of mutating in place.

``parse`` reads a change descriptor's ``details`` mapping, applies defaults and
reports the first malformed value instead of raising, so a bad payload becomes
an ambiguity the domain expert can resolve by supplying the field.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any, ClassVar, Self

from metaevo.domain.model import (
    DEFAULT_ATTRIBUTE_TYPE,
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


class _DetailReader:
    """Typed accessors over a details mapping that record the first problem."""

    def __init__(self, details: Mapping[str, object]) -> None:
        self._details = details
        self.problem: str | None = None

    def _flag_problem(self, key: str, expected: str, value: object) -> None:
        if self.problem is None:
            self.problem = f"Invalid value for {key}: expected {expected}, got {value!r}"

    def text(self, key: str) -> str | None:
        value = self._details.get(key)
        if value is None or isinstance(value, str):
            return value
        self._flag_problem(key, "a string", value)
        return None

    def flag(self, key: str, default: bool | None) -> bool | None:  # noqa: FBT001
        value = self._details.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        self._flag_problem(key, "a boolean", value)
        return default

    def integer(self, key: str, default: int | None) -> int | None:
        value = self._details.get(key)
        if value is None:
            return default
        # bool is an int subclass; a flag is never a valid bound
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        self._flag_problem(key, "an integer", value)
        return default

    def names(self, key: str) -> tuple[str, ...] | None:
        value = self._details.get(key)
        if value is None:
            return None
        if isinstance(value, Sequence) and not isinstance(value, str):
            items = tuple(value)
            if all(isinstance(item, str) for item in items):
                return items
        self._flag_problem(key, "a list of class names", value)
        return None


def _read_field(reader: _DetailReader, key: str, annotation: str) -> object:
    if annotation.startswith("tuple"):
        return reader.names(key)
    if annotation.startswith("bool"):
        return reader.flag(key, None)
    if annotation.startswith("int"):
        return reader.integer(key, None)
    return reader.text(key)


class _Intent:
    __slots__ = ()

    ACTION: ClassVar[str]

    def merged(
        self, resolution: Mapping[str, object]
    ) -> tuple[Self, tuple[str, ...], str | None]:
        """Return a copy with resolution fields applied, the ignored keys and a problem.

        Caller-supplied fields override; fields absent from ``resolution`` keep
        their prior values. Keys that name no field are returned, not applied.
        Values are read with the same typed accessors ``parse`` uses; on the
        first malformed value the problem is returned and ``self`` is kept.
        """

        reader = _DetailReader(resolution)
        known = {item.name: item for item in fields(self)}  # type: ignore[arg-type]
        updates: dict[str, Any] = {}
        for key in resolution:
            field_ = known.get(key)
            if field_ is None:
                continue
            value = _read_field(reader, key, str(field_.type))
            # a null for a required field keeps the prior value
            if value is not None or "None" in str(field_.type):
                updates[key] = value
        ignored = tuple(sorted(k for k in resolution if k not in known))
        if reader.problem is not None:
            return self, ignored, reader.problem
        return replace(self, **updates), ignored, None  # type: ignore[type-var]

    def items(self) -> Iterator[tuple[str, object]]:
        for item in fields(self):  # type: ignore[arg-type]
            yield item.name, getattr(self, item.name)


# Add ------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class AddClassIntent(_Intent):
    ACTION: ClassVar[str] = "addClass"

    class_name: str | None
    super_types: tuple[str, ...] = ()
    abstract: bool = False
    interface: bool = False

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[AddClassIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(
            class_name=reader.text("name"),
            super_types=reader.names("super_types") or (),
            abstract=bool(reader.flag("abstract", False)),  # noqa: FBT003
            interface=bool(reader.flag("interface", False)),  # noqa: FBT003
        )
        return intent, reader.problem


@dataclass(frozen=True, slots=True, kw_only=True)
class AddAttributeIntent(_Intent):
    ACTION: ClassVar[str] = "addAttribute"

    class_name: str | None
    attribute_name: str | None
    attribute_type: str = DEFAULT_ATTRIBUTE_TYPE
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND

    @classmethod
    def parse(
        cls,
        details: Mapping[str, object],
        *,
        default_type: str = DEFAULT_ATTRIBUTE_TYPE,
    ) -> tuple[AddAttributeIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(
            class_name=reader.text("class_name"),
            attribute_name=reader.text("name"),
            attribute_type=reader.text("type") or default_type,
            lower_bound=_lower(reader.integer("lower_bound", DEFAULT_LOWER_BOUND)),
            upper_bound=_upper(reader.integer("upper_bound", DEFAULT_UPPER_BOUND)),
        )
        return intent, reader.problem


@dataclass(frozen=True, slots=True, kw_only=True)
class AddReferenceIntent(_Intent):
    ACTION: ClassVar[str] = "addReference"

    source_class_name: str | None
    target_class_name: str | None
    reference_name: str | None
    containment: bool = False
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[AddReferenceIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(
            source_class_name=reader.text("source_class_name"),
            target_class_name=reader.text("target_class_name"),
            reference_name=reader.text("name"),
            containment=bool(reader.flag("containment", False)),  # noqa: FBT003
            lower_bound=_lower(reader.integer("lower_bound", DEFAULT_LOWER_BOUND)),
            upper_bound=_upper(reader.integer("upper_bound", DEFAULT_UPPER_BOUND)),
        )
        return intent, reader.problem


# Remove ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoveClassIntent(_Intent):
    ACTION: ClassVar[str] = "removeClass"

    class_name: str | None

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[RemoveClassIntent, str | None]:
        reader = _DetailReader(details)
        return cls(class_name=reader.text("name")), reader.problem


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoveAttributeIntent(_Intent):
    ACTION: ClassVar[str] = "removeAttribute"

    class_name: str | None
    attribute_name: str | None

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[RemoveAttributeIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(class_name=reader.text("class_name"), attribute_name=reader.text("name"))
        return intent, reader.problem


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoveReferenceIntent(_Intent):
    ACTION: ClassVar[str] = "removeReference"

    class_name: str | None
    reference_name: str | None

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[RemoveReferenceIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(class_name=reader.text("class_name"), reference_name=reader.text("name"))
        return intent, reader.problem


# Modify ---------------------------------------------------------------------
# ``None`` on a ``new_*`` field means "leave unchanged".


@dataclass(frozen=True, slots=True, kw_only=True)
class ModifyClassIntent(_Intent):
    ACTION: ClassVar[str] = "modifyClass"

    class_name: str | None
    new_name: str | None = None
    new_super_types: tuple[str, ...] | None = None
    new_abstract: bool | None = None
    new_interface: bool | None = None

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[ModifyClassIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(
            class_name=reader.text("name"),
            new_name=reader.text("new_name"),
            new_super_types=reader.names("new_super_types"),
            new_abstract=reader.flag("new_abstract", None),
            new_interface=reader.flag("new_interface", None),
        )
        return intent, reader.problem


@dataclass(frozen=True, slots=True, kw_only=True)
class ModifyAttributeIntent(_Intent):
    ACTION: ClassVar[str] = "modifyAttribute"

    class_name: str | None
    attribute_name: str | None
    new_name: str | None = None
    new_type: str | None = None
    new_lower_bound: int | None = None
    new_upper_bound: int | None = None

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[ModifyAttributeIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(
            class_name=reader.text("class_name"),
            attribute_name=reader.text("name"),
            new_name=reader.text("new_name"),
            new_type=reader.text("new_type"),
            new_lower_bound=reader.integer("new_lower_bound", None),
            new_upper_bound=reader.integer("new_upper_bound", None),
        )
        return intent, reader.problem


@dataclass(frozen=True, slots=True, kw_only=True)
class ModifyReferenceIntent(_Intent):
    ACTION: ClassVar[str] = "modifyReference"

    class_name: str | None
    reference_name: str | None
    new_name: str | None = None
    new_target_class_name: str | None = None
    new_containment: bool | None = None
    new_lower_bound: int | None = None
    new_upper_bound: int | None = None

    @classmethod
    def parse(cls, details: Mapping[str, object]) -> tuple[ModifyReferenceIntent, str | None]:
        reader = _DetailReader(details)
        intent = cls(
            class_name=reader.text("class_name"),
            reference_name=reader.text("name"),
            new_name=reader.text("new_name"),
            new_target_class_name=reader.text("new_target_class_name"),
            new_containment=reader.flag("new_containment", None),
            new_lower_bound=reader.integer("new_lower_bound", None),
            new_upper_bound=reader.integer("new_upper_bound", None),
        )
        return intent, reader.problem


type MutationIntent = (
    AddClassIntent
    | AddAttributeIntent
    | AddReferenceIntent
    | RemoveClassIntent
    | RemoveAttributeIntent
    | RemoveReferenceIntent
    | ModifyClassIntent
    | ModifyAttributeIntent
    | ModifyReferenceIntent
)


def _upper(value: int | None) -> int:
    # -1 ("many") is kept verbatim
    return DEFAULT_UPPER_BOUND if value is None else value


def _lower(value: int | None) -> int:
    return DEFAULT_LOWER_BOUND if value is None else value
