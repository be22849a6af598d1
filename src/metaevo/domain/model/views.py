"""Read-only feature snapshots handed out by metamodel stores."""

from __future__ import annotations

from dataclasses import dataclass

from metaevo.domain.model.primitives import DEFAULT_LOWER_BOUND, DEFAULT_UPPER_BOUND


@dataclass(frozen=True, slots=True, kw_only=True)
class AttributeInfo:
    name: str
    type: str
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND


@dataclass(frozen=True, slots=True, kw_only=True)
class ReferenceInfo:
    """``type`` is the name of the reference's target class."""

    name: str
    type: str
    containment: bool = False
    lower_bound: int = DEFAULT_LOWER_BOUND
    upper_bound: int = DEFAULT_UPPER_BOUND


@dataclass(frozen=True, slots=True, kw_only=True)
class ClassInfo:
    """Detached class snapshot, used by stores that do not hand out live objects."""

    name: str
    abstract: bool = False
    interface: bool = False
    super_types: tuple[str, ...] = ()
