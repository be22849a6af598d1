"""Change descriptors: the model-level edits submitted by a domain expert."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from metaevo.domain.model import ChangeType, ElementKind


@dataclass(frozen=True, slots=True, kw_only=True)
class ChangeDescriptor:
    """One requested edit, consumed once by the interpreter.

    ``change_type`` and ``element_kind`` are kept as plain strings so that an
    unrecognized pair reaches the interpreter and is recorded as an ambiguity
    instead of failing at construction time.
    """

    change_type: ChangeType | str
    element_kind: ElementKind | str
    details: Mapping[str, object] = field(default_factory=dict["str", "object"])
