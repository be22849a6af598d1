"""Errors raised while reading or mutating a metamodel.

These are the only failures the batch applier captures per operation; anything
else is treated as unexpected and propagates to the caller.
"""

from __future__ import annotations


class MetamodelError(Exception):
    """Base class for metamodel lookup and mutation failures."""


class ElementNotFoundError(MetamodelError, LookupError):
    """Raised when a named class or feature does not exist."""


class ElementConflictError(MetamodelError):
    """Raised when a mutation would violate a metamodel constraint."""


class InvalidIntentError(MetamodelError, ValueError):
    """Raised when an intent lacks a value it needs to be applied."""
