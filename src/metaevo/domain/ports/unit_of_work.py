"""Unit-of-work abstraction for transactional metamodel stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from metaevo.domain.ports.store import MetamodelStore


@runtime_checkable
class MetamodelUnitOfWork(Protocol):
    """Transaction boundary around one metamodel store.

    Evolution sessions hold a unit of work for the duration of ``apply_pending``;
    this is the serialization point when several sessions target one schema.
    """

    @property
    def store(self) -> MetamodelStore: ...

    def __enter__(self) -> MetamodelUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
