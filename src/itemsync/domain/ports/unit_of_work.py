"""Transaction boundary around the canonical record store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from itemsync.domain.ports.persistence import CanonicalRecordRepository


@dataclass(slots=True, frozen=True)
class CanonicalRecordRepositories:
    """Repositories a reconciliation run reads and replaces together."""

    records: CanonicalRecordRepository


@runtime_checkable
class CanonicalRecordUnitOfWork(Protocol):
    """Scope of one read/replace cycle against the store.

    Nothing staged through ``repositories`` is persisted before :meth:`commit`.
    Leaving the context without committing discards staged changes.
    """

    @property
    def repositories(self) -> CanonicalRecordRepositories: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool | None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
