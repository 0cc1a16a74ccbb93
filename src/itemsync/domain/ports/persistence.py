"""Ports for persisting canonical work item records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemsync.domain.model import CanonicalRecord


@runtime_checkable
class CanonicalRecordRepository(Protocol):
    """Store holding the full canonical record set.

    ``read_all`` returns records in stored order; ``replace_all`` swaps the
    whole set in one go.
    """

    def read_all(self) -> list[CanonicalRecord]: ...

    def replace_all(self, records: Sequence[CanonicalRecord]) -> None: ...


__all__ = ["CanonicalRecordRepository"]
