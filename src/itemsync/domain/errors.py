"""Error taxonomy for feed ingestion and reconciliation runs."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for errors raised by the reconciliation core."""


class FeedError(ReconciliationError):
    """A single feed could not be processed; other feeds are unaffected."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class FeedParseError(FeedError):
    """The feed is missing, empty, or has no data rows."""


class FeedRangeError(FeedError):
    """The identifier column lies beyond the width the feed declares in its header."""

    def __init__(
        self,
        message: str,
        *,
        column_index: int,
        width: int,
        source: str | None = None,
    ) -> None:
        super().__init__(message, source=source)
        self.column_index = column_index
        self.width = width


class NothingToReconcileError(ReconciliationError):
    """No feed could be read, or no feed yielded a single identifier."""
