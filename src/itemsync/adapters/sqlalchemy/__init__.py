"""SQLite-backed canonical record store."""

from __future__ import annotations

from .mappings import canonical_record_table, create_all_tables, metadata
from .repositories import SqlAlchemyCanonicalRecordRepository
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, is_started, shutdown, startup

__all__ = [
    "SqlAlchemyCanonicalRecordRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "canonical_record_table",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
