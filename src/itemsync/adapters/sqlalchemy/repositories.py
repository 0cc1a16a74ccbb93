"""SQLAlchemy repository implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select

from .mappings import canonical_record_table, record_to_row, row_to_record

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session

    from itemsync.domain.model import CanonicalRecord
    from itemsync.domain.ports import CanonicalRecordRepository


class SqlAlchemyCanonicalRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def read_all(self) -> list[CanonicalRecord]:
        statement = select(canonical_record_table).order_by(canonical_record_table.c.position)
        return [row_to_record(row) for row in self.session.execute(statement).mappings()]

    def replace_all(self, records: Sequence[CanonicalRecord]) -> None:
        self.session.execute(delete(canonical_record_table))
        rows = [record_to_row(record, position) for position, record in enumerate(records)]
        if rows:
            self.session.execute(insert(canonical_record_table), rows)


if TYPE_CHECKING:
    _repository_check: CanonicalRecordRepository = SqlAlchemyCanonicalRecordRepository(Session())
