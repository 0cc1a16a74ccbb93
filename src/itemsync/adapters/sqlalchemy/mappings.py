"""SQLAlchemy table metadata for canonical records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from itemsync.domain.model import CanonicalRecord, Variant

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

canonical_record_table = Table(
    "canonical_record",
    metadata,
    Column("id", String, primary_key=True),
    Column("position", Integer, nullable=False),
    Column("display_name", String, nullable=False, default=""),
    Column(
        "variant",
        Enum(Variant, name="variant", values_callable=lambda enum: [item.value for item in enum]),
        nullable=False,
    ),
    Column("received_date", UTCDateTime(), nullable=False),
    Column("status", String, nullable=False, default=""),
    Column("price", Float, nullable=False, default=0.0),
    Column("external_identifier", String(36), nullable=True),
    Column("assignment", String, nullable=True),
    Column("number", Integer, nullable=True),
    Column("contact_handle", String, nullable=True),
    Column("extra", JSON, nullable=False, default=dict),
    Index("ix_canonical_record_external_identifier", "external_identifier"),
)


def record_to_row(record: CanonicalRecord, position: int) -> dict[str, Any]:
    return {
        "id": record.id,
        "position": position,
        "display_name": record.display_name,
        "variant": record.variant,
        "received_date": record.received_date,
        "status": record.status,
        "price": record.price,
        "external_identifier": record.external_identifier,
        "assignment": record.assignment,
        "number": record.number,
        "contact_handle": record.contact_handle,
        "extra": dict(record.extra),
    }


def row_to_record(row: Mapping[str, Any]) -> CanonicalRecord:
    return CanonicalRecord(
        id=row["id"],
        display_name=row["display_name"],
        variant=Variant(row["variant"]),
        received_date=row["received_date"],
        status=row["status"],
        price=row["price"],
        external_identifier=row["external_identifier"],
        assignment=row["assignment"],
        number=row["number"],
        contact_handle=row["contact_handle"],
        extra=dict(row["extra"] or {}),
    )


def create_all_tables(engine: Engine) -> None:
    log.info("Creating all tables")
    metadata.create_all(engine)
