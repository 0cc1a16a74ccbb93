"""Translate ``requests.json`` entries to and from canonical records."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

from itemsync.domain.model import CanonicalRecord, Variant, is_valid_identifier

if TYPE_CHECKING:
    from .schema import RequestPayload, RequestType

log = getLogger(__name__)

_VARIANT_BY_TYPE: dict[str, Variant] = {"PP": Variant.A, "Client": Variant.B}
_TYPE_BY_VARIANT: dict[Variant, RequestType] = {Variant.A: "PP", Variant.B: "Client"}


def parse_request(payload: RequestPayload) -> CanonicalRecord:
    extra = dict(payload.model_extra or {})
    project_code = payload.project_code
    if project_code is not None and not is_valid_identifier(project_code):
        # written back unchanged by serialize_request
        log.warning(
            "Keeping malformed project code %r on request %s as-is", project_code, payload.id
        )
        extra["projectCode"] = project_code
        project_code = None

    price = payload.price
    if price < 0:
        log.warning("Request %s has negative price %s; treating as unknown", payload.id, price)
        price = 0.0

    return CanonicalRecord(
        id=payload.id,
        display_name=payload.client_name,
        variant=_VARIANT_BY_TYPE[payload.type],
        received_date=parse_timestamp(payload.date),
        status=payload.status,
        price=price,
        external_identifier=project_code,
        assignment=payload.assigned_to,
        number=payload.number,
        contact_handle=payload.client_email,
        extra=extra,
    )


def serialize_request(record: CanonicalRecord) -> dict[str, Any]:
    data: dict[str, Any] = {"id": record.id}
    if record.number is not None:
        data["number"] = record.number
    data["clientName"] = record.display_name
    data["type"] = _TYPE_BY_VARIANT[record.variant]
    data["date"] = format_timestamp(record.received_date)
    data["status"] = record.status
    data["assignedTo"] = record.assignment
    data["price"] = _format_price(record.price)
    if record.external_identifier is not None:
        data["projectCode"] = record.external_identifier
    if record.contact_handle is not None:
        data["clientEmail"] = record.contact_handle
    for key, value in record.extra.items():
        data.setdefault(key, value)
    return data


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp as written by JavaScript's ``toISOString``."""

    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    utc_value = value.astimezone(UTC)
    return f"{utc_value.strftime('%Y-%m-%dT%H:%M:%S')}.{utc_value.microsecond // 1000:03d}Z"


def _format_price(price: float) -> int | float:
    return int(price) if price.is_integer() else price
