"""Column-position field extraction and feed row lookups."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from itemsync.domain.errors import FeedRangeError
from itemsync.domain.model import ExternalRecord, Variant, is_valid_identifier
from itemsync.domain.pricing.parse import parse_price_text

from .schema import DEFAULT_SOURCE_HINTS, detect_multi_value, detect_variant

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from .delimited import Row

log = getLogger(__name__)

IDENTIFIER_COLUMN: Final[Mapping[Variant, int]] = {Variant.A: 45, Variant.B: 22}
CONTACT_COLUMN: Final[Mapping[Variant, int]] = {Variant.A: 40, Variant.B: 18}
SUBMISSION_DATE_COLUMN: Final[Mapping[Variant, int]] = {Variant.A: 51, Variant.B: 29}

COLUMN_LAYOUTS: Final[Mapping[tuple[Variant, bool], tuple[int, ...]]] = {
    (Variant.A, False): tuple(range(1, 34)),
    (Variant.A, True): tuple(range(1, 34)) + tuple(range(34, 38)),
    (Variant.B, False): tuple(range(1, 11)),
    (Variant.B, True): tuple(range(1, 13)),
}

MULTI_VALUE_COLUMN: Final = 6
MULTI_VALUE_KEY: Final = "_multi_value_column_6"

_ISO_DATE_PREFIX: Final = re.compile(r"^(\d{4}-\d{2}-\d{2})")
_DATE_FORMATS: Final = ("%d/%m/%Y", "%d/%m/%Y %H:%M:%S", "%d/%m/%Y %H:%M")


@dataclass(slots=True, frozen=True, kw_only=True)
class FeedRowData:
    """Field map extracted for one identifier from one feed."""

    identifier: str
    variant: Variant
    multi_value: bool
    fields: dict[str, str] = field(default_factory=dict[str, str])
    identifier_column: int
    columns: tuple[int, ...] = ()


def column_name(header: Sequence[str], index: int) -> str:
    if index < len(header) and header[index].strip():
        return header[index]
    return f"Column_{index}"


def extract_fields(
    row: Sequence[str],
    header: Sequence[str],
    variant: Variant,
    multi_value: bool,  # noqa: FBT001
) -> dict[str, str]:
    """Map header names to row values using the layout for ``variant`` and ``multi_value``.

    Indices past the end of ``row`` yield empty strings.
    """

    fields: dict[str, str] = {}
    for index in COLUMN_LAYOUTS[variant, multi_value]:
        fields[column_name(header, index)] = _cell(row, index)
    if variant is Variant.B and multi_value:
        fields[MULTI_VALUE_KEY] = _cell(row, MULTI_VALUE_COLUMN)
    return fields


def find_row(rows: Sequence[Row], identifier: str, variant: Variant) -> Row | None:
    """Return the first data row whose identifier column holds ``identifier``.

    ``rows`` includes the header row. Raises :class:`FeedRangeError` when the
    identifier column does not exist according to the header.
    """

    if not rows:
        return None
    header = rows[0]
    column = _identifier_column(header, variant)
    for row in rows[1:]:
        value = _cell(row, column).strip()
        if value == identifier and is_valid_identifier(value):
            return row
    return None


def find_row_by_contact(
    rows: Sequence[Row],
    contact: str,
    submitted_on: date,
    variant: Variant,
) -> Row | None:
    """Return the first row with a matching contact email and submission date."""

    if not rows:
        return None
    identifier_column = _identifier_column(rows[0], variant)
    contact_column = CONTACT_COLUMN[variant]
    date_column = SUBMISSION_DATE_COLUMN[variant]
    wanted = contact.strip().lower()
    for row in rows[1:]:
        if not is_valid_identifier(_cell(row, identifier_column).strip()):
            continue
        if _cell(row, contact_column).strip().lower() != wanted:
            continue
        if parse_calendar_date(_cell(row, date_column)) == submitted_on:
            return row
    return None


def lookup_request_fields(
    rows: Sequence[Row],
    identifier: str,
    *,
    source_hint: str | None = None,
    variant: Variant | None = None,
    hints: Mapping[str, Variant] = DEFAULT_SOURCE_HINTS,
) -> FeedRowData | None:
    """Detect the feed variant, locate ``identifier`` and extract its field map."""

    if not rows:
        return None
    header = rows[0]
    resolved_variant = variant or detect_variant(header, source_hint=source_hint, hints=hints)
    row = find_row(rows, identifier, resolved_variant)
    if row is None:
        log.debug("Identifier %s not found in %s feed", identifier, resolved_variant)
        return None
    multi_value = detect_multi_value(row, resolved_variant)
    return FeedRowData(
        identifier=identifier,
        variant=resolved_variant,
        multi_value=multi_value,
        fields=extract_fields(row, header, resolved_variant, multi_value),
        identifier_column=IDENTIFIER_COLUMN[resolved_variant],
        columns=COLUMN_LAYOUTS[resolved_variant, multi_value],
    )


def extract_external_records(
    rows: Sequence[Row],
    variant: Variant,
) -> dict[str, ExternalRecord]:
    """Build one :class:`ExternalRecord` per identifier found in a parsed feed.

    Rows without a valid identifier are skipped. When an identifier appears
    twice, the later row wins.
    """

    if not rows:
        return {}
    header = rows[0]
    identifier_column = _identifier_column(header, variant)
    lowered = [name.strip().lower() for name in header]

    price_column = _find_header(lowered, lambda name: name == "price") if variant is Variant.B else None
    contact_column = _find_header(lowered, lambda name: name in {"email", "pp_email"})
    date_column = _find_header(
        lowered, lambda name: "submit date" in name or "submitdate" in name
    )
    if date_column is None:
        date_column = SUBMISSION_DATE_COLUMN[variant]
    name_column = _find_header(
        lowered,
        lambda name: "client name" in name or "name" in name or "lastname" in name,
    )

    records: dict[str, ExternalRecord] = {}
    for position, row in enumerate(rows[1:], start=2):
        if len(row) <= identifier_column:
            log.warning(
                "%s feed row %d has %d columns, expected more than %d; skipping",
                variant,
                position,
                len(row),
                identifier_column,
            )
            continue
        identifier = row[identifier_column].strip()
        if not is_valid_identifier(identifier):
            continue

        price: float | None = None
        if price_column is not None:
            parsed = parse_price_text(_cell(row, price_column).strip())
            if parsed > 0:
                price = parsed

        multi_value = detect_multi_value(row, variant)
        records[identifier] = ExternalRecord(
            external_identifier=identifier,
            variant=variant,
            price=price,
            contact_handle=_optional_cell(row, contact_column),
            submission_date=parse_calendar_date(_cell(row, date_column)),
            display_name=_optional_cell(row, name_column),
            fields=extract_fields(row, header, variant, multi_value),
        )
    return records


def parse_calendar_date(value: str | None) -> date | None:
    """Return the calendar date of a feed timestamp such as ``2025-11-22 11:13:39``."""

    if not value or not value.strip():
        return None
    text = value.strip()
    match = _ISO_DATE_PREFIX.match(text)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def _identifier_column(header: Sequence[str], variant: Variant) -> int:
    column = IDENTIFIER_COLUMN[variant]
    if column >= len(header):
        raise FeedRangeError(
            f"Identifier column {column} is out of range: {variant} feed has "
            f"{len(header)} columns",
            column_index=column,
            width=len(header),
        )
    return column


def _find_header(lowered: Sequence[str], predicate: Callable[[str], bool]) -> int | None:
    for index, name in enumerate(lowered):
        if predicate(name):
            return index
    return None


def _cell(row: Sequence[str], index: int) -> str:
    return row[index] if 0 <= index < len(row) else ""


def _optional_cell(row: Sequence[str], index: int | None) -> str | None:
    if index is None:
        return None
    return _cell(row, index).strip() or None
