"""Feed parsing, variant detection and field extraction."""

from __future__ import annotations

from .delimited import Row, iter_delimited_rows, parse_delimited_text
from .extract import (
    COLUMN_LAYOUTS,
    IDENTIFIER_COLUMN,
    MULTI_VALUE_KEY,
    FeedRowData,
    extract_external_records,
    extract_fields,
    find_row,
    find_row_by_contact,
    lookup_request_fields,
    parse_calendar_date,
)
from .schema import (
    DEFAULT_SOURCE_HINTS,
    MULTI_VALUE_RULES,
    VARIANT_RULES,
    detect_multi_value,
    detect_variant,
)

__all__ = [
    "COLUMN_LAYOUTS",
    "DEFAULT_SOURCE_HINTS",
    "IDENTIFIER_COLUMN",
    "MULTI_VALUE_KEY",
    "MULTI_VALUE_RULES",
    "VARIANT_RULES",
    "FeedRowData",
    "Row",
    "detect_multi_value",
    "detect_variant",
    "extract_external_records",
    "extract_fields",
    "find_row",
    "find_row_by_contact",
    "iter_delimited_rows",
    "lookup_request_fields",
    "parse_calendar_date",
    "parse_delimited_text",
]
