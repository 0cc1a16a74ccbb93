"""Comma-delimited text parsing tolerant of quoted multi-line fields.

The form exports this package ingests routinely put line breaks and commas
inside answers, so rows cannot be split on line terminators up front. Fields
are never trimmed; only rows made entirely of blank fields are dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

type Row = list[str]

_DELIMITER = ","
_QUOTE = '"'


def parse_delimited_text(text: str) -> list[Row]:
    """Parse ``text`` into rows of raw field strings.

    The result is a plain list so callers can iterate it as often as they like.
    """

    return list(iter_delimited_rows(text))


def iter_delimited_rows(text: str) -> Iterator[Row]:
    """Yield rows lazily; see :func:`parse_delimited_text`."""

    row: Row = []
    field: list[str] = []
    in_quotes = False
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if in_quotes:
            if char == _QUOTE:
                if index + 1 < length and text[index + 1] == _QUOTE:
                    field.append(_QUOTE)
                    index += 1
                else:
                    in_quotes = False
            else:
                field.append(char)
        elif char == _QUOTE:
            in_quotes = True
        elif char == _DELIMITER:
            row.append("".join(field))
            field = []
        elif char in "\r\n":
            if char == "\r" and index + 1 < length and text[index + 1] == "\n":
                index += 1
            row.append("".join(field))
            field = []
            if not _is_blank(row):
                yield row
            row = []
        else:
            field.append(char)
        index += 1

    if field or row:
        row.append("".join(field))
        if not _is_blank(row):
            yield row


def _is_blank(row: Row) -> bool:
    return all(not value.strip() for value in row)
