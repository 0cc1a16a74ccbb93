"""Price text normalization for scraped and exported amounts."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final

_KEEP: Final = re.compile(r"[^\d.,]")
_COMMA_THOUSANDS: Final = re.compile(r"\d*,\d{3}")
_COMMA_THOUSANDS_GROUPED: Final = re.compile(r"\d{1,3}(,\d{3})+")


def parse_price_text(text: str | None) -> float:
    """Parse a human-formatted price into whole currency units.

    ``"5 938 €"`` -> 5938, ``"9,075"`` -> 9075, ``"12,50"`` -> 13. Anything that
    does not contain a number parses as 0.
    """

    if not text:
        return 0.0
    cleaned = _KEEP.sub("", text)
    if not cleaned:
        return 0.0

    if "." in cleaned and "," in cleaned:
        decimal_separator = "." if cleaned.rfind(".") > cleaned.rfind(",") else ","
        thousands_separator = "," if decimal_separator == "." else "."
        cleaned = cleaned.replace(thousands_separator, "")
        cleaned = _keep_last_separator(cleaned, decimal_separator)
    elif "," in cleaned:
        if _is_comma_thousands(cleaned):
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = _keep_last_separator(cleaned, ",")
    elif "." in cleaned:
        cleaned = _keep_last_separator(cleaned, ".")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return 0.0
    return float(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _is_comma_thousands(value: str) -> bool:
    # a single comma followed by exactly three digits, or regular 3-digit groups
    if value.count(",") == 1:
        return _COMMA_THOUSANDS.fullmatch(value) is not None
    return _COMMA_THOUSANDS_GROUPED.fullmatch(value) is not None


def _keep_last_separator(value: str, separator: str) -> str:
    head, _, tail = value.rpartition(separator)
    return f"{head.replace(separator, '')}.{tail}"
