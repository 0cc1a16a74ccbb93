"""Deterministic comparison keys for identity resolution."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

type NameDateKey = tuple[str, date]


def normalize_name(value: str | None) -> str:
    """Uppercase, drop punctuation and collapse whitespace.

    >>> normalize_name("  Deschamps-Martin,  Léa ")
    'DESCHAMPSMARTIN LÉA'
    """

    if not value:
        return ""
    kept = "".join(char for char in value.upper() if char.isalnum() or char.isspace())
    return " ".join(kept.split())


def calendar_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def name_date_key(name: str | None, moment: date | datetime | None) -> NameDateKey | None:
    normalized = normalize_name(name)
    if not normalized or moment is None:
        return None
    return normalized, calendar_date(moment)


def contact_tokens(handle: str | None) -> list[str]:
    """Name-like tokens from the local part of an email address.

    ``"jean.dupont@example.com"`` yields ``["JEAN", "DUPONT"]``.
    """

    if not handle:
        return []
    local_part = handle.strip().split("@", 1)[0]
    tokens: list[str] = []
    for piece in local_part.split("."):
        token = normalize_name(piece)
        if token:
            tokens.append(token)
    return tokens


def name_resembles_token(name: str, token: str) -> bool:
    """Containment either way, or a shared three-character prefix."""

    if not name or not token:
        return False
    if token in name or name in token:
        return True
    return len(name) >= 3 and len(token) >= 3 and name[:3] == token[:3]
