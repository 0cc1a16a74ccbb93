"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Variant(StrEnum):
    """Schema shape a feed (and the work item it describes) belongs to.

    ``A`` is the wide partner-planner export, ``B`` the narrow direct-client one.
    """

    A = "pp"
    B = "client"


class MatchKind(StrEnum):
    """Which identity tier linked an external identifier to a canonical record."""

    EXACT = "exact"
    NAME_DATE = "name_date"
    NAME_DATE_WEAK = "name_date_weak"
    CONTACT_DATE = "contact_date"
