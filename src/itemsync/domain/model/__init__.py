"""Public domain model surface."""

from __future__ import annotations

from itemsync.domain.model.enums import MatchKind, Variant
from itemsync.domain.model.identifiers import is_valid_identifier
from itemsync.domain.model.records import CanonicalRecord, ExternalRecord

__all__ = [
    "CanonicalRecord",
    "ExternalRecord",
    "MatchKind",
    "Variant",
    "is_valid_identifier",
]
