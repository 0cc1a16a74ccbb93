"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import CanonicalRecordRepository
from .probing import PriceProbe
from .unit_of_work import CanonicalRecordRepositories, CanonicalRecordUnitOfWork

__all__ = [
    "CanonicalRecordRepositories",
    "CanonicalRecordRepository",
    "CanonicalRecordUnitOfWork",
    "PriceProbe",
]
