"""Result types shared by the resolver, the merger and the run report."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from itemsync.domain.model import CanonicalRecord, MatchKind


@dataclass(slots=True, frozen=True, kw_only=True)
class Match:
    """One external identifier linked to one canonical record."""

    identifier: str
    record: CanonicalRecord
    kind: MatchKind


@dataclass(slots=True, kw_only=True)
class MatchResult:
    """Resolver output; ``matches`` keeps external identifier input order."""

    matches: dict[str, Match] = field(default_factory=dict[str, Match])
    unmatched: list[str] = field(default_factory=list[str])

    @property
    def matched_count(self) -> int:
        return len(self.matches)

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched)

    @property
    def total(self) -> int:
        return self.matched_count + self.unmatched_count

    def by_kind(self) -> dict[MatchKind, int]:
        return dict(Counter(match.kind for match in self.matches.values()))

    def record_for(self, identifier: str) -> CanonicalRecord | None:
        match = self.matches.get(identifier)
        return match.record if match else None


@dataclass(slots=True, frozen=True)
class IdentifierChange:
    record_id: str
    previous: str | None
    current: str


@dataclass(slots=True, frozen=True)
class PriceChange:
    record_id: str
    identifier: str
    previous: float
    current: float


@dataclass(slots=True, kw_only=True)
class MergeResult:
    """Full record set after a merge pass plus what literally changed."""

    records: list[CanonicalRecord]
    identifier_changes: list[IdentifierChange] = field(default_factory=list[IdentifierChange])
    price_changes: list[PriceChange] = field(default_factory=list[PriceChange])

    @property
    def updated_count(self) -> int:
        changed = {change.record_id for change in self.identifier_changes}
        changed.update(change.record_id for change in self.price_changes)
        return len(changed)
