"""Run report summarizing one reconciliation pass for operators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from itemsync.domain.model import MatchKind, Variant

if TYPE_CHECKING:
    from collections.abc import Mapping

    from itemsync.domain.pricing import PriceObservations

    from .contracts import MatchResult, MergeResult


@dataclass(slots=True, kw_only=True)
class RunReport:
    run_id: str
    dry_run: bool = False
    feed_counts: dict[Variant, int] = field(default_factory=dict[Variant, int])
    feed_errors: dict[str, str] = field(default_factory=dict[str, str])
    matched: int = 0
    unmatched: int = 0
    match_kinds: dict[MatchKind, int] = field(default_factory=dict[MatchKind, int])
    unmatched_identifiers: list[str] = field(default_factory=list[str])
    attempted: int = 0
    succeeded: int = 0
    updated_record_count: int = 0

    @property
    def feed_total(self) -> int:
        return sum(self.feed_counts.values())

    def as_dict(self) -> dict[str, Any]:
        """JSON-ready representation using the report's published key names."""

        return {
            "runId": self.run_id,
            "dryRun": self.dry_run,
            "feedCounts": {
                "A": self.feed_counts.get(Variant.A, 0),
                "B": self.feed_counts.get(Variant.B, 0),
                "total": self.feed_total,
            },
            "matchCounts": {"matched": self.matched, "unmatched": self.unmatched},
            "priceCounts": {"attempted": self.attempted, "succeeded": self.succeeded},
            "updatedRecordCount": self.updated_record_count,
            "unmatchedIdentifiers": list(self.unmatched_identifiers),
            "feedErrors": dict(self.feed_errors),
            "matchKinds": {kind.value: self.match_kinds.get(kind, 0) for kind in MatchKind},
        }


def build_run_report(
    *,
    run_id: str,
    feed_counts: Mapping[Variant, int],
    feed_errors: Mapping[str, str],
    match_result: MatchResult,
    observations: PriceObservations,
    merge_result: MergeResult,
    dry_run: bool = False,
) -> RunReport:
    return RunReport(
        run_id=run_id,
        dry_run=dry_run,
        feed_counts=dict(feed_counts),
        feed_errors=dict(feed_errors),
        matched=match_result.matched_count,
        unmatched=match_result.unmatched_count,
        match_kinds=match_result.by_kind(),
        unmatched_identifiers=list(match_result.unmatched),
        attempted=observations.attempted,
        succeeded=observations.succeeded,
        updated_record_count=merge_result.updated_count,
    )
