"""Conservative merge of resolver matches and price observations into records."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from itemsync.domain.model import MatchKind
from itemsync.domain.pricing import is_observed_price

from .contracts import IdentifierChange, MergeResult, PriceChange

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from itemsync.domain.model import CanonicalRecord
    from itemsync.domain.pricing import PriceObservations

    from .contracts import Match, MatchResult

log = getLogger(__name__)


def merge_records(
    records: Sequence[CanonicalRecord],
    match_result: MatchResult,
    observations: PriceObservations | Mapping[str, float],
    *,
    assign_identifiers: bool = True,
) -> MergeResult:
    """Apply matched identifiers and observed prices to ``records``.

    Input records are never mutated; changed records are copies, untouched
    ones are passed through as the same objects. A price is only replaced by a
    finite positive observation, so a missing or zero observation never erases
    a known price. Running the merge again on its own output changes nothing.
    """

    identifier_by_record = _identifiers_by_record(match_result)
    result = MergeResult(records=[])

    for record in records:
        matched_identifier = identifier_by_record.get(record.id)
        resolved_identifier = matched_identifier or record.external_identifier

        new_identifier = record.external_identifier
        if (
            assign_identifiers
            and matched_identifier is not None
            and matched_identifier != record.external_identifier
        ):
            new_identifier = matched_identifier
            result.identifier_changes.append(
                IdentifierChange(record.id, record.external_identifier, matched_identifier)
            )

        new_price = record.price
        observed = observations.get(resolved_identifier) if resolved_identifier else None
        if is_observed_price(observed) and observed != record.price:
            new_price = float(observed)  # type: ignore[arg-type]
            result.price_changes.append(
                PriceChange(record.id, resolved_identifier, record.price, new_price)  # type: ignore[arg-type]
            )

        if new_identifier == record.external_identifier and new_price == record.price:
            result.records.append(record)
            continue
        result.records.append(
            replace(
                record,
                external_identifier=new_identifier,
                price=new_price,
                extra=dict(record.extra),
            )
        )

    log.info(
        "Merged %d records: %d identifiers assigned, %d prices updated",
        len(records),
        len(result.identifier_changes),
        len(result.price_changes),
    )
    return result


def _identifiers_by_record(match_result: MatchResult) -> dict[str, str]:
    chosen: dict[str, Match] = {}
    for match in match_result.matches.values():
        existing = chosen.get(match.record.id)
        if existing is None:
            chosen[match.record.id] = match
            continue
        keep = existing
        if match.kind is MatchKind.EXACT and existing.kind is not MatchKind.EXACT:
            keep = match
        log.warning(
            "Record %s matched by both %s and %s; keeping %s",
            match.record.id,
            existing.identifier,
            match.identifier,
            keep.identifier,
        )
        chosen[match.record.id] = keep
    return {record_id: match.identifier for record_id, match in chosen.items()}
