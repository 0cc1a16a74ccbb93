"""Cascading identity resolution between feed rows and canonical records.

Tiers are tried in order for every external identifier and the first tier
producing a candidate decides:

1. exact: a canonical record already carries the identifier;
2. name and date: same normalized display name and calendar date, preferring
   the most recent record of the same variant, else a lone candidate of any
   variant (tagged as a weak match);
3. contact and date: only for rows without a name, compares tokens from the
   contact email with display names of same-variant records on the same date.
"""

from __future__ import annotations

from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING

from itemsync.domain.model import MatchKind

from .contracts import Match, MatchResult
from .normalize import (
    calendar_date,
    contact_tokens,
    name_date_key,
    name_resembles_token,
    normalize_name,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from itemsync.domain.model import CanonicalRecord, ExternalRecord

    from .normalize import NameDateKey

log = getLogger(__name__)


def resolve_identities(
    records: Sequence[CanonicalRecord],
    external_records: Iterable[ExternalRecord],
) -> MatchResult:
    """Link each external identifier to at most one canonical record."""

    by_identifier: dict[str, CanonicalRecord] = {}
    by_name_date: defaultdict[NameDateKey, list[CanonicalRecord]] = defaultdict(list)
    for record in records:
        if record.external_identifier:
            by_identifier.setdefault(record.external_identifier, record)
        key = name_date_key(record.display_name, record.received_date)
        if key is not None:
            by_name_date[key].append(record)

    result = MatchResult()
    for external in external_records:
        identifier = external.external_identifier
        if identifier in result.matches or identifier in result.unmatched:
            continue
        match = (
            _match_exact(identifier, by_identifier)
            or _match_name_date(external, by_name_date)
            or _match_contact_date(external, records)
        )
        if match is None:
            result.unmatched.append(identifier)
        else:
            result.matches[identifier] = match

    log.info(
        "Resolved %d of %d identifiers (%s)",
        result.matched_count,
        result.total,
        ", ".join(f"{kind}={count}" for kind, count in sorted(result.by_kind().items())) or "none",
    )
    return result


def _match_exact(identifier: str, by_identifier: dict[str, CanonicalRecord]) -> Match | None:
    record = by_identifier.get(identifier)
    if record is None:
        return None
    return Match(identifier=identifier, record=record, kind=MatchKind.EXACT)


def _match_name_date(
    external: ExternalRecord,
    by_name_date: dict[NameDateKey, list[CanonicalRecord]],
) -> Match | None:
    key = name_date_key(external.display_name, external.submission_date)
    if key is None:
        return None
    candidates = by_name_date.get(key)
    if not candidates:
        return None

    same_variant = [record for record in candidates if record.variant == external.variant]
    if same_variant:
        # max() keeps the first of equally recent records
        best = max(same_variant, key=lambda record: record.received_date)
        return Match(identifier=external.external_identifier, record=best, kind=MatchKind.NAME_DATE)
    if len(candidates) == 1:
        return Match(
            identifier=external.external_identifier,
            record=candidates[0],
            kind=MatchKind.NAME_DATE_WEAK,
        )
    log.debug(
        "Ambiguous name/date candidates for %s: %d records of other variants",
        external.external_identifier,
        len(candidates),
    )
    return None


def _match_contact_date(
    external: ExternalRecord,
    records: Sequence[CanonicalRecord],
) -> Match | None:
    if normalize_name(external.display_name) or external.submission_date is None:
        return None
    tokens = contact_tokens(external.contact_handle)
    if not tokens:
        return None

    for record in records:
        if record.variant != external.variant:
            continue
        if calendar_date(record.received_date) != external.submission_date:
            continue
        name = normalize_name(record.display_name)
        if any(name_resembles_token(name, token) for token in tokens):
            return Match(
                identifier=external.external_identifier,
                record=record,
                kind=MatchKind.CONTACT_DATE,
            )
    return None
