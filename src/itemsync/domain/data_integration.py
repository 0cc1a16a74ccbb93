"""Application service reconciling feeds, prices and the canonical record store."""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager, AsyncExitStack
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from itemsync.domain.errors import FeedError, FeedParseError, NothingToReconcileError
from itemsync.domain.feeds import (
    DEFAULT_SOURCE_HINTS,
    detect_variant,
    extract_external_records,
    parse_delimited_text,
)
from itemsync.domain.model import ExternalRecord, Variant
from itemsync.domain.pricing import PriceObservations, collect_price_observations
from itemsync.domain.reconciliation import (
    RunReport,
    build_run_report,
    merge_records,
    resolve_identities,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import date

    from itemsync.domain.ports import CanonicalRecordUnitOfWork, PriceProbe

log = getLogger(__name__)

DEFAULT_PROBE_CONCURRENCY = 2
DEFAULT_PROBE_BATCH_DELAY = 1.0


@dataclass(slots=True, frozen=True)
class FeedSource:
    """Raw text of one feed plus a hint (typically its filename) for variant detection."""

    text: str | None
    source_hint: str | None = None
    variant: Variant | None = None

    @property
    def label(self) -> str:
        return self.source_hint or (self.variant.value if self.variant else "feed")


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconcileOptions:
    min_date: date | None = None
    dry_run: bool = False
    use_existing_prices: bool = False
    assign_identifiers: bool = True
    concurrency: int = DEFAULT_PROBE_CONCURRENCY
    batch_delay: float = DEFAULT_PROBE_BATCH_DELAY
    source_hints: Mapping[str, Variant] = field(default_factory=lambda: dict(DEFAULT_SOURCE_HINTS))


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconciliationRun:
    """Identity and options of one reconciliation pass, passed explicitly to every step."""

    run_id: str = field(default_factory=lambda: uuid4().hex)
    options: ReconcileOptions = field(default_factory=ReconcileOptions)


@dataclass(slots=True)
class _FeedIntake:
    records: dict[str, ExternalRecord] = field(default_factory=dict[str, ExternalRecord])
    counts: dict[Variant, int] = field(default_factory=lambda: {Variant.A: 0, Variant.B: 0})
    errors: dict[str, str] = field(default_factory=dict[str, str])


def reconcile_work_items(
    run: ReconciliationRun,
    feeds: Sequence[FeedSource],
    probe: PriceProbe,
    unit_of_work_factory: Callable[[], CanonicalRecordUnitOfWork],
) -> RunReport:
    """Reconcile ``feeds`` against the canonical store and return the run report.

    A feed that cannot be read is reported and skipped. The store is written
    once at the end, and not at all for dry runs or when nothing changed.
    """

    options = run.options
    log.info(
        "Starting reconciliation run %s: feeds=%d, dry_run=%s, min_date=%s",
        run.run_id,
        len(feeds),
        options.dry_run,
        options.min_date,
    )
    if not feeds:
        raise NothingToReconcileError("No feeds were provided")

    intake = read_feeds(run, feeds)
    external_records = _filter_by_date(intake.records, options.min_date)
    if not external_records:
        details = "; ".join(f"{label}: {error}" for label, error in intake.errors.items())
        raise NothingToReconcileError(
            f"No identifiers to reconcile{f' ({details})' if details else ''}"
        )

    with unit_of_work_factory() as uow:
        repository = uow.repositories.records
        records = repository.read_all()
        match_result = resolve_identities(records, external_records.values())

        prior_prices = {
            identifier: external.price
            for identifier, external in external_records.items()
            if external.price is not None
        }
        observations = asyncio.run(
            _observe_prices(
                list(match_result.matches),
                probe,
                options=options,
                prior_prices=prior_prices,
            )
        )

        merge_result = merge_records(
            records,
            match_result,
            observations,
            assign_identifiers=options.assign_identifiers,
        )
        if options.dry_run:
            log.info("Dry run: %d record(s) would be updated", merge_result.updated_count)
        elif merge_result.updated_count:
            repository.replace_all(merge_result.records)
            uow.commit()

    report = build_run_report(
        run_id=run.run_id,
        feed_counts=intake.counts,
        feed_errors=intake.errors,
        match_result=match_result,
        observations=observations,
        merge_result=merge_result,
        dry_run=options.dry_run,
    )
    log.info(
        "Finished reconciliation run %s: matched=%d, unmatched=%d, prices=%d/%d, updated=%d",
        run.run_id,
        report.matched,
        report.unmatched,
        report.succeeded,
        report.attempted,
        report.updated_record_count,
    )
    return report


def read_feeds(run: ReconciliationRun, feeds: Sequence[FeedSource]) -> _FeedIntake:
    """Extract external records from every feed; later variant-B rows win over variant A."""

    intake = _FeedIntake()
    per_variant: dict[Variant, dict[str, ExternalRecord]] = {Variant.A: {}, Variant.B: {}}
    for feed in feeds:
        try:
            variant, records = read_feed(feed, hints=run.options.source_hints)
        except FeedError as exc:
            log.error("Skipping feed %s: %s", feed.label, exc)
            intake.errors[feed.label] = str(exc)
            continue
        intake.counts[variant] += len(records)
        per_variant[variant].update(records)
        log.info("Read %d identifier(s) from %s feed %s", len(records), variant, feed.label)

    intake.records.update(per_variant[Variant.A])
    intake.records.update(per_variant[Variant.B])
    return intake


def read_feed(
    feed: FeedSource,
    *,
    hints: Mapping[str, Variant] = DEFAULT_SOURCE_HINTS,
) -> tuple[Variant, dict[str, ExternalRecord]]:
    if feed.text is None or not feed.text.strip():
        raise FeedParseError("Feed is missing or empty", source=feed.label)
    rows = parse_delimited_text(feed.text)
    if len(rows) < 2:
        raise FeedParseError("Feed has no data rows", source=feed.label)
    variant = feed.variant or detect_variant(rows[0], source_hint=feed.source_hint, hints=hints)
    return variant, extract_external_records(rows, variant)


def _filter_by_date(
    records: Mapping[str, ExternalRecord],
    min_date: date | None,
) -> dict[str, ExternalRecord]:
    if min_date is None:
        return dict(records)
    kept = {
        identifier: record
        for identifier, record in records.items()
        if record.submission_date is None or record.submission_date >= min_date
    }
    log.info("Kept %d of %d identifier(s) submitted on or after %s", len(kept), len(records), min_date)
    return kept


async def _observe_prices(
    identifiers: Sequence[str],
    probe: PriceProbe,
    *,
    options: ReconcileOptions,
    prior_prices: Mapping[str, float],
) -> PriceObservations:
    async with AsyncExitStack() as stack:
        if isinstance(probe, AbstractAsyncContextManager):
            await stack.enter_async_context(probe)
        return await collect_price_observations(
            identifiers,
            probe,
            concurrency=options.concurrency,
            batch_delay=options.batch_delay,
            prior_prices=prior_prices,
            prefer_prior=options.use_existing_prices,
        )
