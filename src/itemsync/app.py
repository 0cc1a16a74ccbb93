"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from itemsync.adapters.pricing import HttpPriceProbe
from itemsync.adapters.requests_json import JsonUnitOfWork
from itemsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from itemsync.config import get_feed_config, get_reconcile_config
from itemsync.domain.data_integration import (
    FeedSource,
    ReconcileOptions,
    ReconciliationRun,
    reconcile_work_items,
)
from itemsync.domain.feeds import lookup_request_fields, parse_delimited_text

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import date
    from pathlib import Path

    from itemsync.domain.feeds import FeedRowData
    from itemsync.domain.model import Variant
    from itemsync.domain.ports import CanonicalRecordUnitOfWork, PriceProbe
    from itemsync.domain.reconciliation import RunReport

type UnitOfWorkFactory = Callable[[], CanonicalRecordUnitOfWork]
type StoreKind = Literal["json", "sqlite"]

log = getLogger(__name__)


def load_feed(path: Path, *, variant: Variant | None = None) -> FeedSource:
    """Read a feed file; a missing file yields an empty source reported by the run."""

    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        log.error("Feed file not found: %s", path)
        text = None
    return FeedSource(text=text, source_hint=path.name, variant=variant)


def build_unit_of_work_factory(
    store: StoreKind = "json",
    *,
    requests_path: Path | None = None,
) -> UnitOfWorkFactory:
    if store == "sqlite":
        if not is_started():
            startup()
        return SqlAlchemyUnitOfWork
    if store == "json":
        return lambda: JsonUnitOfWork(requests_path)
    raise ValueError(f"Unsupported store: {store}")


def reconcile(
    *,
    feeds: Sequence[FeedSource],
    store: StoreKind = "json",
    requests_path: Path | None = None,
    probe: PriceProbe | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    min_date: date | None = None,
    dry_run: bool = False,
    use_existing_prices: bool = False,
    assign_identifiers: bool = True,
    concurrency: int | None = None,
    batch_delay: float | None = None,
) -> RunReport:
    """Run one reconciliation pass using the configured adapters."""

    reconcile_config = get_reconcile_config()
    options = ReconcileOptions(
        min_date=min_date,
        dry_run=dry_run,
        use_existing_prices=use_existing_prices,
        assign_identifiers=assign_identifiers,
        concurrency=concurrency or reconcile_config.probe_concurrency,
        batch_delay=(
            reconcile_config.probe_batch_delay if batch_delay is None else batch_delay
        ),
        source_hints=get_feed_config().hint_tokens(),
    )
    effective_uow = unit_of_work_factory or build_unit_of_work_factory(
        store, requests_path=requests_path
    )
    effective_probe = probe or HttpPriceProbe()
    run = ReconciliationRun(options=options)
    log.info(
        "Reconciling %d feed(s) into %s store (concurrency=%s, batch_delay=%ss)",
        len(feeds),
        store,
        options.concurrency,
        options.batch_delay,
    )
    return reconcile_work_items(run, feeds, effective_probe, effective_uow)


def lookup_feed_fields(path: Path, identifier: str) -> FeedRowData | None:
    """Return the extracted field map for ``identifier`` in the feed at ``path``."""

    rows = parse_delimited_text(path.read_text(encoding="utf-8-sig"))
    return lookup_request_fields(
        rows,
        identifier,
        source_hint=path.name,
        hints=get_feed_config().hint_tokens(),
    )
