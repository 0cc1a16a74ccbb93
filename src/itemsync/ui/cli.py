from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from itemsync.app import load_feed, lookup_feed_fields, reconcile
from itemsync.config import configure_logging
from itemsync.domain.model import Variant, is_valid_identifier

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from itemsync.domain.data_integration import FeedSource

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile work items with form exports")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("reconcile", help="Reconcile feeds with the request store")
    run.add_argument("--feed-a", type=Path, help="Partner-planner (wide) feed export")
    run.add_argument("--feed-b", type=Path, help="Direct-client (narrow) feed export")
    run.add_argument(
        "--feed",
        type=Path,
        action="append",
        default=[],
        help="Feed export whose variant is detected automatically (repeatable)",
    )
    run.add_argument(
        "--store",
        choices=("json", "sqlite"),
        default="json",
        help="Canonical record store (default: %(default)s)",
    )
    run.add_argument(
        "--requests-json",
        type=Path,
        help="Path to requests.json (defaults to the data directory)",
    )
    run.add_argument("--concurrency", type=int, help="Concurrent price probes per batch")
    run.add_argument("--batch-delay", type=float, help="Seconds to wait between probe batches")
    run.add_argument(
        "--use-existing-prices",
        action="store_true",
        help="Use prices already present in the feeds instead of probing them",
    )
    run.add_argument(
        "--no-assign-identifiers",
        dest="assign_identifiers",
        action="store_false",
        help="Only update prices; leave project identifiers untouched",
    )
    run.add_argument("--dry-run", action="store_true", help="Compute the report, write nothing")
    run.add_argument(
        "--min-date",
        type=str,
        help="Ignore feed rows submitted before this date (YYYY-MM-DD)",
    )
    run.add_argument("--report", type=Path, help="Write the JSON run report to this path")

    lookup = subparsers.add_parser("lookup", help="Show the fields of one feed row")
    lookup.add_argument("--feed", type=Path, required=True, help="Feed export to search")
    lookup.add_argument("--identifier", type=str, required=True, help="Project identifier")

    return parser.parse_args(list(argv))


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def _validate(args: argparse.Namespace) -> None:
    if args.command == "reconcile":
        if not (args.feed_a or args.feed_b or args.feed):
            raise ValueError("Provide at least one feed (--feed-a, --feed-b or --feed)")
        if args.concurrency is not None and args.concurrency < 1:
            raise ValueError("Concurrency must be at least 1")
        if args.batch_delay is not None and args.batch_delay < 0:
            raise ValueError("Batch delay must be non-negative")
        if args.min_date is not None:
            args.min_date = _parse_date(args.min_date)
    elif args.command == "lookup" and not is_valid_identifier(args.identifier.strip()):
        raise ValueError(f"Invalid identifier: {args.identifier}")


def _collect_feeds(args: argparse.Namespace) -> list[FeedSource]:
    feeds: list[FeedSource] = []
    if args.feed_a:
        feeds.append(load_feed(args.feed_a, variant=Variant.A))
    if args.feed_b:
        feeds.append(load_feed(args.feed_b, variant=Variant.B))
    feeds.extend(load_feed(path) for path in args.feed)
    return feeds


def _run_reconcile(args: argparse.Namespace) -> None:
    report = reconcile(
        feeds=_collect_feeds(args),
        store=args.store,
        requests_path=args.requests_json,
        min_date=args.min_date,
        dry_run=args.dry_run,
        use_existing_prices=args.use_existing_prices,
        assign_identifiers=args.assign_identifiers,
        concurrency=args.concurrency,
        batch_delay=args.batch_delay,
    )
    payload = json.dumps(report.as_dict(), indent=2)
    if args.report:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_text(payload + "\n", encoding="utf-8")
        log.info("Wrote run report to %s", args.report)
    print(payload)  # noqa: T201
    for label, error in report.feed_errors.items():
        log.warning("Feed %s was skipped: %s", label, error)


def _run_lookup(args: argparse.Namespace) -> None:
    identifier = args.identifier.strip()
    row = lookup_feed_fields(args.feed, identifier)
    if row is None:
        log.warning("Identifier %s not found in %s", identifier, args.feed)
        sys.exit(3)
    print(  # noqa: T201
        json.dumps(
            {
                "identifier": row.identifier,
                "variant": row.variant.value,
                "multiValue": row.multi_value,
                "fields": row.fields,
            },
            indent=2,
            ensure_ascii=False,
        )
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "reconcile":
            _run_reconcile(parsed_args)
        elif parsed_args.command == "lookup":
            _run_lookup(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
