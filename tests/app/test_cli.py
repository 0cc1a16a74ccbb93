from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING

import pytest

from itemsync.domain.model import Variant
from itemsync.domain.reconciliation import RunReport
from itemsync.ui import cli as cli_module
from tests.helpers.feeds import narrow_header, narrow_row, to_feed_text, wide_header, wide_row
from tests.helpers.records import IDENTIFIER_1, IDENTIFIER_2

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _fake_reconcile(captured: dict[str, object]) -> Callable[..., RunReport]:
    def fake(**kwargs: object) -> RunReport:
        captured.update(kwargs)
        return RunReport(
            run_id="cli-run",
            feed_counts={Variant.A: 1},
            feed_errors={"missing.csv": "Feed is missing or empty"},
            matched=1,
        )

    return fake


def test_reconcile_defaults(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(cli_module, "reconcile", _fake_reconcile(captured))
    feed = tmp_path / "export.csv"
    feed.write_text(to_feed_text([wide_header(), wide_row({45: IDENTIFIER_1})]), encoding="utf-8")

    cli_module.main(["reconcile", "--feed", str(feed)])

    assert captured["store"] == "json"
    assert captured["dry_run"] is False
    assert captured["assign_identifiers"] is True
    assert captured["min_date"] is None
    assert captured["concurrency"] is None
    (source,) = captured["feeds"]  # type: ignore[misc]
    assert source.source_hint == "export.csv"
    assert source.variant is None
    assert json.loads(capsys.readouterr().out)["runId"] == "cli-run"


def test_reconcile_with_flags(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(cli_module, "reconcile", _fake_reconcile(captured))
    report_path = tmp_path / "out" / "report.json"

    cli_module.main(
        [
            "reconcile",
            "--feed-a",
            str(tmp_path / "missing.csv"),
            "--feed-b",
            str(tmp_path / "also-missing.csv"),
            "--store",
            "sqlite",
            "--concurrency",
            "4",
            "--batch-delay",
            "0",
            "--use-existing-prices",
            "--no-assign-identifiers",
            "--dry-run",
            "--min-date",
            "2025-11-01",
            "--report",
            str(report_path),
        ]
    )

    assert captured["store"] == "sqlite"
    assert captured["concurrency"] == 4
    assert captured["batch_delay"] == 0.0
    assert captured["use_existing_prices"] is True
    assert captured["assign_identifiers"] is False
    assert captured["dry_run"] is True
    assert captured["min_date"] == date(2025, 11, 1)
    feeds = captured["feeds"]
    assert [feed.variant for feed in feeds] == [Variant.A, Variant.B]  # type: ignore[attr-defined]
    assert all(feed.text is None for feed in feeds)  # type: ignore[attr-defined]
    assert json.loads(report_path.read_text(encoding="utf-8"))["feedErrors"] == {
        "missing.csv": "Feed is missing or empty"
    }


@pytest.mark.parametrize(
    "argv",
    [
        ["reconcile"],
        ["reconcile", "--feed", "x.csv", "--concurrency", "0"],
        ["reconcile", "--feed", "x.csv", "--batch-delay", "-1"],
        ["reconcile", "--feed", "x.csv", "--min-date", "22/11/2025"],
        ["lookup", "--feed", "x.csv", "--identifier", "not-an-identifier"],
    ],
)
def test_invalid_arguments_exit_with_code_2(
    monkeypatch: pytest.MonkeyPatch, argv: list[str]
) -> None:
    monkeypatch.setattr(cli_module, "reconcile", _fake_reconcile({}))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_fatal_error_exits_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(**_: object) -> RunReport:
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(cli_module, "reconcile", failing)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile", "--feed", "x.csv"])

    assert excinfo.value.code == 1


def test_lookup_prints_fields(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    feed = tmp_path / "client-oIygOgih.csv"
    rows = [narrow_header(), narrow_row({1: "Dupont", 3: "white, oak", 22: IDENTIFIER_2})]
    feed.write_text(to_feed_text(rows), encoding="utf-8")

    cli_module.main(["lookup", "--feed", str(feed), "--identifier", IDENTIFIER_2])

    payload = json.loads(capsys.readouterr().out)
    assert payload["variant"] == "client"
    assert payload["multiValue"] is True
    assert payload["fields"]["lastname"] == "Dupont"
    assert "_multi_value_column_6" in payload["fields"]


def test_lookup_missing_identifier_exits_with_code_3(tmp_path: Path) -> None:
    feed = tmp_path / "client-oIygOgih.csv"
    feed.write_text(to_feed_text([narrow_header(), narrow_row({22: IDENTIFIER_2})]), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["lookup", "--feed", str(feed), "--identifier", IDENTIFIER_1])

    assert excinfo.value.code == 3
