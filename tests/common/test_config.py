from __future__ import annotations

import logging

import pytest

from itemsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    RateLimit,
    configure_logging,
    get_feed_config,
    get_probe_config,
    get_reconcile_config,
    require_env_var,
    require_env_vars,
)
from itemsync.domain.model import Variant


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_reconcile_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ITEMSYNC_PROBE_CONCURRENCY", raising=False)
    monkeypatch.delenv("ITEMSYNC_PROBE_BATCH_DELAY", raising=False)

    config = get_reconcile_config()

    assert config.probe_concurrency == 2
    assert config.probe_batch_delay == 1.0


def test_reconcile_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITEMSYNC_PROBE_CONCURRENCY", "4")
    monkeypatch.setenv("ITEMSYNC_PROBE_BATCH_DELAY", "0.25")

    config = get_reconcile_config()

    assert config.probe_concurrency == 4
    assert config.probe_batch_delay == 0.25


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("ITEMSYNC_PROBE_CONCURRENCY", "two"),
        ("ITEMSYNC_PROBE_CONCURRENCY", "0"),
        ("ITEMSYNC_PROBE_BATCH_DELAY", "-1"),
    ],
)
def test_reconcile_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_reconcile_config()


def test_feed_config_hint_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITEMSYNC_FEED_A_HINT", "partner-form")
    monkeypatch.delenv("ITEMSYNC_FEED_B_HINT", raising=False)

    tokens = get_feed_config().hint_tokens()

    assert tokens == {"partner-form": Variant.A, "oIygOgih": Variant.B}


def test_probe_config_normalizes_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITEMSYNC_PROBE_BASE_URL", "https://example.test/project")

    config = get_probe_config()

    assert config.base_url == "https://example.test/project/"
    assert config.resilience.ratelimit is not None
    assert config.resilience.retry.total == 2


def test_rate_limit_rejects_non_positive_window() -> None:
    with pytest.raises(ConfigurationError):
        RateLimit(max_calls=2, per_seconds=0)


def test_configure_logging_reads_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITEMSYNC_LOG_LEVEL", "debug")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
