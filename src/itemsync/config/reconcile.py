"""Defaults for reconciliation runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_PROBE_CONCURRENCY = 2
DEFAULT_PROBE_BATCH_DELAY = 1.0


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    probe_concurrency: int = DEFAULT_PROBE_CONCURRENCY
    probe_batch_delay: float = DEFAULT_PROBE_BATCH_DELAY


def get_reconcile_config() -> ReconcileConfig:
    return ReconcileConfig(
        probe_concurrency=env_int(
            "ITEMSYNC_PROBE_CONCURRENCY",
            DEFAULT_PROBE_CONCURRENCY,
            minimum=1,
        ),
        probe_batch_delay=env_float(
            "ITEMSYNC_PROBE_BATCH_DELAY",
            DEFAULT_PROBE_BATCH_DELAY,
            minimum=0.0,
        ),
    )
