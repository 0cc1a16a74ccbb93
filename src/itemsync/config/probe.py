"""Price probe configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig

PROBE_BASE_URL = "https://plum-living.com/fr/project/"
PROBE_TIMEOUT_SECONDS = 30.0
PROBE_USER_AGENT = "Mozilla/5.0 (compatible; itemsync/1.0)"


@dataclass(frozen=True)
class ProbeConfig:
    """Holds price probe configuration values."""

    base_url: str
    resilience: ResilienceConfig


def get_probe_config(*, resilience: ResilienceConfig | None = None) -> ProbeConfig:
    base_url = optional_env_var("ITEMSYNC_PROBE_BASE_URL") or PROBE_BASE_URL
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"
    return ProbeConfig(
        base_url=base_url,
        resilience=resilience
        or ResilienceConfig(
            name="price-probe",
            timeout_seconds=PROBE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            default_headers={
                "User-Agent": PROBE_USER_AGENT,
                "Accept": "text/html,application/xhtml+xml",
                "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.8",
            },
        ),
    )
