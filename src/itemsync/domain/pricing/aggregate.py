"""Bounded-concurrency collection of price observations from a probe."""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from itemsync.domain.ports import PriceProbe

log = getLogger(__name__)


@dataclass(slots=True)
class PriceObservations:
    """Positive prices observed during one run, keyed by external identifier.

    An identifier without an entry had no successful observation.
    """

    prices: dict[str, float] = field(default_factory=dict[str, float])
    attempted: int = 0
    succeeded: int = 0

    def get(self, identifier: str) -> float | None:
        return self.prices.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.prices

    def __iter__(self) -> Iterator[str]:
        return iter(self.prices)

    def __len__(self) -> int:
        return len(self.prices)


def is_observed_price(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


async def collect_price_observations(
    identifiers: Iterable[str],
    probe: PriceProbe,
    *,
    concurrency: int = 2,
    batch_delay: float = 1.0,
    prior_prices: Mapping[str, float] | None = None,
    prefer_prior: bool = False,
) -> PriceObservations:
    """Probe ``identifiers`` in sequential batches of ``concurrency``.

    All probes of a batch run concurrently and the next batch starts only once
    every probe of the current one has finished, after ``batch_delay`` seconds.
    A failing probe is logged and counts as no observation. With
    ``prefer_prior`` set, identifiers that already have a positive prior price
    are not probed and keep that price.
    """

    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    observations = PriceObservations()
    pending: list[str] = []
    for identifier in dict.fromkeys(identifiers):
        prior = (prior_prices or {}).get(identifier)
        if prefer_prior and is_observed_price(prior):
            observations.prices[identifier] = float(prior)  # type: ignore[arg-type]
            continue
        pending.append(identifier)

    batches = [pending[start : start + concurrency] for start in range(0, len(pending), concurrency)]
    for number, batch in enumerate(batches, start=1):
        log.debug("Probing batch %d/%d: %s", number, len(batches), ", ".join(batch))
        results = await asyncio.gather(*(_observe(probe, identifier) for identifier in batch))
        observations.attempted += len(batch)
        for identifier, price in results:
            if price is None:
                continue
            observations.prices[identifier] = price
            observations.succeeded += 1
        if number < len(batches) and batch_delay > 0:
            await asyncio.sleep(batch_delay)

    log.info(
        "Collected %d price observations (%d probed, %d succeeded)",
        len(observations),
        observations.attempted,
        observations.succeeded,
    )
    return observations


async def _observe(probe: PriceProbe, identifier: str) -> tuple[str, float | None]:
    try:
        price = await probe(identifier)
    except Exception as exc:  # noqa: BLE001
        log.warning("Price probe failed for %s: %s", identifier, exc)
        return identifier, None
    if not is_observed_price(price):
        log.warning("Price probe returned no usable price for %s: %r", identifier, price)
        return identifier, None
    return identifier, float(price)  # type: ignore[arg-type]
