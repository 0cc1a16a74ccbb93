"""Price parsing and observation collection."""

from __future__ import annotations

from .aggregate import PriceObservations, collect_price_observations, is_observed_price
from .parse import parse_price_text

__all__ = [
    "PriceObservations",
    "collect_price_observations",
    "is_observed_price",
    "parse_price_text",
]
