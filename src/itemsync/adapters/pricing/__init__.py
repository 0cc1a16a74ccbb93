"""Price probe adapters."""

from __future__ import annotations

from .client import HttpPriceProbe, PriceProbeError, extract_price_from_html

__all__ = ["HttpPriceProbe", "PriceProbeError", "extract_price_from_html"]
