"""HTTP price probe scraping the public project page."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from bs4 import BeautifulSoup

from itemsync.adapters.http_resilience import ResilientClient
from itemsync.config import ProbeConfig, get_probe_config
from itemsync.domain.ports import PriceProbe
from itemsync.domain.pricing import parse_price_text

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from itemsync.config import ResilienceConfig

log = getLogger(__name__)

PRICE_SELECTORS: Final = (
    ".mantine-Text-root.mantine-nzjykg",
    '[class*="mantine-nzjykg"]',
    ".mantine-Text-root",
)


class PriceProbeError(RuntimeError):
    """Raised when the project page cannot be fetched."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def extract_price_from_html(html: str, selectors: tuple[str, ...] = PRICE_SELECTORS) -> float | None:
    """Return the first positive price found under ``selectors``, tried in order."""

    soup = BeautifulSoup(html, "html.parser")
    for selector in selectors:
        for element in soup.select(selector):
            price = parse_price_text(element.get_text(" ", strip=True))
            if price > 0:
                return price
    return None


@dataclass(slots=True)
class HttpPriceProbe:
    """Fetch ``{base_url}{identifier}`` and read the displayed price.

    Use as an async context manager to share one client across probes.
    """

    config: ProbeConfig = field(default_factory=get_probe_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> HttpPriceProbe:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __call__(self, identifier: str) -> float | None:
        if self._client is not None:
            return await self._probe(self._client, identifier)
        async with self.client_factory(self.config.resilience) as client:
            return await self._probe(client, identifier)

    async def _probe(self, client: ResilientClient, identifier: str) -> float | None:
        url = f"{self.config.base_url}{identifier}"
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            raise PriceProbeError(f"Request for {identifier} failed: {exc}") from exc
        if not response.is_success:
            raise PriceProbeError(
                f"Project page for {identifier} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        price = extract_price_from_html(response.text)
        if price is None:
            log.debug("No price element found for %s", identifier)
        return price


if TYPE_CHECKING:
    _probe_check: PriceProbe = HttpPriceProbe()
