from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from itemsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from itemsync.adapters.pricing import HttpPriceProbe, PriceProbeError, extract_price_from_html
from itemsync.config import ProbeConfig
from tests.helpers.records import IDENTIFIER_1

PAGE = """
<html><body>
  <div class="mantine-Text-root mantine-other">Livraison offerte</div>
  <p class="mantine-Text-root mantine-nzjykg">5 938 €</p>
</body></html>
"""


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def _probe(handler: Callable[[httpx.Request], httpx.Response]) -> HttpPriceProbe:
    config = ProbeConfig(
        base_url="https://example.test/project/",
        resilience=ResilienceConfig(name="test-probe"),
    )
    return HttpPriceProbe(config=config, client_factory=_make_client_factory(handler))


def test_extract_price_prefers_specific_selector() -> None:
    assert extract_price_from_html(PAGE) == 5938.0


def test_extract_price_falls_back_to_generic_selector() -> None:
    html = '<span class="mantine-Text-root">Total</span><span class="mantine-Text-root">1.234,56 €</span>'

    assert extract_price_from_html(html) == 1235.0


def test_extract_price_returns_none_without_price() -> None:
    assert extract_price_from_html("<html><body><p>Projet introuvable</p></body></html>") is None


def test_probe_fetches_project_page() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text=PAGE)

    probe = _probe(handler)

    price = asyncio.run(probe(IDENTIFIER_1))

    assert price == 5938.0
    assert requested == [f"https://example.test/project/{IDENTIFIER_1}"]


def test_probe_shares_client_inside_context() -> None:
    created: list[ResilientClient] = []
    inner = _make_client_factory(lambda _request: httpx.Response(200, text=PAGE))

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = inner(resilience)
        created.append(client)
        return client

    config = ProbeConfig(base_url="https://example.test/p/", resilience=ResilienceConfig(name="t"))
    probe = HttpPriceProbe(config=config, client_factory=factory)

    async def probe_twice() -> list[float | None]:
        async with probe:
            return [await probe(IDENTIFIER_1), await probe(IDENTIFIER_1)]

    assert asyncio.run(probe_twice()) == [5938.0, 5938.0]
    assert len(created) == 1


def test_probe_raises_on_error_status() -> None:
    probe = _probe(lambda _request: httpx.Response(404, text="not found"))

    with pytest.raises(PriceProbeError) as exc:
        asyncio.run(probe(IDENTIFIER_1))

    assert exc.value.status_code == 404


def test_probe_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PriceProbeError, match="connection refused"):
        asyncio.run(_probe(handler)(IDENTIFIER_1))
