"""Rate-limited, retrying ``httpx`` client shared by outbound adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import RetryTransport

from itemsync.config.http_resilience import ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

__all__ = ["ResilienceConfig", "ResilientClient"]

log = getLogger(__name__)


class ResilientClient:
    """``httpx.AsyncClient`` behind an optional rate limiter and a retrying transport.

    The limiter caps how many requests start per window, across every task
    sharing the client. Retries are handled by the transport and count as one
    request for the limiter.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        ratelimit = config.ratelimit
        self._limiter = (
            AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds) if ratelimit else None
        )
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            headers=dict(config.default_headers or {}),
            timeout=config.timeout_seconds,
            transport=RetryTransport(retry=config.retry.build()),
            follow_redirects=True,
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, *, params: Mapping[str, str] | None = None) -> httpx.Response:
        if self._limiter is None:
            response = await self._client.get(url, params=params)
        else:
            async with self._limiter:
                response = await self._client.get(url, params=params)
        log.debug(
            "[%s] GET %s -> %d", self.config.name, response.request.url, response.status_code
        )
        return response
