"""Ports for observing current prices."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PriceProbe(Protocol):
    """Async callable returning the current price for an external identifier.

    ``None`` (or a non-positive value) means no price could be observed.
    Implementations may raise; callers treat that as a failed observation.
    """

    async def __call__(self, identifier: str) -> float | None: ...


__all__ = ["PriceProbe"]
