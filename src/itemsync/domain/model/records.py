"""Work item records: the persisted canonical shape and the per-run feed shape."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .identifiers import is_valid_identifier

if TYPE_CHECKING:
    from datetime import date, datetime

    from .enums import Variant


@dataclass(slots=True, kw_only=True)
class CanonicalRecord:
    """A persisted work item.

    ``status`` is kept exactly as the store provides it. ``price`` uses 0 for
    "unknown". ``extra`` carries store fields this package does not interpret so
    they survive a read/replace round-trip untouched.
    """

    id: str
    display_name: str
    variant: Variant
    received_date: datetime
    status: str = ""
    price: float = 0.0
    external_identifier: str | None = None
    assignment: str | None = None
    number: int | None = None
    contact_handle: str | None = None
    extra: dict[str, object] = field(default_factory=dict[str, object])

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Canonical record id must not be empty")
        if not math.isfinite(self.price) or self.price < 0:
            raise ValueError(f"Canonical record {self.id} has invalid price {self.price!r}")
        if self.external_identifier is not None and not is_valid_identifier(
            self.external_identifier
        ):
            raise ValueError(
                f"Canonical record {self.id} has malformed identifier "
                f"{self.external_identifier!r}"
            )


@dataclass(slots=True, frozen=True, kw_only=True)
class ExternalRecord:
    """One feed row carrying a valid identifier, rebuilt on every run."""

    external_identifier: str
    variant: Variant
    price: float | None = None
    contact_handle: str | None = None
    submission_date: date | None = None
    display_name: str | None = None
    fields: dict[str, str] = field(default_factory=dict[str, str])

    def __post_init__(self) -> None:
        if not is_valid_identifier(self.external_identifier):
            raise ValueError(f"Malformed external identifier {self.external_identifier!r}")
