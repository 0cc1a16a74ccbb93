"""Builders and fakes shared by reconciliation tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Literal

from itemsync.domain.model import CanonicalRecord, ExternalRecord, Variant
from itemsync.domain.ports import CanonicalRecordRepositories

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from types import TracebackType

IDENTIFIER_1 = "f31279c6-afcc-407a-b36d-3949185b2f7b"
IDENTIFIER_2 = "0b9e1c52-3f4a-4d8e-9a61-2c7d5e8f1a03"
IDENTIFIER_3 = "7d2a4f10-8c3e-4b5a-a9d7-1e6f3b2c4d58"


def make_record(
    record_id: str = "req-1",
    *,
    name: str = "Deschamps",
    variant: Variant = Variant.A,
    received: datetime | None = None,
    price: float = 0.0,
    identifier: str | None = None,
    contact: str | None = None,
) -> CanonicalRecord:
    return CanonicalRecord(
        id=record_id,
        display_name=name,
        variant=variant,
        received_date=received or datetime(2025, 11, 22, 10, 0, tzinfo=UTC),
        status="Backlog",
        price=price,
        external_identifier=identifier,
        contact_handle=contact,
    )


def make_external(
    identifier: str = IDENTIFIER_1,
    *,
    name: str | None = "Deschamps",
    variant: Variant = Variant.A,
    submitted: date | None = date(2025, 11, 22),
    contact: str | None = None,
    price: float | None = None,
) -> ExternalRecord:
    return ExternalRecord(
        external_identifier=identifier,
        variant=variant,
        display_name=name,
        submission_date=submitted,
        contact_handle=contact,
        price=price,
    )


@dataclass(slots=True)
class FakePriceProbe:
    """Probe returning canned prices; identifiers listed in ``failing`` raise."""

    prices: Mapping[str, float | None] = field(default_factory=dict[str, float | None])
    failing: frozenset[str] = frozenset()
    calls: list[str] = field(default_factory=list[str])

    async def __call__(self, identifier: str) -> float | None:
        self.calls.append(identifier)
        if identifier in self.failing:
            raise TimeoutError(f"probe timed out for {identifier}")
        return self.prices.get(identifier)


class InMemoryRecordRepository:
    def __init__(self, records: Sequence[CanonicalRecord] = ()) -> None:
        self.records = list(records)
        self.replaced: list[list[CanonicalRecord]] = []

    def read_all(self) -> list[CanonicalRecord]:
        return list(self.records)

    def replace_all(self, records: Sequence[CanonicalRecord]) -> None:
        self.replaced.append(list(records))


class InMemoryUnitOfWork:
    def __init__(self, repository: InMemoryRecordRepository) -> None:
        self.repository = repository
        self.committed = False
        self.rolled_back = False

    @property
    def repositories(self) -> CanonicalRecordRepositories:
        return CanonicalRecordRepositories(records=self.repository)

    def __enter__(self) -> InMemoryUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.committed = True
        self.repository.records = list(self.repository.replaced[-1])

    def rollback(self) -> None:
        self.rolled_back = True
