from __future__ import annotations

from datetime import UTC, datetime

import pytest

from itemsync.domain.model import CanonicalRecord, ExternalRecord, Variant, is_valid_identifier


def test_identifier_validation_is_case_insensitive_and_strict() -> None:
    assert is_valid_identifier("F31279C6-AFCC-407A-B36D-3949185B2F7B")
    assert not is_valid_identifier(" f31279c6-afcc-407a-b36d-3949185b2f7b")
    assert not is_valid_identifier("f31279c6afcc407ab36d3949185b2f7b")
    assert not is_valid_identifier("")
    assert not is_valid_identifier(None)


def test_canonical_record_rejects_negative_price() -> None:
    with pytest.raises(ValueError, match="invalid price"):
        CanonicalRecord(
            id="req-1",
            display_name="Dupont",
            variant=Variant.B,
            received_date=datetime(2025, 1, 1, tzinfo=UTC),
            price=-1.0,
        )


def test_canonical_record_rejects_malformed_identifier() -> None:
    with pytest.raises(ValueError, match="malformed identifier"):
        CanonicalRecord(
            id="req-1",
            display_name="Dupont",
            variant=Variant.B,
            received_date=datetime(2025, 1, 1, tzinfo=UTC),
            external_identifier="row-12",
        )


def test_external_record_requires_identifier() -> None:
    with pytest.raises(ValueError, match="Malformed external identifier"):
        ExternalRecord(external_identifier="nope", variant=Variant.A)


def test_variant_values() -> None:
    assert Variant.A.value == "pp"
    assert Variant("client") is Variant.B
