"""Feed variant and multi-value detection.

Both detectors are ordered tables of ``(predicate, result)`` pairs evaluated
top to bottom; the first matching predicate decides.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Final

from itemsync.domain.model import Variant

type Header = Sequence[str]
type Row = Sequence[str]

type VariantPredicate = Callable[[Header, str | None, Mapping[str, Variant]], Variant | None]
type MultiValuePredicate = Callable[[Row], bool]

DEFAULT_SOURCE_HINTS: Final[Mapping[str, Variant]] = {
    "a25xCDxH": Variant.A,
    "oIygOgih": Variant.B,
}

WIDE_COLUMN_COUNT: Final = 50
NARROW_COLUMN_COUNT: Final = 30
PROJECT_HEADER: Final = "project"
PROJECT_COLUMN: Final[Mapping[Variant, int]] = {Variant.A: 45, Variant.B: 22}

_MULTI_VALUE_SEPARATORS: Final = (",", ";")


def _hint_rule(header: Header, source_hint: str | None, hints: Mapping[str, Variant]) -> Variant | None:
    if not source_hint:
        return None
    for token, variant in hints.items():
        if token and token in source_hint:
            return variant
    return None


def _width_rule(header: Header, source_hint: str | None, hints: Mapping[str, Variant]) -> Variant | None:
    count = len(header)
    if count >= WIDE_COLUMN_COUNT:
        return Variant.A
    if count >= NARROW_COLUMN_COUNT:
        return Variant.B
    return None


def _project_header_rule(
    header: Header, source_hint: str | None, hints: Mapping[str, Variant]
) -> Variant | None:
    for variant in (Variant.A, Variant.B):
        index = PROJECT_COLUMN[variant]
        if index < len(header) and header[index].strip().lower() == PROJECT_HEADER:
            return variant
    return None


def _fallback_rule(header: Header, source_hint: str | None, hints: Mapping[str, Variant]) -> Variant:
    return Variant.B if len(header) < WIDE_COLUMN_COUNT else Variant.A


VARIANT_RULES: Final[tuple[VariantPredicate, ...]] = (
    _hint_rule,
    _width_rule,
    _project_header_rule,
    _fallback_rule,
)


def detect_variant(
    header: Header,
    *,
    source_hint: str | None = None,
    hints: Mapping[str, Variant] = DEFAULT_SOURCE_HINTS,
) -> Variant:
    """Classify a feed from its header row and an optional source hint (e.g. a filename)."""

    for rule in VARIANT_RULES:
        variant = rule(header, source_hint, hints)
        if variant is not None:
            return variant
    return _fallback_rule(header, source_hint, hints)


def _cell(row: Row, index: int) -> str:
    return row[index] if index < len(row) else ""


def _has_separator(value: str) -> bool:
    return any(separator in value for separator in _MULTI_VALUE_SEPARATORS)


MULTI_VALUE_RULES: Final[Mapping[Variant, tuple[MultiValuePredicate, ...]]] = {
    Variant.A: (
        lambda row: _has_separator(_cell(row, 2)),
        lambda row: _has_separator(_cell(row, 3)),
        lambda row: "bicolor" in _cell(row, 2).lower(),
    ),
    Variant.B: (
        lambda row: _has_separator(_cell(row, 3)),
        lambda row: len(_cell(row, 3).split()) > 1,
    ),
}


def detect_multi_value(row: Row, variant: Variant) -> bool:
    """Return whether ``row`` answers the colour questions with more than one value."""

    return any(rule(row) for rule in MULTI_VALUE_RULES[variant])
