"""Identity resolution, merging and run reporting."""

from __future__ import annotations

from .contracts import IdentifierChange, Match, MatchResult, MergeResult, PriceChange
from .merge import merge_records
from .normalize import contact_tokens, name_resembles_token, normalize_name
from .report import RunReport, build_run_report
from .resolve import resolve_identities

__all__ = [
    "IdentifierChange",
    "Match",
    "MatchResult",
    "MergeResult",
    "PriceChange",
    "RunReport",
    "build_run_report",
    "contact_tokens",
    "merge_records",
    "name_resembles_token",
    "normalize_name",
    "resolve_identities",
]
