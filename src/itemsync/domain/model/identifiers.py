"""External identifier helpers."""

from __future__ import annotations

import re
from typing import Final

_UUID_PATTERN: Final = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_identifier(value: str | None) -> bool:
    """Return whether ``value`` is an 8-4-4-4-12 hex identifier (no braces, no trimming)."""

    if not value:
        return False
    return _UUID_PATTERN.match(value) is not None
