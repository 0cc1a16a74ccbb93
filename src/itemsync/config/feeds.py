"""Feed detection settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from itemsync.domain.model import Variant

from .env import optional_env_var

DEFAULT_VARIANT_A_HINT: Final[str] = "a25xCDxH"
DEFAULT_VARIANT_B_HINT: Final[str] = "oIygOgih"


@dataclass(frozen=True, slots=True)
class FeedConfig:
    """Source-hint tokens (usually form ids embedded in export filenames)."""

    variant_a_hint: str = DEFAULT_VARIANT_A_HINT
    variant_b_hint: str = DEFAULT_VARIANT_B_HINT

    def hint_tokens(self) -> dict[str, Variant]:
        return {self.variant_a_hint: Variant.A, self.variant_b_hint: Variant.B}


def get_feed_config() -> FeedConfig:
    return FeedConfig(
        variant_a_hint=optional_env_var("ITEMSYNC_FEED_A_HINT") or DEFAULT_VARIANT_A_HINT,
        variant_b_hint=optional_env_var("ITEMSYNC_FEED_B_HINT") or DEFAULT_VARIANT_B_HINT,
    )
