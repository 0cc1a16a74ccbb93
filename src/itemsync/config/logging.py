"""Logging setup for the itemsync command line."""

from __future__ import annotations

import logging

from .env import optional_env_var

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# per-request INFO lines from these would drown the run summary
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    ``level`` defaults to ``ITEMSYNC_LOG_LEVEL`` (a level name) or INFO. Pass
    ``force=True`` to replace handlers installed earlier, e.g. in tests.
    """

    if level is None:
        name = (optional_env_var("ITEMSYNC_LOG_LEVEL") or "INFO").upper()
        level = logging.getLevelNamesMapping().get(name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
