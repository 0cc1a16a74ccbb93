"""Locations of the request document and the SQLite store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "itemsync"
DEFAULT_DB_FILENAME: Final[str] = "itemsync.db"
REQUESTS_JSON_FILENAME: Final[str] = "requests.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory plus the two store files kept inside it.

    ``requests_file`` overrides the document location when the request list is
    owned by another application.
    """

    data_dir: Path
    requests_file: Path | None = None

    def _base(self, *, ensure: bool) -> Path:
        base = self.data_dir.expanduser().resolve()
        if ensure:
            base.mkdir(parents=True, exist_ok=True)
        return base

    def requests_path(self, *, ensure: bool = True) -> Path:
        if self.requests_file is not None:
            return self.requests_file.expanduser().resolve()
        return self._base(ensure=ensure) / REQUESTS_JSON_FILENAME

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._base(ensure=ensure) / DEFAULT_DB_FILENAME

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var("ITEMSYNC_DATA_DIR")
    requests_file = optional_env_var("ITEMSYNC_REQUESTS_JSON")
    return StorageConfig(
        data_dir=Path(data_dir) if data_dir else _platform_data_home() / APP_DIR_NAME,
        requests_file=Path(requests_file) if requests_file else None,
    )


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
