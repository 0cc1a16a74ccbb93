from __future__ import annotations

from typing import TYPE_CHECKING

from itemsync.config import get_database_config, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_storage_config_uses_env_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ITEMSYNC_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.requests_path() == (tmp_path / "data" / "requests.json").resolve()
    assert (tmp_path / "data").is_dir()


def test_database_config_prefers_uri_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"

    monkeypatch.delenv("DATABASE_URI")
    monkeypatch.setenv("ITEMSYNC_DATA_DIR", str(tmp_path))

    assert get_database_config().uri.endswith("itemsync.db")


def test_requests_json_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ITEMSYNC_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ITEMSYNC_REQUESTS_JSON", str(tmp_path / "webapp" / "requests.json"))

    config = get_storage_config()

    assert config.requests_path() == (tmp_path / "webapp" / "requests.json").resolve()
    assert config.database_path(ensure=False).name == "itemsync.db"
