"""File-backed canonical record store over ``requests.json``."""

from __future__ import annotations

import json
import os
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import ValidationError

from itemsync.config import get_storage_config
from itemsync.domain.errors import ReconciliationError
from itemsync.domain.ports import (
    CanonicalRecordRepositories,
    CanonicalRecordRepository,
    CanonicalRecordUnitOfWork,
)

from .schema import REQUEST_LIST_ADAPTER
from .translator import parse_request, serialize_request

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from itemsync.domain.model import CanonicalRecord

log = getLogger(__name__)


class RequestStoreError(ReconciliationError):
    """The request document exists but cannot be read."""


class JsonRequestRepository:
    """Reads the whole document eagerly; writes are staged until :meth:`flush`."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._staged: list[CanonicalRecord] | None = None

    def read_all(self) -> list[CanonicalRecord]:
        if self._staged is not None:
            return list(self._staged)
        if not self.path.exists():
            log.info("No request document at %s; starting empty", self.path)
            return []
        try:
            payloads = REQUEST_LIST_ADAPTER.validate_json(self.path.read_bytes())
        except ValidationError as exc:
            raise RequestStoreError(f"Invalid request document {self.path}: {exc}") from exc
        return [parse_request(payload) for payload in payloads]

    def replace_all(self, records: Sequence[CanonicalRecord]) -> None:
        self._staged = list(records)

    @property
    def has_pending_changes(self) -> bool:
        return self._staged is not None

    def flush(self) -> None:
        if self._staged is None:
            return
        document = [serialize_request(record) for record in self._staged]
        _write_atomically(self.path, json.dumps(document, indent=2, ensure_ascii=False) + "\n")
        log.info("Wrote %d request(s) to %s", len(document), self.path)
        self._staged = None

    def discard(self) -> None:
        self._staged = None


def _write_atomically(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        Path(temp_name).replace(path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


class JsonUnitOfWork:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_storage_config().requests_path()
        self._repositories: CanonicalRecordRepositories | None = None
        self._repository: JsonRequestRepository | None = None

    def __enter__(self) -> JsonUnitOfWork:
        self._repository = JsonRequestRepository(self.path)
        self._repositories = CanonicalRecordRepositories(records=self._repository)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None or (self._repository and self._repository.has_pending_changes):
            self.rollback()
        self._repositories = None
        self._repository = None
        return False

    @property
    def repositories(self) -> CanonicalRecordRepositories:
        if self._repositories is None:
            raise RuntimeError("Unit of work is not active")
        return self._repositories

    def commit(self) -> None:
        if self._repository is None:
            raise RuntimeError("Unit of work is not active")
        self._repository.flush()

    def rollback(self) -> None:
        if self._repository is not None:
            self._repository.discard()


if TYPE_CHECKING:
    _repository_check: CanonicalRecordRepository = JsonRequestRepository(Path("requests.json"))
    _uow_check: CanonicalRecordUnitOfWork = JsonUnitOfWork()
