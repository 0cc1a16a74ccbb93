"""Engine lifecycle and unit of work for the SQLite canonical record store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from itemsync.config import get_database_config
from itemsync.domain.ports import CanonicalRecordRepositories

from .mappings import create_all_tables
from .repositories import SqlAlchemyCanonicalRecordRepository

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from itemsync.domain.ports import CanonicalRecordUnitOfWork

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the record store is used before :func:`startup` or started twice."""


@dataclass(slots=True)
class _StoreEngine:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            None if engine is None else sessionmaker(bind=engine, expire_on_commit=False)
        )

    def open_session(self) -> Session:
        if self.sessions is None:
            raise StartupError(
                "Record store is not started; call "
                "itemsync.adapters.sqlalchemy.startup() first"
            )
        return self.sessions()


_STORE = _StoreEngine()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Bind the store to ``engine`` (or a new one for ``database_uri``) and create tables."""

    if _STORE.engine is not None and not force:
        raise StartupError("Record store already started; pass force=True to rebind")
    if engine is None:
        uri = database_uri or get_database_config().uri
        log.info("Opening record store at %s", uri)
        engine = create_engine(uri)
    create_all_tables(engine)
    _STORE.bind(engine)
    return engine


def is_started() -> bool:
    return _STORE.engine is not None


def shutdown() -> None:
    if _STORE.engine is not None:
        _STORE.engine.dispose()
    _STORE.bind(None)


class SqlAlchemyUnitOfWork:
    """One session per reconciliation run; uncommitted changes are rolled back on exit."""

    def __init__(self) -> None:
        self._session: Session | None = None
        self._repositories: CanonicalRecordRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already active")
        self._session = _STORE.open_session()
        self._repositories = CanonicalRecordRepositories(
            records=SqlAlchemyCanonicalRecordRepository(self._session)
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self._active_session()
        self._session = None
        self._repositories = None
        try:
            if exc_type is not None:
                log.warning("Rolling back record store changes after %s", exc_type.__name__)
                session.rollback()
        finally:
            session.close()
        return False

    @property
    def repositories(self) -> CanonicalRecordRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active")
        return self._repositories

    def commit(self) -> None:
        self._active_session().commit()

    def rollback(self) -> None:
        self._active_session().rollback()

    def _active_session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active")
        return self._session


if TYPE_CHECKING:
    _uow_check: CanonicalRecordUnitOfWork = SqlAlchemyUnitOfWork()
