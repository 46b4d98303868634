"""SQLAlchemy engine, session factory and transaction scope.

One engine per database URL per process. SQLite URLs (used for local runs and
tests) get ``check_same_thread=False`` so sessions can be opened from any
worker thread of the caller.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ...exceptions import StoreError
from ...observability import get_logger
from .models import Base

logger = get_logger("job_match_analysis.infrastructure.db")

_lock = threading.Lock()
_engines: dict[str, Engine] = {}


def build_engine(database_url: str) -> Engine:
    """Return the process-wide engine for ``database_url``, creating it on first call."""
    engine = _engines.get(database_url)
    if engine is None:
        with _lock:
            engine = _engines.get(database_url)
            if engine is None:
                engine = _create_engine(database_url)
                _engines[database_url] = engine
    return engine


def _create_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory whose objects stay readable after commit."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(engine)


@contextmanager
def transaction(factory: sessionmaker[Session], operation: str) -> Iterator[Session]:
    """Open a session and commit on exit, rolling back on any error.

    Raises:
        StoreError: If SQLAlchemy fails anywhere inside the block.
    """
    try:
        with factory() as session, session.begin():
            yield session
    except SQLAlchemyError as exc:
        logger.error("Store %s failed: %s", operation, exc)
        raise StoreError(operation, str(exc)) from exc
