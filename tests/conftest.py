"""Pytest fixtures shared across the suite.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket
from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy.orm import Session, sessionmaker

from job_match_analysis.infrastructure.db import (
    build_engine,
    build_session_factory,
    create_schema,
)
from tests.fakes import InMemoryFileSystem
from tests.support.builders import MutableClock
from tests.support.errors import NetworkIsolationError
from tests.support.harness import EngineHarness

# =============================================================================
# Network Isolation - Block all socket connections in tests
# =============================================================================


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    """Raise an error if any test tries to make a real network connection."""
    _ = (self, kwargs)
    raise NetworkIsolationError(str(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Block all network access in tests.

    Tests that need HTTP should use FakeScoringOracle or a MagicMock
    standing in for ``requests.Session``.
    """
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)
    yield


@pytest.fixture
def in_memory_fs() -> InMemoryFileSystem:
    """Provide an in-memory filesystem for tests."""
    return InMemoryFileSystem()


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def harness(clock: MutableClock) -> EngineHarness:
    """Engine dependencies backed by in-memory fakes, with two jobs for user-1."""
    harness = EngineHarness(clock=clock)
    harness.add_job("job-1", title="Backend Engineer", company="Acme")
    harness.add_job("job-2", title="Data Engineer", company="Globex")
    return harness


@pytest.fixture
def session_factory(tmp_path: Path) -> sessionmaker[Session]:
    """Session factory over a fresh SQLite database in ``tmp_path``."""
    engine = build_engine(f"sqlite:///{tmp_path / 'analyses.sqlite3'}")
    create_schema(engine)
    return build_session_factory(engine)
