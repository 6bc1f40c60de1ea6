"""Shared fixtures for Postgres substrate audit tests.

The audit tests run the real SQLAlchemy unit of work against a file-backed
SQLite database so flush events and bulk statements behave as in production.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.postgres.session import create_session_factory
from resources.substrates.postgres.tests.audit_models import AuditTestBase, TickingClock


@pytest.fixture()
def clock() -> TickingClock:
    """Return a fresh deterministic clock."""
    return TickingClock()


@pytest.fixture()
def sqlite_path(tmp_path: Path) -> Path:
    """Return a file-backed SQLite database path unique to one test."""
    return tmp_path / "audit.db"


@pytest.fixture()
def audited_session_factory(
    sqlite_path: Path, clock: TickingClock
) -> Generator[sessionmaker[Session], None, None]:
    """Provide an audited session factory over a fresh schema."""
    engine = create_engine(f"sqlite:///{sqlite_path}")
    AuditTestBase.metadata.create_all(engine)
    yield create_session_factory(engine, clock=clock)
    engine.dispose()
