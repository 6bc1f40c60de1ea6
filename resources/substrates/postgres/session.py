"""Session lifecycle helpers for shared Postgres substrate access."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, sessionmaker

from resources.substrates.postgres.audit import AUDIT_CLOCK_KEY, AuditedSession, Clock


def create_session_factory(
    engine: Engine, *, clock: Clock | None = None
) -> sessionmaker[Session]:
    """Create an audited session factory bound to ``engine``."""
    return sessionmaker(
        bind=engine,
        class_=AuditedSession,
        autoflush=False,
        expire_on_commit=False,
        info=_audit_info(clock),
    )


def create_async_session_factory(
    engine: AsyncEngine, *, clock: Clock | None = None
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory sharing the audited flush behavior."""
    return async_sessionmaker(
        bind=engine,
        sync_session_class=AuditedSession,
        autoflush=False,
        expire_on_commit=False,
        info=_audit_info(clock),
    )


@contextmanager
def transactional_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a session and enforce commit/rollback semantics."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _audit_info(clock: Clock | None) -> dict[str, object]:
    return {} if clock is None else {AUDIT_CLOCK_KEY: clock}
