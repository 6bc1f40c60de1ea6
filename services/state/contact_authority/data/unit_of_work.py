"""Transactional unit-of-work wrapper for CAS-owned DB operations."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.orm import Session

from services.state.contact_authority.data.runtime import ContactPostgresRuntime

T = TypeVar("T")


class ContactDataUnitOfWork:
    """Execute CAS persistence work inside one schema-scoped transaction.

    The transaction commits when the callback returns and rolls back when it
    raises. Commit flushes through the audited session, so every change made
    inside ``fn`` is stamped before it is written.
    """

    def __init__(self, runtime: ContactPostgresRuntime) -> None:
        self._runtime = runtime

    def run(self, fn: Callable[[Session], T]) -> T:
        """Run one callback in a schema-scoped transaction with session access."""
        with self._runtime.schema_sessions.session() as session:
            return fn(session)

    def is_healthy(self) -> bool:
        """Return backing store reachability."""
        return self._runtime.is_healthy()
