"""CAS-owned Postgres runtime wiring.

This module composes shared Postgres substrate primitives into a service-local
runtime that enforces CAS schema scoping via ``search_path`` and audited
sessions for every unit of work.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from packages.contacts_shared.config import ContactsSettings
from resources.substrates.postgres import (
    ServiceSchemaSessionProvider,
    create_postgres_engine,
    create_session_factory,
    ping,
    resolve_postgres_settings,
)
from resources.substrates.postgres.audit import Clock
from services.state.contact_authority.component import SERVICE_COMPONENT_ID


@dataclass(frozen=True)
class ContactPostgresRuntime:
    """Concrete CAS-owned handle for schema-scoped Postgres access."""

    engine: Engine
    session_factory: sessionmaker[Session]
    schema_sessions: ServiceSchemaSessionProvider
    health_timeout_seconds: float = 1.0

    @classmethod
    def from_settings(
        cls, settings: ContactsSettings, *, clock: Clock | None = None
    ) -> "ContactPostgresRuntime":
        """Build CAS DB runtime from typed root settings."""
        postgres_settings = resolve_postgres_settings(settings)
        return cls.for_engine(
            create_postgres_engine(postgres_settings),
            clock=clock,
            health_timeout_seconds=postgres_settings.health_timeout_seconds,
        )

    @classmethod
    def for_engine(
        cls,
        engine: Engine,
        *,
        clock: Clock | None = None,
        health_timeout_seconds: float = 1.0,
    ) -> "ContactPostgresRuntime":
        """Build CAS DB runtime over an existing engine."""
        session_factory = create_session_factory(engine, clock=clock)
        return cls(
            engine=engine,
            session_factory=session_factory,
            schema_sessions=ServiceSchemaSessionProvider(
                session_factory=session_factory,
                schema=contact_postgres_schema(),
            ),
            health_timeout_seconds=health_timeout_seconds,
        )

    def is_healthy(self) -> bool:
        """Return ``True`` when the backing database connection is reachable."""
        return ping(self.engine, timeout_seconds=self.health_timeout_seconds)


def contact_postgres_schema() -> str:
    """Resolve canonical CAS schema name from component identity."""
    return SERVICE_COMPONENT_ID
