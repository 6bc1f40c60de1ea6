"""Pre-migration bootstrap for service schemas."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import text

from packages.contacts_shared.config import ContactsSettings, load_settings
from resources.substrates.postgres.config import resolve_postgres_settings
from resources.substrates.postgres.engine import create_postgres_engine


@dataclass(frozen=True)
class BootstrapResult:
    """Summary of pre-migration bootstrap actions."""

    provisioned_schemas: tuple[str, ...]


def bootstrap_service_schemas(
    schemas: Sequence[str],
    settings: ContactsSettings | None = None,
) -> BootstrapResult:
    """Create every named service schema ahead of Alembic migrations."""
    if len(schemas) == 0:
        raise ValueError("at least one schema is required for bootstrap")
    for schema in schemas:
        if not schema or not schema.replace("_", "").isalnum():
            raise ValueError(f"invalid schema name: {schema!r}")

    resolved_settings = load_settings() if settings is None else settings
    engine = create_postgres_engine(resolve_postgres_settings(resolved_settings))
    try:
        with engine.begin() as connection:
            for schema in schemas:
                connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
    finally:
        engine.dispose()

    return BootstrapResult(provisioned_schemas=tuple(schemas))
