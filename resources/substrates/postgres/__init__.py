"""Shared Postgres substrate primitives for contacts services."""

from resources.substrates.postgres.audit import (
    AUDIT_CLOCK_KEY,
    AuditedSession,
    CreationAudited,
    DeletionAudited,
    ModificationAudited,
    apply_audit_stamps,
    bulk_delete,
    bulk_delete_async,
    bulk_insert,
    bulk_insert_async,
    bulk_update,
    bulk_update_async,
)
from resources.substrates.postgres.bootstrap import bootstrap_service_schemas
from resources.substrates.postgres.config import (
    RESOURCE_COMPONENT_ID,
    PostgresSettings,
    resolve_postgres_settings,
)
from resources.substrates.postgres.engine import (
    create_async_postgres_engine,
    create_postgres_engine,
)
from resources.substrates.postgres.errors import normalize_postgres_error
from resources.substrates.postgres.health import ping
from resources.substrates.postgres.schema_session import ServiceSchemaSessionProvider
from resources.substrates.postgres.session import (
    create_async_session_factory,
    create_session_factory,
    transactional_session,
)

__all__ = [
    "AUDIT_CLOCK_KEY",
    "AuditedSession",
    "CreationAudited",
    "DeletionAudited",
    "ModificationAudited",
    "PostgresSettings",
    "RESOURCE_COMPONENT_ID",
    "ServiceSchemaSessionProvider",
    "apply_audit_stamps",
    "bootstrap_service_schemas",
    "bulk_delete",
    "bulk_delete_async",
    "bulk_insert",
    "bulk_insert_async",
    "bulk_update",
    "bulk_update_async",
    "create_async_postgres_engine",
    "create_async_session_factory",
    "create_postgres_engine",
    "create_session_factory",
    "normalize_postgres_error",
    "ping",
    "resolve_postgres_settings",
    "transactional_session",
]
