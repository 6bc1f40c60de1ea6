"""Audit capability contracts, flush-time interceptor, and bulk variants."""

from resources.substrates.postgres.audit.bulk import (
    bulk_delete,
    bulk_delete_async,
    bulk_insert,
    bulk_insert_async,
    bulk_update,
    bulk_update_async,
)
from resources.substrates.postgres.audit.contracts import (
    Clock,
    CreationAudited,
    DeletionAudited,
    ModificationAudited,
)
from resources.substrates.postgres.audit.interceptor import (
    AUDIT_CLOCK_KEY,
    AuditedSession,
    apply_audit_stamps,
    session_clock,
)
from resources.substrates.postgres.audit.stamping import StampCounts

__all__ = [
    "AUDIT_CLOCK_KEY",
    "AuditedSession",
    "Clock",
    "CreationAudited",
    "DeletionAudited",
    "ModificationAudited",
    "StampCounts",
    "apply_audit_stamps",
    "bulk_delete",
    "bulk_delete_async",
    "bulk_insert",
    "bulk_insert_async",
    "bulk_update",
    "bulk_update_async",
    "session_clock",
]
