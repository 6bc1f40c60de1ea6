"""Flush-time audit stamping for every change queued in an audited session.

``AuditedSession`` carries a ``before_flush`` listener, so each commit (which
always flushes first) stamps pending inserts, updates and deletes exactly as
they are about to be written. ``AsyncSession`` reuses it as its
``sync_session_class`` and therefore shares the same pass.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session

from packages.contacts_shared.envelope import utc_now
from packages.contacts_shared.logging import fields, get_logger, log_context
from resources.substrates.postgres.audit.contracts import Clock
from resources.substrates.postgres.audit.stamping import (
    StampCounts,
    stamp_creation,
    stamp_deletion,
    stamp_modification,
)

AUDIT_CLOCK_KEY = "audit_clock"

_LOGGER = get_logger(__name__)


class AuditedSession(Session):
    """ORM session whose flushes apply audit stamps to pending changes."""


def session_clock(session: Session) -> Clock:
    """Return the clock injected into ``session.info`` or UTC wall-clock."""
    clock = session.info.get(AUDIT_CLOCK_KEY)
    return utc_now if clock is None else clock


def apply_audit_stamps(session: Session) -> StampCounts:
    """Stamp every pending change in ``session`` according to its capabilities.

    Pending deletes of deletion-audited entities are reattached to the session
    so they flush as updates and the row is retained. Running the pass twice
    before one flush only refreshes timestamps.
    """
    clock = session_clock(session)
    counts = StampCounts()

    for entity in list(session.new):
        if stamp_creation(entity, clock):
            counts.inserted += 1

    for entity in list(session.dirty):
        if not session.is_modified(entity):
            continue
        if stamp_modification(entity, clock):
            counts.updated += 1

    for entity in list(session.deleted):
        if not stamp_deletion(entity):
            continue
        stamp_modification(entity, clock)
        # Re-adding a pending delete removes it from the deletion set.
        session.add(entity)
        counts.soft_deleted += 1

    return counts


@event.listens_for(AuditedSession, "before_flush")
def _stamp_before_flush(session: Session, flush_context: Any, instances: Any) -> None:
    """Apply audit stamps right before pending changes are written."""
    del flush_context, instances
    counts = apply_audit_stamps(session)
    if counts.total == 0:
        return
    with log_context(
        {
            fields.EVENT: fields.AUDIT_STAMP_EVENT,
            fields.AUDIT_PATH: "flush",
            fields.INSERTED: counts.inserted,
            fields.UPDATED: counts.updated,
            fields.SOFT_DELETED: counts.soft_deleted,
        }
    ):
        _LOGGER.debug("Applied audit stamps to pending changes")
