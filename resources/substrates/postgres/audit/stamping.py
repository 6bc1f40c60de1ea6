"""Capability stamping primitives shared by the interceptor and bulk paths."""

from __future__ import annotations

from dataclasses import dataclass

from resources.substrates.postgres.audit.contracts import (
    Clock,
    CreationAudited,
    DeletionAudited,
    ModificationAudited,
)


@dataclass
class StampCounts:
    """Number of records stamped per capability in one pass."""

    inserted: int = 0
    updated: int = 0
    soft_deleted: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.soft_deleted


def stamp_creation(entity: object, clock: Clock) -> bool:
    """Set ``created_time`` when ``entity`` is creation-audited."""
    if not isinstance(entity, CreationAudited):
        return False
    entity.created_time = clock()
    return True


def stamp_modification(entity: object, clock: Clock) -> bool:
    """Set ``modified_time`` when ``entity`` is modification-audited."""
    if not isinstance(entity, ModificationAudited):
        return False
    entity.modified_time = clock()
    return True


def stamp_deletion(entity: object) -> bool:
    """Flag ``entity`` as deleted when it is deletion-audited."""
    if not isinstance(entity, DeletionAudited):
        return False
    entity.deleted = True
    return True
