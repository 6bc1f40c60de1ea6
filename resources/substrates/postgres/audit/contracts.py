"""Structural audit capabilities an entity may expose.

Capabilities are independent: an entity may expose any subset of them, and
stamping code checks each one with ``isinstance`` against these runtime
protocols rather than depending on a concrete base class.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol, runtime_checkable

Clock = Callable[[], datetime]


@runtime_checkable
class CreationAudited(Protocol):
    """Entity stamped once with its creation time and optional creator."""

    created_time: datetime | None
    creator_id: str | None


@runtime_checkable
class ModificationAudited(Protocol):
    """Entity stamped with its last modification time on every update."""

    modified_time: datetime | None


@runtime_checkable
class DeletionAudited(Protocol):
    """Entity soft-deleted by flag instead of physical removal."""

    deleted: bool
