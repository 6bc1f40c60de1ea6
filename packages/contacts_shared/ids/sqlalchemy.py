"""SQLAlchemy helpers for ULID-backed primary and foreign keys."""

from __future__ import annotations

from typing import Any

from sqlalchemy import ForeignKey, LargeBinary
from sqlalchemy.orm import MappedColumn, mapped_column

from packages.contacts_shared.ids.ulid import generate_ulid_bytes

ULID_BYTES_LENGTH = 16


def ulid_primary_key() -> MappedColumn[Any]:
    """Return a mapped 16-byte ULID primary key generated in application code."""
    return mapped_column(
        LargeBinary(ULID_BYTES_LENGTH),
        primary_key=True,
        default=generate_ulid_bytes,
    )


def ulid_foreign_key(target: str, *, nullable: bool = False) -> MappedColumn[Any]:
    """Return a mapped 16-byte ULID column referencing ``target``."""
    return mapped_column(
        LargeBinary(ULID_BYTES_LENGTH),
        ForeignKey(target),
        nullable=nullable,
        index=True,
    )
