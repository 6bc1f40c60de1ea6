"""Caller metadata attached to every contacts request and echoed on results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


class EnvelopeKind(str, Enum):
    """Intent of a call: a command mutates contacts, a query only reads them."""

    UNSPECIFIED = "unspecified"
    COMMAND = "command"
    QUERY = "query"
    RESULT = "result"


@dataclass(frozen=True)
class EnvelopeMeta:
    """Who called, on whose behalf, and as part of which trace."""

    envelope_id: str
    trace_id: str
    parent_id: str
    timestamp: datetime
    kind: EnvelopeKind
    source: str
    principal: str


# ``parent_id`` is optional: top-level calls have no parent envelope.
_REQUIRED = ("envelope_id", "trace_id", "timestamp", "source", "principal")


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_meta(
    *,
    kind: EnvelopeKind,
    source: str,
    principal: str,
    trace_id: str | None = None,
    parent_id: str = "",
    envelope_id: str | None = None,
    timestamp: datetime | None = None,
) -> EnvelopeMeta:
    """Build metadata, generating ids and stamping the time when omitted."""
    if timestamp is None:
        timestamp = utc_now()
    elif timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    else:
        timestamp = timestamp.astimezone(UTC)
    return EnvelopeMeta(
        envelope_id=envelope_id or uuid4().hex,
        trace_id=trace_id or uuid4().hex,
        parent_id=parent_id,
        timestamp=timestamp,
        kind=kind,
        source=source,
        principal=principal,
    )


def validate_meta(meta: EnvelopeMeta) -> None:
    """Raise ``ValueError`` naming the first unusable field of ``meta``."""
    for name in _REQUIRED:
        if not getattr(meta, name):
            raise ValueError(f"metadata.{name} is required")
    if not isinstance(meta.timestamp, datetime):
        raise ValueError("metadata.timestamp is required")
    if EnvelopeKind(meta.kind) is EnvelopeKind.UNSPECIFIED:
        raise ValueError("metadata.kind must be specified")
