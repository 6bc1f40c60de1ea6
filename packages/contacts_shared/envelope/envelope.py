"""Result envelope returned by every contacts service operation."""

from __future__ import annotations

from typing import Generic, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from packages.contacts_shared.errors import ErrorCategory, ErrorDetail

from .meta import EnvelopeMeta

T = TypeVar("T")


class Payload(BaseModel, Generic[T]):
    """Successful operation result; absent whenever errors are reported."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: T


class Envelope(BaseModel, Generic[T]):
    """Request metadata plus exactly one of a payload or a non-empty error list."""

    model_config = ConfigDict(frozen=True)

    metadata: EnvelopeMeta
    payload: Payload[T] | None
    errors: list[ErrorDetail] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def has_payload(self) -> bool:
        return self.payload is not None

    @property
    def error_category(self) -> ErrorCategory | None:
        """Category of the first reported error, used for routing failures."""
        return self.errors[0].category if self.errors else None


def success(*, meta: EnvelopeMeta, payload: T) -> Envelope[T]:
    """Wrap ``payload`` in an ok envelope."""
    return Envelope[T](metadata=meta, payload=Payload[T](value=payload))


def failure(*, meta: EnvelopeMeta, errors: Iterable[ErrorDetail]) -> Envelope[T]:
    """Return an envelope carrying ``errors`` and no payload."""
    return Envelope[T](metadata=meta, payload=None, errors=list(errors))
