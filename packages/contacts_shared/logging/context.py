"""Correlation fields attached to every log line emitted inside a request.

Fields live in a ``ContextVar`` so each thread and task sees only its own
request's trace, principal and contact identifiers.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Iterator, Mapping

_EMPTY: Mapping[str, str] = MappingProxyType({})
_FIELDS: ContextVar[Mapping[str, str]] = ContextVar(
    "contacts_log_fields", default=_EMPTY
)


def _merged(values: Mapping[str, object]) -> Mapping[str, str]:
    """Current fields overlaid with stringified non-``None`` ``values``."""
    merged = dict(_FIELDS.get())
    merged.update({str(k): str(v) for k, v in values.items() if v is not None})
    return MappingProxyType(merged)


def get_context() -> dict[str, str]:
    return dict(_FIELDS.get())


def bind_context(**values: object) -> None:
    """Attach ``values`` to all later log lines in this context."""
    _FIELDS.set(_merged(values))


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when called without names."""
    remaining = {k: v for k, v in _FIELDS.get().items() if keys and k not in keys}
    _FIELDS.set(MappingProxyType(remaining))


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Attach ``values`` only while the block runs."""
    token = _FIELDS.set(_merged(values))
    try:
        yield
    finally:
        _FIELDS.reset(token)
