"""Construction of :class:`ErrorDetail` values from error codes."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorDetail


def make_error(
    code: str,
    message: str,
    *,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Return an error for ``code`` with its category and retry flag filled in.

    Raises ``KeyError`` for codes not listed in :mod:`.codes`.
    """
    return ErrorDetail(
        code=code,
        message=message,
        category=codes.CATEGORY_BY_CODE[code],
        retryable=code in codes.RETRYABLE_CODES,
        metadata=dict(metadata or {}),
    )
