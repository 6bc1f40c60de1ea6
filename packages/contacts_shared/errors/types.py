"""Error shape carried in failed contact envelopes.

Callers branch on ``category`` to pick their own status semantics and on
``code`` for anything finer; ``message`` is for humans only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ErrorCategory(str, Enum):
    """Coarse failure classes a contacts caller can react to."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNIMPLEMENTED = "unimplemented"
    DEPENDENCY = "dependency"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorDetail:
    """One failure reported by a contacts operation."""

    code: str
    message: str
    category: ErrorCategory
    retryable: bool = False
    metadata: Mapping[str, str] = field(default_factory=dict)
