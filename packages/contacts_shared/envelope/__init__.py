"""Envelope types wrapping contacts service requests and results."""

from .envelope import Envelope, Payload, failure, success
from .meta import EnvelopeKind, EnvelopeMeta, new_meta, utc_now, validate_meta

__all__ = [
    "Envelope",
    "EnvelopeKind",
    "EnvelopeMeta",
    "Payload",
    "failure",
    "new_meta",
    "success",
    "utc_now",
    "validate_meta",
]
