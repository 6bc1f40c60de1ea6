"""Tests for envelope model, builder and metadata behavior."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from packages.contacts_shared.envelope import (
    Envelope,
    EnvelopeKind,
    EnvelopeMeta,
    failure,
    new_meta,
    success,
    validate_meta,
)
from packages.contacts_shared.errors import ErrorCategory, ErrorDetail


def _meta(**overrides: object) -> EnvelopeMeta:
    """Return deterministic metadata for envelope tests."""
    values: dict[str, object] = {
        "kind": EnvelopeKind.RESULT,
        "source": "service_contact_authority",
        "principal": "operator",
        "timestamp": datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC),
        "envelope_id": "env-1",
        "trace_id": "trace-1",
    }
    values.update(overrides)
    return new_meta(**values)


def _error(code: str = "VALIDATION_ERROR") -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message="Invalid input",
        category=ErrorCategory.VALIDATION,
        retryable=False,
    )


def test_success_builder_returns_ok_envelope_with_payload() -> None:
    """success should build an ok envelope with payload and no errors."""
    envelope = success(meta=_meta(), payload={"contact_id": "01ABC"})

    assert envelope.ok is True
    assert envelope.has_payload is True
    assert envelope.payload.value == {"contact_id": "01ABC"}
    assert envelope.errors == []
    assert envelope.error_category is None


def test_failure_builder_returns_non_ok_envelope_without_payload() -> None:
    """failure should carry errors and drop any payload."""
    envelope = failure(meta=_meta(), errors=[_error("DEPENDENCY_UNAVAILABLE")])

    assert envelope.ok is False
    assert envelope.has_payload is False
    assert [item.code for item in envelope.errors] == ["DEPENDENCY_UNAVAILABLE"]
    assert envelope.error_category == ErrorCategory.VALIDATION


def test_envelope_model_validation_rejects_invalid_error_shape() -> None:
    """Envelope model validation should fail for malformed error entries."""
    with pytest.raises(ValidationError):
        Envelope[dict[str, str]].model_validate(
            {
                "metadata": _meta(),
                "payload": {"value": {"contact_id": "01ABC"}},
                "errors": [{"code": "BAD"}],
            }
        )


def test_new_meta_generates_ids_and_normalizes_naive_timestamp() -> None:
    """new_meta should create ids and attach UTC to naive timestamps."""
    timestamp = datetime(2026, 1, 1, 12, 0, 0)

    meta = new_meta(
        kind=EnvelopeKind.QUERY,
        source="service_contact_authority",
        principal="operator",
        timestamp=timestamp,
    )

    assert meta.envelope_id
    assert meta.trace_id
    assert meta.parent_id == ""
    assert meta.timestamp == timestamp.replace(tzinfo=UTC)


def test_new_meta_normalizes_aware_timestamp_to_utc() -> None:
    """new_meta should convert aware timestamps into UTC."""
    local_tz = timezone(timedelta(hours=-5))

    meta = _meta(timestamp=datetime(2026, 1, 1, 7, 0, 0, tzinfo=local_tz))

    assert meta.timestamp == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def test_validate_meta_rejects_unspecified_kind() -> None:
    """validate_meta should fail when kind is unspecified."""
    with pytest.raises(ValueError, match="metadata.kind must be specified"):
        validate_meta(_meta(kind=EnvelopeKind.UNSPECIFIED))


def test_validate_meta_rejects_blank_principal() -> None:
    """validate_meta should name the first missing required field."""
    with pytest.raises(ValueError, match="metadata.principal is required"):
        validate_meta(_meta(principal=""))


def test_validate_meta_accepts_complete_metadata() -> None:
    validate_meta(_meta())
