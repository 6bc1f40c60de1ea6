"""Tests for building error details from codes."""

from __future__ import annotations

import pytest

from packages.contacts_shared.errors import ErrorCategory, codes, make_error


@pytest.mark.parametrize(
    ("code", "category"),
    [
        (codes.INVALID_ARGUMENT, ErrorCategory.VALIDATION),
        (codes.RESOURCE_NOT_FOUND, ErrorCategory.NOT_FOUND),
        (codes.ALREADY_EXISTS, ErrorCategory.CONFLICT),
        (codes.NOT_IMPLEMENTED, ErrorCategory.UNIMPLEMENTED),
        (codes.DEPENDENCY_FAILURE, ErrorCategory.DEPENDENCY),
        (codes.UNEXPECTED_EXCEPTION, ErrorCategory.INTERNAL),
    ],
)
def test_make_error_derives_category_from_code(code: str, category) -> None:
    error = make_error(code, "failed")

    assert error.category is category
    assert error.retryable is False


def test_only_unavailable_dependency_is_retryable() -> None:
    error = make_error(codes.DEPENDENCY_UNAVAILABLE, "contact store unavailable")

    assert error.category is ErrorCategory.DEPENDENCY
    assert error.retryable is True


def test_make_error_copies_metadata() -> None:
    """Later changes to the caller's mapping must not leak into the error."""
    metadata = {"field": "last_name"}

    error = make_error(codes.INVALID_ARGUMENT, "required", metadata=metadata)
    metadata["field"] = "changed"

    assert error.metadata == {"field": "last_name"}


def test_make_error_rejects_unknown_codes() -> None:
    with pytest.raises(KeyError):
        make_error("VALIDATION_ERROR", "unknown")
