"""Error codes emitted by the contacts backend, keyed to their category."""

from .types import ErrorCategory

INVALID_ARGUMENT = "INVALID_ARGUMENT"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
ALREADY_EXISTS = "ALREADY_EXISTS"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"

CATEGORY_BY_CODE: dict[str, ErrorCategory] = {
    INVALID_ARGUMENT: ErrorCategory.VALIDATION,
    RESOURCE_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ALREADY_EXISTS: ErrorCategory.CONFLICT,
    NOT_IMPLEMENTED: ErrorCategory.UNIMPLEMENTED,
    DEPENDENCY_FAILURE: ErrorCategory.DEPENDENCY,
    DEPENDENCY_UNAVAILABLE: ErrorCategory.DEPENDENCY,
    UNEXPECTED_EXCEPTION: ErrorCategory.INTERNAL,
}

# Only a lost or timed-out database connection is worth retrying as-is.
RETRYABLE_CODES = frozenset({DEPENDENCY_UNAVAILABLE})
