"""Translation of database driver failures into contact error details."""

from __future__ import annotations

from packages.contacts_shared.errors import ErrorDetail, codes, make_error

# Checked in order; the first rule whose type names or message fragments
# match decides the code.
_RULES: tuple[tuple[str, tuple[str, ...], tuple[str, ...], str], ...] = (
    (
        codes.ALREADY_EXISTS,
        ("UniqueViolation",),
        ("duplicate key value", "unique constraint failed"),
        "contact record already exists",
    ),
    (
        codes.DEPENDENCY_UNAVAILABLE,
        ("OperationalError",),
        ("timeout",),
        "contact store unavailable",
    ),
    (
        codes.DEPENDENCY_FAILURE,
        ("InterfaceError", "ProgrammingError"),
        (),
        "contact store rejected the request",
    ),
)


def normalize_postgres_error(exc: Exception) -> ErrorDetail:
    """Return the error detail for one exception raised by the SQL stack.

    Only the exception type name reaches the caller; driver messages may
    carry row data and stay in the logs.
    """
    names = _type_names(exc)
    text = str(exc).lower()
    metadata = {"exception_type": type(exc).__name__}
    for code, type_markers, message_markers, summary in _RULES:
        if any(marker in name for marker in type_markers for name in names) or any(
            marker in text for marker in message_markers
        ):
            return make_error(code, summary, metadata=metadata)
    return make_error(
        codes.UNEXPECTED_EXCEPTION,
        "unexpected contact store failure",
        metadata=metadata,
    )


def _type_names(exc: Exception) -> list[str]:
    """Return the type name of ``exc`` and of any wrapped driver exception."""
    names = [type(exc).__name__]
    orig = getattr(exc, "orig", None)
    if isinstance(orig, BaseException):
        names.append(type(orig).__name__)
    return names
