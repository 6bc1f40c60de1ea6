"""ULID keys for contacts tables and their text form at the service boundary."""

from packages.contacts_shared.ids.sqlalchemy import (
    ULID_BYTES_LENGTH,
    ulid_foreign_key,
    ulid_primary_key,
)
from packages.contacts_shared.ids.ulid import (
    generate_ulid_bytes,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)

__all__ = [
    "ULID_BYTES_LENGTH",
    "generate_ulid_bytes",
    "ulid_bytes_to_str",
    "ulid_foreign_key",
    "ulid_primary_key",
    "ulid_str_to_bytes",
]
