"""Contact identifiers as ULIDs.

Rows store the 16-byte big-endian value so keys sort by creation time; the
service boundary speaks the 26-character Crockford base32 text form.
"""

from __future__ import annotations

import secrets
import time

_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_TEXT_LENGTH = 26
_BYTE_LENGTH = 16
_TIME_BITS = 48
_RANDOM_BYTES = 10


def ulid_str_to_bytes(value: str) -> bytes:
    """Parse ULID text, case-insensitively and ignoring surrounding spaces."""
    text = value.strip().upper()
    if len(text) != _TEXT_LENGTH:
        raise ValueError(f"ULID text must be {_TEXT_LENGTH} characters")
    bad = sorted(set(text) - set(_CROCKFORD))
    if bad:
        raise ValueError(f"ULID text contains invalid characters: {''.join(bad)}")
    number = int(text.translate(_TO_BASE32), 32)
    if number.bit_length() > _BYTE_LENGTH * 8:
        raise ValueError("ULID value exceeds the 128-bit range")
    return number.to_bytes(_BYTE_LENGTH, "big")


def ulid_bytes_to_str(value: bytes) -> str:
    if len(value) != _BYTE_LENGTH:
        raise ValueError(f"ULID bytes must be {_BYTE_LENGTH} long")
    number = int.from_bytes(value, "big")
    # 26 five-bit groups cover 130 bits; the top two are always zero.
    return "".join(
        _CROCKFORD[(number >> shift) & 0x1F]
        for shift in range(5 * (_TEXT_LENGTH - 1), -1, -5)
    )


def generate_ulid_bytes(*, timestamp_ms: int | None = None) -> bytes:
    """Return a new ULID for ``timestamp_ms``, defaulting to the current time."""
    millis = time.time_ns() // 1_000_000 if timestamp_ms is None else timestamp_ms
    if not 0 <= millis < 1 << _TIME_BITS:
        raise ValueError("timestamp_ms does not fit in 48 bits")
    return millis.to_bytes(_TIME_BITS // 8, "big") + secrets.token_bytes(_RANDOM_BYTES)


# Maps Crockford digits onto the digits int(..., 32) understands.
_TO_BASE32 = str.maketrans(_CROCKFORD, "0123456789ABCDEFGHIJKLMNOPQRSTUV")
