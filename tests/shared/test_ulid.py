"""Tests for ULID conversion and generation helpers."""

from __future__ import annotations

import pytest

from packages.contacts_shared.ids import (
    generate_ulid_bytes,
    ulid_bytes_to_str,
    ulid_str_to_bytes,
)


def test_ulid_text_and_bytes_convert_both_ways() -> None:
    """Canonical text should survive a bytes conversion unchanged."""
    text = "01ARZ3NDEKTSV4RRFFQ69G5FAV"

    raw = ulid_str_to_bytes(text)

    assert len(raw) == 16
    assert ulid_bytes_to_str(raw) == text


def test_ulid_parsing_is_case_insensitive_and_strips_whitespace() -> None:
    assert ulid_str_to_bytes(" 01arz3ndektsv4rrffq69g5fav ") == ulid_str_to_bytes(
        "01ARZ3NDEKTSV4RRFFQ69G5FAV"
    )


@pytest.mark.parametrize(
    "value",
    ["", "01ARZ3NDEK", "01ARZ3NDEKTSV4RRFFQ69G5FAU!", "01ARZ3NDEKTSV4RRFFQ69G5FAI"],
)
def test_ulid_parsing_rejects_malformed_text(value: str) -> None:
    with pytest.raises(ValueError):
        ulid_str_to_bytes(value)


def test_ulid_parsing_rejects_values_beyond_128_bits() -> None:
    """A leading character above 7 overflows the 128-bit range."""
    with pytest.raises(ValueError, match="128-bit"):
        ulid_str_to_bytes("8ZZZZZZZZZZZZZZZZZZZZZZZZZ")


def test_generated_ulids_embed_timestamp_and_sort_by_time() -> None:
    """The high 48 bits should carry the requested millisecond timestamp."""
    earlier = generate_ulid_bytes(timestamp_ms=1_000)
    later = generate_ulid_bytes(timestamp_ms=2_000)

    assert int.from_bytes(earlier[:6], "big") == 1_000
    assert earlier < later
    assert len(ulid_bytes_to_str(generate_ulid_bytes())) == 26


def test_generation_rejects_out_of_range_timestamps() -> None:
    with pytest.raises(ValueError):
        generate_ulid_bytes(timestamp_ms=-1)


def test_ulid_text_uses_crockford_digits_only() -> None:
    """Encoded text never contains the ambiguous letters I, L, O or U."""
    text = ulid_bytes_to_str(bytes(range(240, 256)))

    assert not set(text) & set("ILOU")
    assert ulid_bytes_to_str(bytes(16)) == "0" * 26
    assert ulid_bytes_to_str(b"\xff" * 16) == "7" + "Z" * 25
