"""
Tests for key derivation.
"""

import pytest

from chunkvault.core.errors import InvalidNameError
from chunkvault.core.keys import (
    check_key_length,
    derive_chunk_key,
    derive_meta_key,
    parse_key,
    validate_name,
)


def test_derive_keys():
    """Test the chunk and metadata key formats."""
    assert derive_chunk_key("userShare", 0) == "userShare_chunk_0"
    assert derive_chunk_key("userShare", 12) == "userShare_chunk_12"
    assert derive_meta_key("walletId") == "walletId_meta"


def test_parse_key_inverts_derivation():
    """parse_key must recover (name, index) from every derived key."""
    names = ["k", "userShare", "a_chunk_1", "x_meta", "a-b_c", "chunk", "meta"]
    for name in names:
        assert parse_key(derive_meta_key(name)) == (name, None)
        for index in (0, 1, 9, 10, 123):
            assert parse_key(derive_chunk_key(name, index)) == (name, index)


def test_keys_are_collision_free():
    """No two distinct (name, index) pairs share a physical key."""
    names = ["a", "a_chunk_1", "a_chunk", "a_meta", "a_meta_meta", "a_1", "a_chunk_1_chunk"]
    seen = {}
    for name in names:
        pairs = [(name, None)] + [(name, i) for i in range(12)]
        for pair in pairs:
            key = derive_meta_key(name) if pair[1] is None else derive_chunk_key(name, pair[1])
            assert key not in seen, f"{pair} collides with {seen.get(key)}"
            seen[key] = pair


def test_parse_key_rejects_foreign_keys():
    assert parse_key("something_else") is None
    assert parse_key("a_chunk_01") is None
    assert parse_key("_meta") is None


@pytest.mark.parametrize("name", ["", "has space", "dot.name", "slash/name", "ünicode"])
def test_validate_name_rejects_invalid(name):
    with pytest.raises(InvalidNameError):
        validate_name(name)


def test_validate_name_length_limit():
    validate_name("a" * 123)  # "_meta" makes 128
    with pytest.raises(InvalidNameError):
        validate_name("a" * 124)
    with pytest.raises(InvalidNameError):
        check_key_length(derive_chunk_key("a" * 121, 0))


def test_invalid_name_is_value_error():
    with pytest.raises(ValueError):
        validate_name("bad name")


def test_negative_index_rejected():
    with pytest.raises(ValueError):
        derive_chunk_key("k", -1)
