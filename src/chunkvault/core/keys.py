"""
Deterministic key derivation for Chunkvault.

Key Policy:
- chunk key: f"{name}_chunk_{index}"
- metadata key: f"{name}_meta"

Names are restricted to the host key alphabet (A-Z, a-z, 0-9, _ and -).
Chunk keys always end in "_chunk_<decimal>" and metadata keys always end in
"_meta", so the two families never overlap. Within chunk keys the name is
recovered by splitting on the last "_chunk_" (the index never contains it),
which makes derivation injective across all (name, index) pairs.
"""

import re
from typing import Optional, Tuple

from chunkvault.core.errors import InvalidNameError

CHUNK_INFIX = "_chunk_"
META_SUFFIX = "_meta"
DEFAULT_MAX_KEY_LENGTH = 128

_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_CHUNK_KEY_RE = re.compile(r"^(?P<name>[A-Za-z0-9_-]+)_chunk_(?P<index>0|[1-9][0-9]*)$")


def validate_name(name: str, max_key_length: int = DEFAULT_MAX_KEY_LENGTH) -> str:
    """
    Check that a logical entry name can be used to derive host keys.

    Args:
        name: Logical entry name
        max_key_length: Host limit on key length

    Returns:
        The name, unchanged

    Raises:
        InvalidNameError: If the name is empty, uses characters outside the
            host key alphabet, or its metadata key would be too long
    """
    if not isinstance(name, str) or not name:
        raise InvalidNameError("Entry name must be a non-empty string")
    if not _NAME_RE.match(name):
        raise InvalidNameError(
            f"Entry name {name!r} may only contain A-Z, a-z, 0-9, '_' and '-'"
        )
    if len(derive_meta_key(name)) > max_key_length:
        raise InvalidNameError(
            f"Entry name {name!r} is too long for a {max_key_length}-character key"
        )
    return name


def derive_chunk_key(name: str, index: int) -> str:
    """Physical key of chunk ``index`` of entry ``name``."""
    if index < 0:
        raise ValueError(f"Chunk index must be non-negative, got {index}")
    return f"{name}{CHUNK_INFIX}{index}"


def derive_meta_key(name: str) -> str:
    """Physical key of the metadata record of entry ``name``."""
    return f"{name}{META_SUFFIX}"


def check_key_length(key: str, max_key_length: int = DEFAULT_MAX_KEY_LENGTH) -> str:
    """Raise InvalidNameError if a derived key exceeds the host limit."""
    if len(key) > max_key_length:
        raise InvalidNameError(
            f"Derived key {key!r} exceeds the {max_key_length}-character limit"
        )
    return key


def parse_key(key: str) -> Optional[Tuple[str, Optional[int]]]:
    """
    Invert key derivation.

    Args:
        key: Physical host key

    Returns:
        (name, index) for a chunk key, (name, None) for a metadata key, or
        None if the key was not produced by this module
    """
    match = _CHUNK_KEY_RE.match(key)
    if match:
        return match.group("name"), int(match.group("index"))
    if key.endswith(META_SUFFIX):
        name = key[: -len(META_SUFFIX)]
        if name and _NAME_RE.match(name):
            return name, None
    return None
