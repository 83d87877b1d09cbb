"""
Chunk codec for Chunkvault.

Pure functions: value <-> ordered payloads, plus the value encoding and
checksum recorded in the metadata record. Round-trip law:
join(split(v, n)) == v for every string v and every n >= 1.
"""

from typing import List, Sequence

import xxhash

from chunkvault.core.contracts import Chunk
from chunkvault.storage.compression import compress_text, decompress_text

ENCODINGS = ("plain", "zstd")


def split(value: str, max_chunk_size: int) -> List[str]:
    """
    Split a value into ordered payloads of at most max_chunk_size characters.

    The empty value yields a single empty payload so that a stored empty
    value is distinguishable from an absent entry.

    Args:
        value: Text to split
        max_chunk_size: Maximum characters per payload

    Returns:
        List of payloads; all but the last have exactly max_chunk_size characters
    """
    if max_chunk_size < 1:
        raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
    if not value:
        return [""]
    return [value[i : i + max_chunk_size] for i in range(0, len(value), max_chunk_size)]


def join(payloads: Sequence[str]) -> str:
    """Concatenate payloads given in ascending index order."""
    return "".join(payloads)


def to_chunks(name: str, value: str, max_chunk_size: int) -> List[Chunk]:
    """Split a value into Chunk records for entry ``name``."""
    payloads = split(value, max_chunk_size)
    total = len(payloads)
    return [
        Chunk(name=name, index=index, total_count=total, payload=payload)
        for index, payload in enumerate(payloads)
    ]


def compute_checksum(text: str) -> str:
    """xxhash32 hex digest of the UTF-8 encoding of text."""
    return xxhash.xxh32(text.encode("utf-8")).hexdigest()


def encode_value(value: str, encoding: str = "plain", level: int = 3) -> str:
    """
    Encode a caller value into the text that is actually chunked.

    Args:
        value: Caller value
        encoding: "plain" (identity) or "zstd" (zstd + base64)
        level: zstd compression level

    Returns:
        Stored text
    """
    if encoding == "plain":
        return value
    if encoding == "zstd":
        return compress_text(value, level)
    raise ValueError(f"Unsupported encoding: {encoding}")


def decode_value(stored: str, encoding: str = "plain") -> str:
    """Inverse of encode_value."""
    if encoding == "plain":
        return stored
    if encoding == "zstd":
        return decompress_text(stored)
    raise ValueError(f"Unsupported encoding: {encoding}")
