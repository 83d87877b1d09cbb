"""
Compression utilities for Chunkvault.

Host stores accept text values only, so compressed bytes are carried as
base64 ASCII.
"""

import base64

import zstandard as zstd


def compress_data(data: bytes, level: int = 3) -> bytes:
    """
    Compress data using zstd.

    Args:
        data: Data to compress
        level: Compression level (1-22, default 3)

    Returns:
        Compressed data
    """
    cctx = zstd.ZstdCompressor(level=level)
    return cctx.compress(data)


def decompress_data(compressed_data: bytes) -> bytes:
    """
    Decompress data using zstd.

    Args:
        compressed_data: Compressed data

    Returns:
        Decompressed data
    """
    dctx = zstd.ZstdDecompressor()
    return dctx.decompress(compressed_data)


def compress_text(text: str, level: int = 3) -> str:
    """Compress UTF-8 text to a base64 string."""
    return base64.b64encode(compress_data(text.encode("utf-8"), level)).decode("ascii")


def decompress_text(blob: str) -> str:
    """
    Inverse of compress_text.

    Raises:
        ValueError: If the blob is not base64 or not a zstd frame of UTF-8 text
    """
    raw = base64.b64decode(blob.encode("ascii"), validate=True)
    try:
        data = decompress_data(raw)
    except zstd.ZstdError as e:
        raise ValueError(f"Invalid zstd payload: {e}") from e
    return data.decode("utf-8")
