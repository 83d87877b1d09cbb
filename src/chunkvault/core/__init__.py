"""
Core contracts, key derivation and errors for Chunkvault.
"""

from chunkvault.core.contracts import (
    Chunk,
    Config,
    EntryReport,
    ErrorHandler,
    LogFunction,
    LogLevel,
    MetadataRecord,
)
from chunkvault.core.errors import (
    ChunkReadError,
    ChunkStorageError,
    ChunkWriteError,
    InvalidNameError,
    QuotaExceededError,
    StoreLimitError,
)
from chunkvault.core.keys import derive_chunk_key, derive_meta_key, parse_key, validate_name

__all__ = [
    "Config",
    "Chunk",
    "MetadataRecord",
    "EntryReport",
    "LogLevel",
    "LogFunction",
    "ErrorHandler",
    "ChunkStorageError",
    "InvalidNameError",
    "StoreLimitError",
    "QuotaExceededError",
    "ChunkWriteError",
    "ChunkReadError",
    "derive_chunk_key",
    "derive_meta_key",
    "parse_key",
    "validate_name",
]
