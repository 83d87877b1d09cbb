"""
Exception hierarchy for Chunkvault.

Absent and corrupt entries are not exceptions: they are reported through
callbacks and a ``None`` return. These types cover invalid input, quota
violations, and host store failures that propagate to the caller.
"""

from typing import Optional


class ChunkStorageError(Exception):
    """Base class for all Chunkvault errors."""


class InvalidNameError(ChunkStorageError, ValueError):
    """Logical entry name or derived key is not acceptable to the host store."""


class StoreLimitError(ChunkStorageError):
    """A backend refused a value or key because it exceeds the host limits."""


class QuotaExceededError(ChunkStorageError):
    """Value needs more keys than the host store allows."""

    def __init__(self, name: str, required_keys: int, max_keys: int):
        self.name = name
        self.required_keys = required_keys
        self.max_keys = max_keys
        super().__init__(
            f"Quota exceeded for '{name}': needs {required_keys} keys, "
            f"host allows {max_keys}"
        )


class ChunkWriteError(ChunkStorageError):
    """A chunk or metadata write failed; the entry is left partial."""

    def __init__(self, name: str, unit: str, message: str):
        self.name = name
        self.unit = unit
        super().__init__(message)


class ChunkReadError(ChunkStorageError):
    """The host store failed while reading an entry's metadata."""

    def __init__(self, name: str, key: Optional[str], message: str):
        self.name = name
        self.key = key
        super().__init__(message)
