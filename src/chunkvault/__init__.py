"""
Chunkvault - chunked persistence of secret strings in size-limited key-value stores.
"""

from chunkvault.core import Config
from chunkvault.storage.backends import JsonFileStore, KeyValueStore, MemoryStore
from chunkvault.vault import (
    ChunkedStorage,
    clear_chunked_storage,
    retrieve_chunked_data,
    store_with_chunking,
)

__version__ = "0.1.0"

__all__ = [
    "ChunkedStorage",
    "store_with_chunking",
    "retrieve_chunked_data",
    "clear_chunked_storage",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "Config",
]
