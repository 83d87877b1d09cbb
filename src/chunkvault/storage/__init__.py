"""
Storage layer: host store adapters, chunk codec, metadata, and the chunked
writer, reader and eraser.
"""

from chunkvault.storage.backends import JsonFileStore, KeyValueStore, MemoryStore
from chunkvault.storage.codec import compute_checksum, decode_value, encode_value, join, split
from chunkvault.storage.compression import compress_data, decompress_data
from chunkvault.storage.eraser import ChunkedEraser
from chunkvault.storage.metadata import MetadataManager
from chunkvault.storage.reader import ChunkedReader
from chunkvault.storage.writer import ChunkedWriter

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "split",
    "join",
    "compute_checksum",
    "encode_value",
    "decode_value",
    "compress_data",
    "decompress_data",
    "MetadataManager",
    "ChunkedWriter",
    "ChunkedReader",
    "ChunkedEraser",
]
