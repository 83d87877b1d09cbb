"""
Chunked writer for Chunkvault.

Commit order is data before pointer: every chunk is stored before the
metadata record that references it, so a reader never sees a count whose
chunks are not all present.
"""

import asyncio
from typing import List, Optional

from chunkvault.core.contracts import Chunk, Config, ErrorHandler, LogFunction
from chunkvault.core.errors import ChunkWriteError, QuotaExceededError
from chunkvault.core.keys import check_key_length, derive_chunk_key, derive_meta_key, validate_name
from chunkvault.storage.backends import KeyValueStore
from chunkvault.storage.codec import encode_value, to_chunks
from chunkvault.storage.events import EventSink
from chunkvault.storage.metadata import MetadataManager


def batched(items: List, size: int) -> List[List]:
    """Split items into consecutive batches of at most size elements."""
    return [items[i : i + size] for i in range(0, len(items), size)]


class ChunkedWriter:
    """Writes one logical entry as chunks followed by its metadata record."""

    def __init__(self, store: KeyValueStore, config: Optional[Config] = None):
        """
        Initialize writer.

        Args:
            store: Host key-value store
            config: Limits and chunking options
        """
        self.store = store
        self.config = config or Config()

    async def store_with_chunking(
        self,
        name: str,
        value: str,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        """
        Store a value under a logical name, replacing any previous value.

        Args:
            name: Logical entry name
            value: Value to persist (may be empty)
            on_log: Progress callback (message, level)
            on_error: Failure callback (message)

        Raises:
            InvalidNameError: If the name cannot be used for host keys
            QuotaExceededError: If the value needs more keys than the host allows
            ChunkWriteError: If a chunk or metadata write failed; chunks written
                so far are left in place and the metadata is not updated
        """
        events = EventSink(on_log, on_error)
        config = self.config
        validate_name(name, config.max_key_length)

        stored_text = encode_value(value, config.encoding, config.zstd_level)
        chunks = to_chunks(name, stored_text, config.chunk_size)
        total = len(chunks)

        required_keys = total + 1
        if required_keys > config.max_keys:
            error = QuotaExceededError(name, required_keys, config.max_keys)
            events.error(str(error))
            raise error
        # Highest index gives the longest key
        check_key_length(derive_chunk_key(name, total - 1), config.max_key_length)

        meta_key = derive_meta_key(name)
        try:
            previous_raw = await self.store.get(meta_key)
        except Exception as e:
            message = f"Error reading previous metadata of '{name}': {e}"
            events.error(message)
            raise ChunkWriteError(name, "metadata", message) from e
        previous = MetadataManager.try_load_metadata(previous_raw)

        events.log(f"Storing '{name}' in {total} chunk(s)...", "info")

        for batch in batched(chunks, config.write_concurrency):
            await self._write_batch(name, batch, events)

        record = MetadataManager.create_metadata(stored_text, total, config.encoding)
        try:
            await self.store.set(meta_key, MetadataManager.dump_metadata(record))
        except Exception as e:
            message = f"Error storing metadata of '{name}': {e}"
            events.error(message)
            raise ChunkWriteError(name, "metadata", message) from e

        events.log(f"Stored '{name}' ({total} chunk(s))", "success")

        if previous is not None and previous.total_chunks > total:
            await self._remove_stale(name, total, previous.total_chunks, events)

    async def _write_batch(self, name: str, batch: List[Chunk], events: EventSink):
        results = await asyncio.gather(
            *(self.store.set(chunk.key, chunk.payload) for chunk in batch),
            return_exceptions=True,
        )
        for chunk, result in zip(batch, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                unit = f"chunk {chunk.index + 1}/{chunk.total_count}"
                message = f"Error storing {unit} of '{name}': {result}"
                events.error(message)
                raise ChunkWriteError(name, unit, message) from result
            events.log(f"Stored chunk {chunk.index + 1}/{chunk.total_count} of '{name}'", "info")

    async def _remove_stale(self, name: str, start: int, stop: int, events: EventSink):
        """
        Remove chunks left over from a longer previous value (best effort).

        Removes from the highest index down and stops at the first failure,
        so any leftovers stay contiguous with the live chunks where the
        eraser's orphan sweep finds them.
        """
        removed = 0
        for index in range(stop - 1, start - 1, -1):
            key = derive_chunk_key(name, index)
            try:
                await self.store.remove(key)
            except Exception as e:
                events.error(f"Error removing stale chunk {key}: {e}")
                break
            removed += 1
        events.log(f"Removed {removed} of {stop - start} stale chunk(s) of '{name}'", "info")
