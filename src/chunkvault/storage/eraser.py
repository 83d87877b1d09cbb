"""
Chunked eraser for Chunkvault.

Removal has no valid-looking intermediate state: once the metadata key is
gone the entry reads as absent. Each key is removed independently and a
failure never stops the remaining removals.
"""

from typing import Iterable, Optional

from chunkvault.core.contracts import Config, ErrorHandler, LogFunction
from chunkvault.core.keys import derive_chunk_key, derive_meta_key, validate_name
from chunkvault.storage.backends import KeyValueStore
from chunkvault.storage.events import EventSink
from chunkvault.storage.metadata import MetadataManager


class ChunkedEraser:
    """Removes every key belonging to a caller-known set of logical names."""

    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[Config] = None,
        names: Optional[Iterable[str]] = None,
    ):
        """
        Initialize eraser.

        Args:
            store: Host key-value store
            config: Limits (max_keys bounds the orphan sweep)
            names: Logical names to erase (defaults to config.known_names)
        """
        self.store = store
        self.config = config or Config()
        self.names = list(names) if names is not None else list(self.config.known_names)

    async def clear_chunked_storage(
        self,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> bool:
        """
        Remove metadata and chunks of every known name.

        Returns:
            True if every removal succeeded, False if any key failed
        """
        events = EventSink(on_log, on_error)
        events.log(f"Clearing {len(self.names)} entr{'y' if len(self.names) == 1 else 'ies'}...", "info")
        success = True
        for name in self.names:
            if not await self._erase(name, events):
                success = False
        if success:
            events.log("Cleared chunked storage", "success")
        else:
            events.log(f"Cleared chunked storage with {events.error_count} error(s)", "error")
        return success

    async def erase_entry(
        self,
        name: str,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> bool:
        """Remove metadata and chunks of a single logical name."""
        return await self._erase(name, EventSink(on_log, on_error))

    async def _erase(self, name: str, events: EventSink) -> bool:
        validate_name(name, self.config.max_key_length)
        meta_key = derive_meta_key(name)
        success = True

        total = 0
        try:
            record = MetadataManager.try_load_metadata(await self.store.get(meta_key))
            if record is not None:
                total = record.total_chunks
        except Exception as e:
            events.error(f"Error reading metadata of '{name}': {e}")
            success = False

        if not await self._remove(meta_key, events):
            success = False
        for index in range(total):
            if not await self._remove(derive_chunk_key(name, index), events):
                success = False

        orphans, swept = await self._sweep_orphans(name, total, events)
        success = success and swept

        events.log(f"Erased '{name}' ({total} chunk(s), {orphans} orphan(s))", "info")
        return success

    async def _sweep_orphans(self, name: str, start: int, events: EventSink):
        """
        Remove chunks past the metadata count left by aborted writes.

        Reads keys upward from start and stops after write_concurrency
        consecutive missing keys: a failed concurrent batch can leave gaps
        no wider than that.

        Returns:
            (number of orphans removed, whether the sweep completed cleanly)
        """
        removed = 0
        clean = True
        misses = 0
        for index in range(start, self.config.max_keys):
            key = derive_chunk_key(name, index)
            try:
                present = await self.store.get(key)
            except Exception as e:
                events.error(f"Error reading {key}: {e}")
                return removed, False
            if present is None:
                misses += 1
                if misses >= self.config.write_concurrency:
                    break
                continue
            misses = 0
            if await self._remove(key, events):
                removed += 1
            else:
                clean = False
        return removed, clean

    async def _remove(self, key: str, events: EventSink) -> bool:
        try:
            await self.store.remove(key)
        except Exception as e:
            events.error(f"Error removing {key}: {e}")
            return False
        return True
