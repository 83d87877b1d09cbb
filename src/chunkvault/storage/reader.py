"""
Chunked reader for Chunkvault.

Outcomes:
- absent: no metadata record; returns None without reporting an error
- corrupt: metadata present but a chunk is missing, unreadable, or the
  reassembled text fails the length/checksum check; reported and returns None
- ok: the exact stored value
"""

import asyncio
from typing import List, Optional, Union

from chunkvault.core.contracts import Config, EntryReport, ErrorHandler, LogFunction
from chunkvault.core.errors import ChunkReadError
from chunkvault.core.keys import derive_chunk_key, derive_meta_key, validate_name
from chunkvault.storage.backends import KeyValueStore
from chunkvault.storage.codec import decode_value, join
from chunkvault.storage.events import EventSink
from chunkvault.storage.metadata import MetadataManager

ChunkResult = Union[str, None, Exception]


class ChunkedReader:
    """Reads a logical entry back from its metadata record and chunks."""

    def __init__(self, store: KeyValueStore, config: Optional[Config] = None):
        self.store = store
        self.config = config or Config()

    async def retrieve_chunked_data(
        self,
        name: str,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> Optional[str]:
        """
        Reassemble the value stored under a logical name.

        Args:
            name: Logical entry name
            on_log: Progress callback (message, level)
            on_error: Failure callback (message); called for corrupt entries only

        Returns:
            The stored value, or None if the entry is absent or corrupt

        Raises:
            ChunkReadError: If the host store fails while reading the metadata
        """
        events = EventSink(on_log, on_error)
        validate_name(name, self.config.max_key_length)

        raw = await self._read_metadata(name, events)
        if raw is None:
            events.log(f"No data found for '{name}'", "info")
            return None

        try:
            record = MetadataManager.load_metadata(raw)
        except ValueError as e:
            return self._corrupt(name, f"unreadable metadata ({e})", events)

        events.log(f"Retrieving '{name}' from {record.total_chunks} chunk(s)...", "info")
        results = await self._read_chunks(name, record.total_chunks)

        problems = describe_problems(name, results)
        if problems:
            return self._corrupt(name, "; ".join(problems), events)

        stored_text = join(results)
        if not MetadataManager.validate_payload(record, stored_text):
            return self._corrupt(name, "length or checksum mismatch", events)

        try:
            value = decode_value(stored_text, record.encoding)
        except ValueError as e:
            return self._corrupt(name, f"cannot decode {record.encoding} value ({e})", events)

        events.log(f"Retrieved '{name}' ({record.total_chunks} chunk(s))", "success")
        return value

    async def validate_entry(self, name: str) -> EntryReport:
        """
        Inspect an entry without reporting through callbacks.

        Returns:
            EntryReport with state "absent", "ok" or "corrupt"
        """
        validate_name(name, self.config.max_key_length)
        raw = await self._read_metadata(name, EventSink())
        if raw is None:
            return EntryReport(name=name, state="absent")

        try:
            record = MetadataManager.load_metadata(raw)
        except ValueError as e:
            return EntryReport(name=name, state="corrupt", errors=[f"Unreadable metadata: {e}"])

        results = await self._read_chunks(name, record.total_chunks)
        report = EntryReport(name=name, state="ok", metadata=record)
        for index, result in enumerate(results):
            if isinstance(result, str):
                report.present_chunks.append(index)
            else:
                report.missing_chunks.append(index)
        report.errors.extend(describe_problems(name, results))

        if not report.errors:
            stored_text = join(results)
            if not MetadataManager.validate_payload(record, stored_text):
                report.errors.append("Length or checksum mismatch")
            else:
                try:
                    decode_value(stored_text, record.encoding)
                except ValueError as e:
                    report.errors.append(f"Cannot decode {record.encoding} value: {e}")

        if report.errors:
            report.state = "corrupt"
        return report

    async def _read_metadata(self, name: str, events: EventSink) -> Optional[str]:
        meta_key = derive_meta_key(name)
        try:
            return await self.store.get(meta_key)
        except Exception as e:
            message = f"Error reading metadata of '{name}': {e}"
            events.error(message)
            raise ChunkReadError(name, meta_key, message) from e

    async def _read_chunks(self, name: str, total: int) -> List[ChunkResult]:
        results: List[ChunkResult] = []
        size = self.config.read_concurrency
        for start in range(0, total, size):
            indices = range(start, min(start + size, total))
            batch = await asyncio.gather(
                *(self.store.get(derive_chunk_key(name, i)) for i in indices),
                return_exceptions=True,
            )
            for result in batch:
                if isinstance(result, BaseException) and not isinstance(result, Exception):
                    raise result
            results.extend(batch)
        return results

    def _corrupt(self, name: str, detail: str, events: EventSink) -> None:
        events.error(f"Corrupt entry '{name}': {detail}")
        return None


def describe_problems(name: str, results: List[ChunkResult]) -> List[str]:
    """Messages for chunks that are missing or failed to read."""
    total = len(results)
    missing = [i for i, r in enumerate(results) if r is None]
    problems = []
    if missing:
        listed = ", ".join(str(i) for i in missing)
        problems.append(f"missing chunk(s) {listed} of {total}")
    for index, result in enumerate(results):
        if isinstance(result, Exception):
            problems.append(f"chunk {derive_chunk_key(name, index)} unreadable ({result})")
    return problems
