"""
ChunkedStorage: one host store, one set of known names, three operations.
"""

from typing import Iterable, List, Optional

from chunkvault.core.contracts import Config, EntryReport, ErrorHandler, LogFunction
from chunkvault.core.keys import validate_name
from chunkvault.storage.backends import KeyValueStore
from chunkvault.storage.eraser import ChunkedEraser
from chunkvault.storage.reader import ChunkedReader
from chunkvault.storage.writer import ChunkedWriter


class ChunkedStorage:
    """
    Facade over ChunkedWriter, ChunkedReader and ChunkedEraser.

    Writes to the same name must be serialised by the caller; overlapping
    writes to one name are last-write-wins with no isolation. Different
    names never share keys and may be written concurrently.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: Optional[Config] = None,
        names: Optional[Iterable[str]] = None,
    ):
        """
        Initialize storage.

        Args:
            store: Host key-value store
            config: Limits and chunking options
            names: Logical names erased by clear_chunked_storage
                (defaults to config.known_names)
        """
        self.store = store
        self.config = config or Config()
        self.names: List[str] = []
        for name in names if names is not None else self.config.known_names:
            self._remember(name)
        self.writer = ChunkedWriter(store, self.config)
        self.reader = ChunkedReader(store, self.config)

    def _remember(self, name: str):
        validate_name(name, self.config.max_key_length)
        if name not in self.names:
            self.names.append(name)

    async def store_with_chunking(
        self,
        name: str,
        value: str,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        """Store value under name; the name joins the known set."""
        self._remember(name)
        await self.writer.store_with_chunking(name, value, on_log, on_error)

    async def retrieve_chunked_data(
        self,
        name: str,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> Optional[str]:
        """Value stored under name, or None if absent or corrupt."""
        return await self.reader.retrieve_chunked_data(name, on_log, on_error)

    async def clear_chunked_storage(
        self,
        on_log: Optional[LogFunction] = None,
        on_error: Optional[ErrorHandler] = None,
    ) -> bool:
        """Erase every known name. True if every key was removed."""
        eraser = ChunkedEraser(self.store, self.config, self.names)
        return await eraser.clear_chunked_storage(on_log, on_error)

    async def inspect(self, name: str) -> EntryReport:
        return await self.reader.validate_entry(name)


async def store_with_chunking(
    store: KeyValueStore,
    name: str,
    value: str,
    on_log: Optional[LogFunction] = None,
    on_error: Optional[ErrorHandler] = None,
    config: Optional[Config] = None,
) -> None:
    await ChunkedWriter(store, config).store_with_chunking(name, value, on_log, on_error)


async def retrieve_chunked_data(
    store: KeyValueStore,
    name: str,
    on_log: Optional[LogFunction] = None,
    on_error: Optional[ErrorHandler] = None,
    config: Optional[Config] = None,
) -> Optional[str]:
    return await ChunkedReader(store, config).retrieve_chunked_data(name, on_log, on_error)


async def clear_chunked_storage(
    store: KeyValueStore,
    on_log: Optional[LogFunction] = None,
    on_error: Optional[ErrorHandler] = None,
    config: Optional[Config] = None,
    names: Optional[Iterable[str]] = None,
) -> bool:
    return await ChunkedEraser(store, config, names).clear_chunked_storage(on_log, on_error)
