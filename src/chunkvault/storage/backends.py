"""
Host key-value store adapters for Chunkvault.

The host store offers only per-key get/set/remove, a per-value size limit
and a bounded key count. There is no listing, no multi-key transaction and
no size query.
"""

import json
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Protocol, Union, runtime_checkable

from chunkvault.core.contracts import Config
from chunkvault.core.errors import StoreLimitError


@runtime_checkable
class KeyValueStore(Protocol):
    """Async host store primitive. Any of the three calls may raise."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryStore:
    """
    In-memory host store that enforces the same limits as the real host.

    Used as the deterministic fake in tests and for embedding.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.data: Dict[str, str] = {}

    def _check_limits(self, key: str, value: str):
        if not key or len(key) > self.config.max_key_length:
            raise StoreLimitError(f"Key length {len(key)} outside 1..{self.config.max_key_length}")
        if len(value) > self.config.max_value_size:
            raise StoreLimitError(
                f"Value for {key!r} is {len(value)} characters, limit is {self.config.max_value_size}"
            )
        if key not in self.data and len(self.data) >= self.config.max_keys:
            raise StoreLimitError(f"Key count limit {self.config.max_keys} reached")

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._check_limits(key, value)
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(sorted(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def __contains__(self, key: str) -> bool:
        return key in self.data


class JsonFileStore(MemoryStore):
    """
    File-backed host store: a single JSON object on disk.

    Every mutation is written through atomically (temp file then replace).
    """

    def __init__(self, path: Union[str, Path], config: Optional[Config] = None):
        super().__init__(config)
        self.path = Path(path)
        if self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError(f"Store file {self.path} does not contain a JSON object")
            for key, value in loaded.items():
                if not isinstance(value, str):
                    raise ValueError(
                        f"Store file {self.path} holds a non-string value under {key!r}"
                    )
            self.data = dict(loaded)

    def _flush(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self.data, f, ensure_ascii=False, indent=2, sort_keys=True)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    async def set(self, key: str, value: str) -> None:
        await super().set(key, value)
        self._flush()

    async def remove(self, key: str) -> None:
        if key in self.data:
            await super().remove(key)
            self._flush()
