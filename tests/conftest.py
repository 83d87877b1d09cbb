"""Shared fixtures: in-memory host store with injectable failures."""

import pytest

from chunkvault.core import Config
from chunkvault.storage.backends import MemoryStore


class FlakyStore(MemoryStore):
    """MemoryStore that fails on chosen keys and records every call."""

    def __init__(self, config=None):
        super().__init__(config)
        self.fail_get = set()
        self.fail_set = set()
        self.fail_remove = set()
        self.calls = []

    async def get(self, key):
        self.calls.append(("get", key))
        if key in self.fail_get:
            raise ConnectionError(f"get {key} failed")
        return await super().get(key)

    async def set(self, key, value):
        self.calls.append(("set", key))
        if key in self.fail_set:
            raise ConnectionError(f"set {key} failed")
        await super().set(key, value)

    async def remove(self, key):
        self.calls.append(("remove", key))
        if key in self.fail_remove:
            raise ConnectionError(f"remove {key} failed")
        await super().remove(key)


class Recorder:
    """Collects log and error callback events."""

    def __init__(self):
        self.logs = []
        self.errors = []

    def log(self, message, level):
        self.logs.append((message, level))

    def error(self, message):
        self.errors.append(message)


@pytest.fixture
def small_config():
    """Ten-character chunks, host limits otherwise default."""
    return Config(max_value_size=10, value_headroom=0)


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def recorder():
    return Recorder()
