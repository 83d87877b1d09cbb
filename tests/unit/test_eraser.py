"""Tests for the chunked eraser."""

import pytest

from chunkvault.core.contracts import Config
from chunkvault.core.errors import ChunkWriteError
from chunkvault.storage.eraser import ChunkedEraser
from chunkvault.storage.reader import ChunkedReader
from chunkvault.storage.writer import ChunkedWriter


@pytest.mark.asyncio
async def test_erase_then_read_returns_none(store, small_config, recorder):
    writer = ChunkedWriter(store, small_config)
    await writer.store_with_chunking("userShare", "s" * 42)
    await writer.store_with_chunking("walletId", "wallet-1234")
    store.data["unrelated"] = "keep"

    eraser = ChunkedEraser(store, small_config)
    assert await eraser.clear_chunked_storage(recorder.log, recorder.error)

    reader = ChunkedReader(store, small_config)
    assert await reader.retrieve_chunked_data("userShare") is None
    assert await reader.retrieve_chunked_data("walletId") is None
    assert list(store.keys()) == ["unrelated"]
    assert recorder.errors == []
    assert recorder.logs[-1] == ("Cleared chunked storage", "success")


@pytest.mark.asyncio
async def test_remove_failure_does_not_stop_other_keys(store, small_config, recorder):
    await ChunkedWriter(store, small_config).store_with_chunking("userShare", "s" * 42)
    store.fail_remove.add("userShare_chunk_1")

    eraser = ChunkedEraser(store, small_config, names=["userShare"])
    assert not await eraser.clear_chunked_storage(recorder.log, recorder.error)

    assert list(store.keys()) == ["userShare_chunk_1"]
    assert len(recorder.errors) == 1
    assert "userShare_chunk_1" in recorder.errors[0]
    assert recorder.logs[-1][1] == "error"


@pytest.mark.asyncio
async def test_orphans_from_aborted_write_are_swept(store, small_config):
    """Chunks written before a failed metadata write are removed too."""
    store.data["walletId_chunk_0"] = "orphan0"
    store.data["walletId_chunk_1"] = "orphan1"

    eraser = ChunkedEraser(store, small_config, names=["walletId"])
    assert await eraser.erase_entry("walletId")
    assert len(store) == 0


@pytest.mark.asyncio
async def test_unreadable_metadata_still_removes_keys(store, small_config, recorder):
    await ChunkedWriter(store, small_config).store_with_chunking("k", "x" * 25)
    store.fail_get.add("k_meta")

    eraser = ChunkedEraser(store, small_config, names=["k"])
    assert not await eraser.clear_chunked_storage(recorder.log, recorder.error)

    assert len(store) == 0
    assert "metadata" in recorder.errors[0]


@pytest.mark.asyncio
async def test_erase_absent_entries_succeeds(store):
    eraser = ChunkedEraser(store, Config())
    assert await eraser.clear_chunked_storage()
    assert eraser.names == ["userShare", "walletId"]


@pytest.mark.asyncio
async def test_orphans_past_gap_from_failed_concurrent_batch_are_swept(store):
    """A failed chunk in a concurrent batch leaves later chunks of that batch behind."""
    config = Config(max_value_size=10, value_headroom=0, write_concurrency=3)
    store.fail_set.add("k_chunk_1")
    with pytest.raises(ChunkWriteError):
        await ChunkedWriter(store, config).store_with_chunking("k", "x" * 30)
    assert sorted(store.keys()) == ["k_chunk_0", "k_chunk_2"]

    eraser = ChunkedEraser(store, config, names=["k"])
    assert await eraser.clear_chunked_storage()
    assert len(store) == 0


@pytest.mark.asyncio
async def test_leftovers_from_failed_stale_cleanup_are_swept(store, small_config):
    writer = ChunkedWriter(store, small_config)
    await writer.store_with_chunking("k", "a" * 45)
    store.fail_remove.add("k_chunk_3")
    await writer.store_with_chunking("k", "b")
    store.fail_remove.clear()

    eraser = ChunkedEraser(store, small_config, names=["k"])
    assert await eraser.clear_chunked_storage()
    assert len(store) == 0


@pytest.mark.asyncio
async def test_sweep_stops_after_concurrency_wide_gap(store):
    config = Config(max_value_size=10, value_headroom=0, write_concurrency=2)
    store.data["k_chunk_0"] = "a"
    store.data["k_chunk_3"] = "unrelated-to-sweep"

    eraser = ChunkedEraser(store, config, names=["k"])
    assert await eraser.erase_entry("k")
    assert list(store.keys()) == ["k_chunk_3"]
