"""
Tests for the chunk key-value stores (in-memory and SQLite).
"""

import pytest

from lightgraph.core.kv_store import InMemoryKeyValueStorage, SQLiteKeyValueStorage
from lightgraph.models import Chunk
from lightgraph.utils import KeyValueStoreError


@pytest.fixture
def chunk() -> Chunk:
    return Chunk(id="chunk-1", content="Alice works at Acme.", order_index=0, document_id="doc-1", tokens=5)


@pytest.fixture
async def sqlite_store(tmp_path):
    store = SQLiteKeyValueStorage(db_path=str(tmp_path / "chunks.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.mark.unit
@pytest.mark.asyncio
class TestInMemoryKeyValueStorage:
    """Dictionary-backed chunk storage."""

    async def test_put_and_get(self, chunk):
        store = InMemoryKeyValueStorage()

        await store.put_chunk(chunk.id, chunk)

        assert await store.get_chunk("chunk-1") == chunk
        assert await store.get_chunk("missing") is None
        assert len(store) == 1
        assert store.keys() == ["chunk-1"]

    async def test_put_overwrites(self, chunk):
        store = InMemoryKeyValueStorage()
        await store.put_chunk(chunk.id, chunk)

        await store.put_chunk(chunk.id, chunk.model_copy(update={"content": "Changed"}))

        assert (await store.get_chunk("chunk-1")).content == "Changed"
        assert len(store) == 1

    async def test_empty_key_rejected(self, chunk):
        with pytest.raises(KeyValueStoreError):
            await InMemoryKeyValueStorage().put_chunk("", chunk)


@pytest.mark.unit
@pytest.mark.sqlite
@pytest.mark.asyncio
class TestSQLiteKeyValueStorage:
    """aiosqlite-backed chunk storage."""

    async def test_put_and_get(self, sqlite_store, chunk):
        await sqlite_store.put_chunk(chunk.id, chunk)

        assert await sqlite_store.get_chunk("chunk-1") == chunk
        assert await sqlite_store.get_chunk("missing") is None

    async def test_put_overwrites(self, sqlite_store, chunk):
        await sqlite_store.put_chunk(chunk.id, chunk)
        await sqlite_store.put_chunk(chunk.id, chunk.model_copy(update={"tokens": 9}))

        assert (await sqlite_store.get_chunk("chunk-1")).tokens == 9

    async def test_persists_across_connections(self, tmp_path, chunk):
        path = str(tmp_path / "nested" / "chunks.db")
        first = SQLiteKeyValueStorage(db_path=path)
        await first.initialize()
        await first.put_chunk(chunk.id, chunk)
        await first.close()

        second = SQLiteKeyValueStorage(db_path=path)
        await second.initialize()
        try:
            assert await second.get_chunk("chunk-1") == chunk
        finally:
            await second.close()

    async def test_initialize_is_idempotent(self, sqlite_store, chunk):
        await sqlite_store.put_chunk(chunk.id, chunk)

        await sqlite_store.initialize()

        assert await sqlite_store.get_chunk("chunk-1") == chunk

    async def test_read_without_schema_wrapped(self, tmp_path):
        store = SQLiteKeyValueStorage(db_path=str(tmp_path / "empty.db"))
        try:
            with pytest.raises(KeyValueStoreError, match="Failed to read chunk"):
                await store.get_chunk("chunk-1")
        finally:
            await store.close()

    async def test_empty_key_rejected(self, sqlite_store, chunk):
        with pytest.raises(KeyValueStoreError):
            await sqlite_store.put_chunk("", chunk)
