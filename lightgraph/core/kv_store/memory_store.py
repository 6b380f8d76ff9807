"""In-memory chunk store."""

from lightgraph.core.kv_store.base import KeyValueStorage
from lightgraph.models.document import Chunk
from lightgraph.utils.exceptions import KeyValueStoreError


class InMemoryKeyValueStorage(KeyValueStorage):
    """Dictionary-backed chunk storage. Chunks are immutable, so no copying is needed."""

    def __init__(self):
        self._chunks: dict[str, Chunk] = {}

    async def put_chunk(self, key: str, chunk: Chunk) -> None:
        if not key:
            raise KeyValueStoreError("Chunk key cannot be empty")
        self._chunks[key] = chunk

    async def get_chunk(self, key: str) -> Chunk | None:
        return self._chunks.get(key)

    def __len__(self) -> int:
        return len(self._chunks)

    def keys(self) -> list[str]:
        """All stored chunk IDs, sorted."""
        return sorted(self._chunks)
