"""
In-memory vector store.

Brute-force cosine similarity over numpy arrays. Reference implementation
of VectorStorage for tests and small corpora.
"""

import numpy as np

from lightgraph.core.embeddings.base import Embedder
from lightgraph.core.vector_store.base import VectorStorage
from lightgraph.utils.exceptions import VectorStoreError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)

ENTITIES = "entities"
RELATIONSHIPS = "relationships"
CHUNKS = "chunks"


class InMemoryVectorStorage(VectorStorage):
    """
    Vector storage keeping normalized embeddings in process memory.

    Scores are cosine similarities; results at or below score_threshold are
    dropped.
    """

    def __init__(self, embedder: Embedder, score_threshold: float = 0.0):
        """
        Initialize in-memory vector store.

        Args:
            embedder: Embedder used for indexed text and queries
            score_threshold: Minimum similarity for search results
        """
        self.embedder = embedder
        self.score_threshold = score_threshold
        self._vectors: dict[str, dict[str, np.ndarray]] = {
            ENTITIES: {},
            RELATIONSHIPS: {},
            CHUNKS: {},
        }
        self._texts: dict[str, dict[str, str]] = {ENTITIES: {}, RELATIONSHIPS: {}, CHUNKS: {}}

    async def _embed(self, text: str) -> np.ndarray:
        try:
            vector = np.asarray(await self.embedder.embed(text), dtype=np.float32)
        except Exception as e:
            raise VectorStoreError(f"Failed to embed text: {e}") from e
        norm = np.linalg.norm(vector)
        return vector / norm if norm > 0 else vector

    async def _index(self, namespace: str, key: str, text: str) -> None:
        if not key:
            raise VectorStoreError("Vector record key cannot be empty")
        self._vectors[namespace][key] = await self._embed(text or key)
        self._texts[namespace][key] = text

    async def _search(self, namespace: str, query: str, top_k: int) -> list[tuple[str, float]]:
        records = self._vectors[namespace]
        if not records or not query.strip() or top_k <= 0:
            return []

        query_vector = await self._embed(query)
        keys = list(records)
        matrix = np.stack([records[key] for key in keys])
        scores = matrix @ query_vector

        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")
        results = []
        for index in order[:top_k]:
            score = float(scores[index])
            if score <= self.score_threshold:
                break
            results.append((keys[index], score))
        return results

    async def index_entity(self, key: str, text: str) -> None:
        await self._index(ENTITIES, key, text)

    async def index_relationship(self, key: str, text: str) -> None:
        await self._index(RELATIONSHIPS, key, text)

    async def index_chunk(self, key: str, text: str) -> None:
        await self._index(CHUNKS, key, text)

    async def search_entities(self, query: str, top_k: int) -> list[tuple[str, float]]:
        return await self._search(ENTITIES, query, top_k)

    async def search_relationships(self, query: str, top_k: int) -> list[tuple[str, float]]:
        return await self._search(RELATIONSHIPS, query, top_k)

    def count(self, namespace: str) -> int:
        """Number of records in a namespace (entities, relationships or chunks)."""
        return len(self._vectors[namespace])

    def text(self, namespace: str, key: str) -> str | None:
        """Indexed text for a key, if present."""
        return self._texts[namespace].get(key)
