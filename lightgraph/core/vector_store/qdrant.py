"""
Qdrant vector store implementation.

One collection per record namespace ({prefix}_entities,
{prefix}_relationships, {prefix}_chunks). Point IDs are UUIDv5 of the
identity key so re-indexing a key overwrites its point.
"""

from uuid import NAMESPACE_DNS, UUID, uuid5

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, HnswConfigDiff, PointStruct, VectorParams

from lightgraph.core.embeddings.base import Embedder
from lightgraph.core.vector_store.base import VectorStorage
from lightgraph.utils.exceptions import VectorStoreError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)

NAMESPACES = ("entities", "relationships", "chunks")


class QdrantVectorStorage(VectorStorage):
    """
    Qdrant-backed vector storage.

    Features:
    - Cosine distance with HNSW indexing
    - Deterministic point IDs for idempotent upserts
    - Optional gRPC transport
    """

    def __init__(
        self,
        embedder: Embedder,
        host: str = "localhost",
        port: int = 6333,
        collection_prefix: str = "lightgraph",
        use_grpc: bool = False,
        score_threshold: float | None = 0.2,
        timeout: int = 30,
        vector_size: int | None = None,
    ):
        """
        Initialize Qdrant store.

        Args:
            embedder: Embedder used for indexed text and queries
            host: Qdrant host
            port: Qdrant port (6333 for HTTP, 6334 for gRPC)
            collection_prefix: Prefix for the three collection names
            use_grpc: Use gRPC connection
            score_threshold: Minimum similarity for search results
            timeout: Request timeout in seconds
            vector_size: Embedding dimension (detected from the embedder if None)
        """
        self.embedder = embedder
        self.host = host
        self.port = port
        self.collection_prefix = collection_prefix
        self.use_grpc = use_grpc
        self.score_threshold = score_threshold
        self.timeout = timeout
        self.vector_size = vector_size
        self.client: AsyncQdrantClient | None = None

    def collection(self, namespace: str) -> str:
        """Collection name for a record namespace."""
        return f"{self.collection_prefix}_{namespace}"

    def _to_uuid(self, id_str: str) -> str:
        """
        Convert string ID to UUID format consistently.

        Args:
            id_str: String identifier

        Returns:
            UUID string
        """
        try:
            UUID(id_str)
            return id_str
        except ValueError:
            return str(uuid5(NAMESPACE_DNS, id_str))

    async def connect(self) -> None:
        """
        Establish connection to Qdrant.

        Raises:
            VectorStoreError: If connection fails
        """
        if self.client is None:
            try:
                self.client = AsyncQdrantClient(
                    host=self.host,
                    port=self.port,
                    prefer_grpc=self.use_grpc,
                    timeout=self.timeout,
                )
            except Exception as e:
                logger.error(f"Failed to connect to Qdrant: {e}")
                raise VectorStoreError(f"Failed to connect to Qdrant: {e}") from e

    async def initialize(self) -> None:
        """
        Create the three collections if missing.

        Raises:
            VectorStoreError: If initialization fails
        """
        try:
            await self.connect()
            if self.vector_size is None:
                self.vector_size = await self.embedder.get_dimension()

            collections = await self.client.get_collections()
            existing = {col.name for col in collections.collections}

            for namespace in NAMESPACES:
                name = self.collection(namespace)
                if name in existing:
                    continue
                await self.client.create_collection(
                    collection_name=name,
                    vectors_config=VectorParams(
                        size=self.vector_size,
                        distance=Distance.COSINE,
                        hnsw_config=HnswConfigDiff(m=16, ef_construct=100),
                    ),
                )
                await self.client.create_payload_index(
                    collection_name=name, field_name="key", field_schema="keyword"
                )
        except VectorStoreError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize Qdrant collections: {e}")
            raise VectorStoreError(f"Failed to initialize Qdrant collections: {e}") from e

    async def _index(self, namespace: str, key: str, text: str) -> None:
        if not key:
            raise VectorStoreError("Vector record key cannot be empty")
        await self.connect()
        try:
            vector = await self.embedder.embed(text or key)
            await self.client.upsert(
                collection_name=self.collection(namespace),
                points=[
                    PointStruct(
                        id=self._to_uuid(key),
                        vector=vector,
                        payload={"key": key, "text": text},
                    )
                ],
                wait=True,
            )
        except Exception as e:
            logger.error(f"Failed to index {namespace} record {key}: {e}")
            raise VectorStoreError(f"Failed to index {namespace} record: {e}") from e

    async def _search(self, namespace: str, query: str, top_k: int) -> list[tuple[str, float]]:
        if not query.strip() or top_k <= 0:
            return []
        await self.connect()
        try:
            vector = await self.embedder.embed(query)
            response = await self.client.query_points(
                collection_name=self.collection(namespace),
                query=vector,
                limit=top_k,
                score_threshold=self.score_threshold,
                with_payload=True,
            )
        except Exception as e:
            logger.error(f"Qdrant search failed on {namespace}: {e}")
            raise VectorStoreError(f"Qdrant search failed: {e}") from e

        return [(point.payload["key"], float(point.score)) for point in response.points]

    async def index_entity(self, key: str, text: str) -> None:
        await self._index("entities", key, text)

    async def index_relationship(self, key: str, text: str) -> None:
        await self._index("relationships", key, text)

    async def index_chunk(self, key: str, text: str) -> None:
        await self._index("chunks", key, text)

    async def search_entities(self, query: str, top_k: int) -> list[tuple[str, float]]:
        return await self._search("entities", query, top_k)

    async def search_relationships(self, query: str, top_k: int) -> list[tuple[str, float]]:
        return await self._search("relationships", query, top_k)

    async def close(self) -> None:
        """Close Qdrant client."""
        if self.client:
            await self.client.close()
            self.client = None
