"""
Storage bundle - the three stores the insert and query pipelines write to and read from.

Graph, vector and key-value storage are independent systems; writes across
them are not transactional. The bundle only groups them and manages their
lifecycle together.
"""

import asyncio

from lightgraph.core.graph_store.base import GraphStorage
from lightgraph.core.kv_store.base import KeyValueStorage
from lightgraph.core.vector_store.base import VectorStorage
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class Storage:
    """
    Graph, vector and key-value storage used together by the pipelines.

    Usage:
        storage = Storage(graph=InMemoryGraphStorage(),
                          vector=InMemoryVectorStorage(embedder),
                          kv=InMemoryKeyValueStorage())
        await storage.initialize()
    """

    def __init__(
        self,
        graph: GraphStorage,
        vector: VectorStorage,
        kv: KeyValueStorage,
    ):
        """
        Initialize the storage bundle.

        Args:
            graph: Knowledge graph storage (entities and relationships)
            vector: Vector index over entities, relationships and chunks
            kv: Chunk text storage
        """
        self.graph = graph
        self.vector = vector
        self.kv = kv

    async def initialize(self) -> None:
        """Initialize all three stores."""
        await asyncio.gather(
            self.graph.initialize(),
            self.vector.initialize(),
            self.kv.initialize(),
        )
        logger.bind(
            graph=type(self.graph).__name__,
            vector=type(self.vector).__name__,
            kv=type(self.kv).__name__,
        ).info("Storage initialized")

    async def close(self) -> None:
        """Close all three stores, even if one of them fails to close."""
        results = await asyncio.gather(
            self.graph.close(),
            self.vector.close(),
            self.kv.close(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Error while closing storage: {result}")
