"""
Base interface for vector storage.

Three namespaces of text records (entities, relationships, chunks), each
keyed by identity. Implementations own embedding: callers hand over text,
never vectors. Indexing an existing key overwrites its record.
"""

from abc import ABC, abstractmethod


class VectorStorage(ABC):
    """Abstract base class for vector storage implementations."""

    async def initialize(self) -> None:
        """
        Initialize the vector store (create collections/indices). No-op by default.

        Raises:
            VectorStoreError: If initialization fails
        """
        return None

    @abstractmethod
    async def index_entity(self, key: str, text: str) -> None:
        """
        Embed and store entity text under its identity key.

        Args:
            key: Entity identity key
            text: Name and description text

        Raises:
            VectorStoreError: If the upsert fails
        """
        pass

    @abstractmethod
    async def index_relationship(self, key: str, text: str) -> None:
        """
        Embed and store relationship text under its pair key.

        Args:
            key: Relationship identity key
            text: Keywords and description text

        Raises:
            VectorStoreError: If the upsert fails
        """
        pass

    @abstractmethod
    async def index_chunk(self, key: str, text: str) -> None:
        """
        Embed and store chunk text under its chunk ID.

        Args:
            key: Chunk ID
            text: Chunk content

        Raises:
            VectorStoreError: If the upsert fails
        """
        pass

    @abstractmethod
    async def search_entities(self, query: str, top_k: int) -> list[tuple[str, float]]:
        """
        Find the entities most similar to a query.

        Args:
            query: Query text
            top_k: Maximum results

        Returns:
            (key, score) pairs, best first
        """
        pass

    @abstractmethod
    async def search_relationships(self, query: str, top_k: int) -> list[tuple[str, float]]:
        """
        Find the relationships most similar to a query.

        Args:
            query: Query text
            top_k: Maximum results

        Returns:
            (key, score) pairs, best first
        """
        pass

    async def close(self) -> None:
        """Close the connection to the vector store. No-op by default."""
        return None
