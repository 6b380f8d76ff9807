"""
Base interface for key-value chunk storage.

Holds the raw text of every chunk keyed by chunk ID so retrieval can turn
source chunk IDs back into content.
"""

from abc import ABC, abstractmethod

from lightgraph.models.document import Chunk


class KeyValueStorage(ABC):
    """Abstract base class for chunk storage implementations."""

    async def initialize(self) -> None:
        """Initialize the store (create tables). No-op by default."""
        return None

    @abstractmethod
    async def put_chunk(self, key: str, chunk: Chunk) -> None:
        """
        Create or replace the chunk stored under key.

        Args:
            key: Chunk ID
            chunk: Chunk to store

        Raises:
            KeyValueStoreError: If the write fails
        """
        pass

    @abstractmethod
    async def get_chunk(self, key: str) -> Chunk | None:
        """
        Retrieve a chunk by ID.

        Args:
            key: Chunk ID

        Returns:
            Chunk or None if not found
        """
        pass

    async def close(self) -> None:
        """Close the store. No-op by default."""
        return None
