"""
Base interface for knowledge graph storage.

Nodes are entities keyed by their folded name, edges are undirected
relationships keyed by the unordered pair of endpoint keys. Every write is
an idempotent upsert that replaces the stored record for its key; merging
is the caller's job.
"""

from abc import ABC, abstractmethod

from lightgraph.models.graph import Entity, Relationship


class GraphStorage(ABC):
    """Abstract base class for graph storage implementations."""

    async def initialize(self) -> None:
        """Initialize the graph store (create schema/constraints). No-op by default."""
        return None

    # ═══════════════════════════════════════════════════════════
    # NODE OPERATIONS (Entities)
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def upsert_entity(self, key: str, entity: Entity) -> None:
        """
        Create or replace the entity stored under key.

        Args:
            key: Entity identity key
            entity: Entity to store

        Raises:
            GraphStoreError: If the write fails
        """
        pass

    @abstractmethod
    async def get_entity(self, key: str) -> Entity | None:
        """
        Retrieve an entity by key.

        Args:
            key: Entity identity key

        Returns:
            Entity or None if not found
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # EDGE OPERATIONS (Relationships)
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def upsert_relationship(self, key: str, relationship: Relationship) -> None:
        """
        Create or replace the relationship stored under key.

        Both endpoint entities must already exist.

        Args:
            key: Relationship identity key
            relationship: Relationship to store

        Raises:
            GraphStoreError: If the write fails or an endpoint is missing
        """
        pass

    @abstractmethod
    async def get_relationship(self, key: str) -> Relationship | None:
        """
        Retrieve a relationship by pair key.

        Args:
            key: Relationship identity key

        Returns:
            Relationship or None if not found
        """
        pass

    @abstractmethod
    async def entity_edges(self, key: str) -> list[Relationship]:
        """
        Get every relationship incident to an entity.

        Args:
            key: Entity identity key

        Returns:
            Incident relationships (empty if the entity is unknown)
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # UTILITY METHODS
    # ═══════════════════════════════════════════════════════════

    async def count_entities(self) -> int:
        """Count stored entities. Optional for backends."""
        raise NotImplementedError

    async def count_relationships(self) -> int:
        """Count stored relationships. Optional for backends."""
        raise NotImplementedError

    async def close(self) -> None:
        """Close the connection to the graph store. No-op by default."""
        return None
