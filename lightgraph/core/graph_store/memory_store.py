"""
In-memory graph store.

Reference implementation of GraphStorage for tests, notebooks and small
corpora. Records are deep-copied on the way in and out so callers never
share mutable state with the store.
"""

from collections import defaultdict

from lightgraph.core.graph_store.base import GraphStorage
from lightgraph.models.graph import Entity, Relationship
from lightgraph.utils.exceptions import GraphStoreError


class InMemoryGraphStorage(GraphStorage):
    """Dictionary-backed graph with an adjacency index for incident edges."""

    def __init__(self):
        self._entities: dict[str, Entity] = {}
        self._relationships: dict[str, Relationship] = {}
        self._adjacency: dict[str, set[str]] = defaultdict(set)

    async def upsert_entity(self, key: str, entity: Entity) -> None:
        if not key:
            raise GraphStoreError("Entity key cannot be empty")
        self._entities[key] = entity.model_copy(deep=True)

    async def get_entity(self, key: str) -> Entity | None:
        entity = self._entities.get(key)
        return entity.model_copy(deep=True) if entity else None

    async def upsert_relationship(self, key: str, relationship: Relationship) -> None:
        if not key:
            raise GraphStoreError("Relationship key cannot be empty")
        for endpoint in relationship.endpoints:
            if endpoint not in self._entities:
                raise GraphStoreError(
                    f"Cannot store relationship {key}: endpoint {endpoint!r} does not exist",
                    context={"relationship": key, "endpoint": endpoint},
                )
        self._relationships[key] = relationship.model_copy(deep=True)
        for endpoint in relationship.endpoints:
            self._adjacency[endpoint].add(key)

    async def get_relationship(self, key: str) -> Relationship | None:
        relationship = self._relationships.get(key)
        return relationship.model_copy(deep=True) if relationship else None

    async def entity_edges(self, key: str) -> list[Relationship]:
        return [
            self._relationships[edge_key].model_copy(deep=True)
            for edge_key in sorted(self._adjacency.get(key, ()))
        ]

    async def count_entities(self) -> int:
        return len(self._entities)

    async def count_relationships(self) -> int:
        return len(self._relationships)

    def entity_keys(self) -> list[str]:
        """All stored entity keys, sorted."""
        return sorted(self._entities)

    def relationship_keys(self) -> list[str]:
        """All stored relationship keys, sorted."""
        return sorted(self._relationships)
