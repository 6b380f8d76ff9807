"""
Neo4j graph store implementation.

Entities are (:Entity {key}) nodes, relationships are undirected
[:RELATED {key}] edges stored from entity_a to entity_b.
"""

from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase

from lightgraph.core.graph_store.base import GraphStorage
from lightgraph.models.graph import Entity, Relationship
from lightgraph.utils.exceptions import GraphStoreError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class Neo4jGraphStorage(GraphStorage):
    """
    Neo4j-based knowledge graph.

    Features:
    - Unique constraint on entity key
    - MERGE-based idempotent upserts
    - Native traversal for incident edges
    """

    def __init__(
        self,
        uri: str = "bolt://localhost:7687",
        username: str = "neo4j",
        password: str = "password",
        database: str = "neo4j",
    ):
        """
        Initialize Neo4j graph store.

        Args:
            uri: Neo4j connection URI
            username: Username
            password: Password
            database: Database name
        """
        self.uri = uri
        self.username = username
        self.password = password
        self.database = database
        self.driver: AsyncDriver | None = None

    async def connect(self) -> None:
        """
        Establish connection to Neo4j.

        Raises:
            GraphStoreError: If connection fails
        """
        if self.driver is None:
            try:
                self.driver = AsyncGraphDatabase.driver(
                    self.uri,
                    auth=(self.username, self.password),
                )
            except Exception as e:
                logger.error(f"Failed to connect to Neo4j: {e}")
                raise GraphStoreError(f"Failed to connect to Neo4j: {e}") from e

    async def initialize(self) -> None:
        """
        Create constraints and indexes.

        Raises:
            GraphStoreError: If initialization fails
        """
        try:
            await self.connect()

            async with self.driver.session(database=self.database) as session:
                await session.run(
                    "CREATE CONSTRAINT entity_key IF NOT EXISTS "
                    "FOR (e:Entity) REQUIRE e.key IS UNIQUE"
                )
                await session.run(
                    "CREATE INDEX related_key IF NOT EXISTS FOR ()-[r:RELATED]-() ON (r.key)"
                )
        except Exception as e:
            logger.error(f"Failed to initialize Neo4j: {e}")
            raise GraphStoreError(f"Failed to initialize Neo4j: {e}") from e

    async def _run(self, query: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a query and return all records as dicts, wrapping driver errors."""
        await self.connect()
        try:
            async with self.driver.session(database=self.database) as session:
                result = await session.run(query, params)
                return [record.data() async for record in result]
        except Exception as e:
            logger.error(f"Neo4j query failed: {e}")
            raise GraphStoreError(f"Neo4j query failed: {e}") from e

    # ═══════════════════════════════════════════════════════════
    # NODE OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def upsert_entity(self, key: str, entity: Entity) -> None:
        await self._run(
            """
            MERGE (e:Entity {key: $key})
            SET e.name = $name,
                e.type = $type,
                e.description = $description,
                e.source_chunk_ids = $source_chunk_ids
            """,
            {
                "key": key,
                "name": entity.name,
                "type": entity.type,
                "description": entity.description,
                "source_chunk_ids": entity.source_chunk_ids,
            },
        )

    async def get_entity(self, key: str) -> Entity | None:
        records = await self._run("MATCH (e:Entity {key: $key}) RETURN e", {"key": key})
        if not records:
            return None
        return self._node_to_entity(records[0]["e"])

    # ═══════════════════════════════════════════════════════════
    # EDGE OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def upsert_relationship(self, key: str, relationship: Relationship) -> None:
        records = await self._run(
            """
            MATCH (a:Entity {key: $entity_a})
            MATCH (b:Entity {key: $entity_b})
            MERGE (a)-[r:RELATED {key: $key}]->(b)
            SET r.entity_a = $entity_a,
                r.entity_b = $entity_b,
                r.description = $description,
                r.keywords = $keywords,
                r.weight = $weight,
                r.source_chunk_ids = $source_chunk_ids
            RETURN r.key AS key
            """,
            {
                "key": key,
                "entity_a": relationship.entity_a,
                "entity_b": relationship.entity_b,
                "description": relationship.description,
                "keywords": relationship.keywords,
                "weight": relationship.weight,
                "source_chunk_ids": relationship.source_chunk_ids,
            },
        )
        if not records:
            raise GraphStoreError(
                f"Cannot store relationship {key}: endpoint entity missing",
                context={"relationship": key},
            )

    async def get_relationship(self, key: str) -> Relationship | None:
        records = await self._run(
            "MATCH ()-[r:RELATED {key: $key}]->() RETURN r LIMIT 1", {"key": key}
        )
        if not records:
            return None
        return self._edge_to_relationship(records[0]["r"])

    async def entity_edges(self, key: str) -> list[Relationship]:
        records = await self._run(
            """
            MATCH (e:Entity {key: $key})-[r:RELATED]-()
            RETURN DISTINCT r
            ORDER BY r.key
            """,
            {"key": key},
        )
        return [self._edge_to_relationship(record["r"]) for record in records]

    # ═══════════════════════════════════════════════════════════
    # UTILITY METHODS
    # ═══════════════════════════════════════════════════════════

    async def count_entities(self) -> int:
        records = await self._run("MATCH (e:Entity) RETURN count(e) AS count", {})
        return records[0]["count"] if records else 0

    async def count_relationships(self) -> int:
        records = await self._run("MATCH ()-[r:RELATED]->() RETURN count(r) AS count", {})
        return records[0]["count"] if records else 0

    async def close(self) -> None:
        """Close the Neo4j driver."""
        if self.driver:
            await self.driver.close()
            self.driver = None

    @staticmethod
    def _node_to_entity(node: dict[str, Any]) -> Entity:
        return Entity(
            name=node["name"],
            type=node.get("type") or "UNKNOWN",
            description=node.get("description") or "",
            source_chunk_ids=list(node.get("source_chunk_ids") or []),
        )

    @staticmethod
    def _edge_to_relationship(edge: dict[str, Any]) -> Relationship:
        return Relationship(
            entity_a=edge["entity_a"],
            entity_b=edge["entity_b"],
            description=edge.get("description") or "",
            keywords=list(edge.get("keywords") or []),
            weight=float(edge.get("weight") or 0.0),
            source_chunk_ids=list(edge.get("source_chunk_ids") or []),
        )
