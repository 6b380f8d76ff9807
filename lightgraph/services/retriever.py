"""
Hybrid retriever - local (entity-centric) and global (relationship-centric) legs.

Local leg: low-level keywords -> similar entities -> incident relationships
and the chunks of both.
Global leg: high-level keywords -> similar relationships -> endpoint
entities and the relationships' chunks.

Relationships and chunks found through an item inherit that item's score;
when reached through several items they keep the highest score. Keys that
no longer resolve in graph or key-value storage are skipped.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from pydantic import BaseModel, Field

from lightgraph.config import QueryConfig
from lightgraph.core.storage import Storage
from lightgraph.models.graph import Entity, Relationship
from lightgraph.models.query import (
    KeywordSets,
    ScoredEntity,
    ScoredRelationship,
    SourceChunk,
)
from lightgraph.utils.exceptions import RetrievalError
from lightgraph.utils.logger import get_logger
from lightgraph.utils.timeouts import with_timeout

logger = get_logger(__name__)

T = TypeVar("T")


class LegResult(BaseModel):
    """Items found by one retrieval leg, in discovery order."""

    entities: list[ScoredEntity] = Field(default_factory=list)
    relationships: list[ScoredRelationship] = Field(default_factory=list)
    sources: list[SourceChunk] = Field(default_factory=list)


class RetrievalResult(BaseModel):
    """Raw output of both legs, before deduplication and budgeting."""

    local_leg: LegResult = Field(default_factory=LegResult)
    global_leg: LegResult = Field(default_factory=LegResult)


class _Collector:
    """Accumulates scored items keyed by identity, keeping the max score."""

    def __init__(self):
        self.entities: dict[str, tuple[Entity, float]] = {}
        self.relationships: dict[str, tuple[Relationship, float]] = {}
        self.chunk_scores: dict[str, float] = {}

    def add_entity(self, entity: Entity, score: float) -> None:
        current = self.entities.get(entity.key)
        if current is None or score > current[1]:
            self.entities[entity.key] = (entity, score)

    def add_relationship(self, relationship: Relationship, score: float) -> None:
        current = self.relationships.get(relationship.key)
        if current is None or score > current[1]:
            self.relationships[relationship.key] = (relationship, score)

    def add_chunks(self, chunk_ids: list[str], score: float, limit: int) -> None:
        for chunk_id in chunk_ids[:limit]:
            if score > self.chunk_scores.get(chunk_id, float("-inf")):
                self.chunk_scores[chunk_id] = score


class HybridRetriever:
    """Runs the local and global retrieval legs against the storage bundle."""

    def __init__(self, storage: Storage, config: QueryConfig, timeout: float | None = None):
        """
        Initialize the retriever.

        Args:
            storage: Graph, vector and key-value stores
            config: Query configuration (mode, top_k, related_chunks_per_item)
            timeout: Optional per-call timeout in seconds
        """
        self.storage = storage
        self.config = config
        self.timeout = timeout

    async def _call(self, awaitable: Awaitable[T]) -> T:
        return await with_timeout(awaitable, self.timeout)

    async def retrieve(self, keywords: KeywordSets) -> RetrievalResult:
        """
        Run the legs selected by the query mode concurrently.

        A failing leg degrades to an empty result with a warning.

        Args:
            keywords: Keyword sets for the query

        Returns:
            Items found by each leg

        Raises:
            RetrievalError: If every leg that ran failed
        """
        legs: dict[str, Awaitable[LegResult]] = {}
        if self.config.mode in ("hybrid", "local"):
            legs["local"] = self.local_leg(keywords.low_level)
        if self.config.mode in ("hybrid", "global"):
            legs["global"] = self.global_leg(keywords.high_level)

        outcomes = await asyncio.gather(*legs.values(), return_exceptions=True)

        results: dict[str, LegResult] = {}
        errors: dict[str, BaseException] = {}
        for name, outcome in zip(legs, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning(f"Retrieval {name} leg failed, continuing without it: {outcome}")
                errors[name] = outcome
                results[name] = LegResult()
            else:
                results[name] = outcome

        if errors and len(errors) == len(legs):
            first = next(iter(errors.values()))
            raise RetrievalError(
                f"All retrieval legs failed: {', '.join(f'{n}: {e}' for n, e in errors.items())}",
                context={"mode": self.config.mode, "legs": list(errors)},
            ) from first

        return RetrievalResult(
            local_leg=results.get("local", LegResult()),
            global_leg=results.get("global", LegResult()),
        )

    async def local_leg(self, low_level: list[str]) -> LegResult:
        """Entity-centric retrieval from low-level keywords."""
        if not low_level:
            return LegResult()

        graph = self.storage.graph
        limit = self.config.related_chunks_per_item
        hits = await self._call(
            self.storage.vector.search_entities(", ".join(low_level), self.config.top_k)
        )

        entities = await asyncio.gather(*(self._call(graph.get_entity(key)) for key, _ in hits))
        edges = await asyncio.gather(
            *(self._call(graph.entity_edges(key)) for key, _ in hits)
        )

        collector = _Collector()
        for (key, score), entity, incident in zip(hits, entities, edges, strict=True):
            if entity is None:
                logger.debug(f"Skipping stale entity hit {key!r}")
                continue
            collector.add_entity(entity, score)
            collector.add_chunks(entity.source_chunk_ids, score, limit)
            for edge in incident:
                collector.add_relationship(edge, score)
                collector.add_chunks(edge.source_chunk_ids, score, limit)

        return await self._finish(collector)

    async def global_leg(self, high_level: list[str]) -> LegResult:
        """Relationship-centric retrieval from high-level keywords."""
        if not high_level:
            return LegResult()

        graph = self.storage.graph
        limit = self.config.related_chunks_per_item
        hits = await self._call(
            self.storage.vector.search_relationships(", ".join(high_level), self.config.top_k)
        )

        relationships = await asyncio.gather(
            *(self._call(graph.get_relationship(key)) for key, _ in hits)
        )

        collector = _Collector()
        for (key, score), relationship in zip(hits, relationships, strict=True):
            if relationship is None:
                logger.debug(f"Skipping stale relationship hit {key!r}")
                continue
            collector.add_relationship(relationship, score)
            collector.add_chunks(relationship.source_chunk_ids, score, limit)

        endpoint_keys = list(
            dict.fromkeys(
                endpoint
                for relationship, _ in collector.relationships.values()
                for endpoint in relationship.endpoints
            )
        )
        endpoints = await asyncio.gather(*(self._call(graph.get_entity(k)) for k in endpoint_keys))
        found = {key: entity for key, entity in zip(endpoint_keys, endpoints, strict=True) if entity}

        for relationship, score in collector.relationships.values():
            for endpoint in relationship.endpoints:
                if endpoint in found:
                    collector.add_entity(found[endpoint], score)

        return await self._finish(collector)

    async def _finish(self, collector: _Collector) -> LegResult:
        chunk_ids = list(collector.chunk_scores)
        chunks = await asyncio.gather(
            *(self._call(self.storage.kv.get_chunk(chunk_id)) for chunk_id in chunk_ids)
        )

        sources = []
        for chunk_id, chunk in zip(chunk_ids, chunks, strict=True):
            if chunk is None:
                logger.debug(f"Skipping missing chunk {chunk_id!r}")
                continue
            sources.append(
                SourceChunk(
                    chunk_id=chunk_id,
                    content=chunk.content,
                    relevance=collector.chunk_scores[chunk_id],
                )
            )

        return LegResult(
            entities=[
                ScoredEntity(entity=entity, score=score)
                for entity, score in collector.entities.values()
            ],
            relationships=[
                ScoredRelationship(relationship=relationship, score=score)
                for relationship, score in collector.relationships.values()
            ],
            sources=sources,
        )
