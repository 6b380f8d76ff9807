"""
Merger - folds a chunk's candidates into the knowledge graph.

Merge rules:
- New identity: stored as extracted, sources = {chunk}
- Existing identity: sources are unioned, descriptions are kept as a sorted
  set of segments, relationship weights are summed and keywords unioned
- A candidate whose chunk is already in the stored source set adds nothing,
  so re-inserting a document leaves the graph unchanged
- Descriptions longer than summary_trigger_tokens are condensed by one LLM call

Every read-modify-write runs under a per-identity lock. Relationship merges
hold the relationship lock and then take the endpoint entity locks; entity
merges never take relationship locks.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from pydantic import BaseModel, Field

from lightgraph.config import Config
from lightgraph.core.graph_store.base import GraphStorage
from lightgraph.core.handlers.base import DocumentHandler
from lightgraph.core.llm.base import LLMProvider
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.models.extraction import ExtractionResult
from lightgraph.models.graph import UNKNOWN_ENTITY_TYPE, Entity, Relationship
from lightgraph.utils.exceptions import LightGraphError, MergeError
from lightgraph.utils.locks import KeyedLock
from lightgraph.utils.logger import get_logger
from lightgraph.utils.timeouts import with_timeout

logger = get_logger(__name__)

T = TypeVar("T")

DESCRIPTION_SEP = "<SEP>"


def split_description(description: str) -> list[str]:
    """Split a stored description into its segments."""
    return [segment.strip() for segment in description.split(DESCRIPTION_SEP) if segment.strip()]


def join_descriptions(segments: list[str]) -> str:
    """Join description segments into the stored form (deduplicated, sorted)."""
    return DESCRIPTION_SEP.join(sorted({segment.strip() for segment in segments if segment.strip()}))


def merge_keywords(*groups: list[str]) -> list[str]:
    """Case-insensitive union of keyword lists, sorted."""
    merged: dict[str, str] = {}
    for group in groups:
        for keyword in group:
            cleaned = " ".join(keyword.split())
            if cleaned:
                merged.setdefault(cleaned.casefold(), cleaned)
    return sorted(merged.values(), key=str.casefold)


def pick_entity_type(current: str, candidate: str) -> str:
    """Known types win over UNKNOWN; between two known types the smaller name wins."""
    if current == UNKNOWN_ENTITY_TYPE:
        return candidate
    if candidate == UNKNOWN_ENTITY_TYPE:
        return current
    return min(current, candidate)


class MergeOutcome(BaseModel):
    """Stored post-merge state of every record a chunk touched."""

    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)


class GraphMerger:
    """
    Upserts extraction candidates into graph storage.

    One merger is shared by all chunk workers of an insert; the KeyedLock
    may also be shared across inserts.
    """

    def __init__(
        self,
        graph: GraphStorage,
        llm: LLMProvider,
        handler: DocumentHandler,
        config: Config,
        locks: KeyedLock | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        """
        Initialize the merger.

        Args:
            graph: Graph storage to merge into
            llm: LLM used for description summaries
            handler: Builds summary prompts
            config: Configuration (extraction and concurrency sections)
            locks: Per-identity locks (a private one is created if omitted)
            tokenizer: Counts description tokens for the summary trigger
        """
        self.graph = graph
        self.llm = llm
        self.handler = handler
        self.config = config
        self.locks = locks or KeyedLock()
        self.tokenizer = tokenizer or Tokenizer(config.tokenizer)

    async def _call(self, awaitable: Awaitable[T]) -> T:
        return await with_timeout(awaitable, self.config.concurrency.call_timeout)

    async def merge(self, chunk_id: str, extraction: ExtractionResult) -> MergeOutcome:
        """
        Merge one chunk's candidates: entities first, then relationships.

        Args:
            chunk_id: Chunk the candidates came from
            extraction: Candidates extracted from the chunk

        Returns:
            Post-merge state of every touched entity and relationship

        Raises:
            MergeError: If a storage call fails
        """
        touched: dict[str, Entity] = {}

        try:
            entity_results = await asyncio.gather(
                *(self.merge_entity(chunk_id, entity) for entity in extraction.entities),
                return_exceptions=True,
            )
            self._raise_first(entity_results)
            for entity in entity_results:
                touched[entity.key] = entity

            relationship_results = await asyncio.gather(
                *(self.merge_relationship(chunk_id, rel) for rel in extraction.relationships),
                return_exceptions=True,
            )
            self._raise_first(relationship_results)
        except MergeError:
            raise
        except Exception as e:
            logger.error(f"Merge failed for chunk {chunk_id}: {e}")
            raise MergeError(
                f"Merge failed for chunk {chunk_id}: {e}", context={"chunk_id": chunk_id}
            ) from e

        relationships = []
        for relationship, endpoints in relationship_results:
            relationships.append(relationship)
            for endpoint in endpoints:
                touched[endpoint.key] = endpoint

        return MergeOutcome(entities=list(touched.values()), relationships=relationships)

    @staticmethod
    def _raise_first(results: list) -> None:
        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def merge_entity(self, chunk_id: str, candidate: Entity) -> Entity:
        """
        Merge one entity candidate under its identity lock.

        Args:
            chunk_id: Chunk the candidate came from
            candidate: Extracted entity

        Returns:
            Stored entity after the merge
        """
        key = candidate.key
        async with self.locks.hold(f"entity:{key}"):
            existing = await self._call(self.graph.get_entity(key))

            if existing is None:
                merged = Entity(
                    name=candidate.name,
                    type=candidate.type,
                    description=join_descriptions([candidate.description]),
                    source_chunk_ids=[chunk_id],
                )
            elif chunk_id in existing.source_chunk_ids:
                return existing
            else:
                name = candidate.name if existing.is_placeholder else min(existing.name, candidate.name)
                description = join_descriptions(
                    [*split_description(existing.description), candidate.description]
                )
                merged = Entity(
                    name=name,
                    type=pick_entity_type(existing.type, candidate.type),
                    description=await self._maybe_summarize(name, description),
                    source_chunk_ids=[*existing.source_chunk_ids, chunk_id],
                )

            await self._call(self.graph.upsert_entity(key, merged))
            return merged

    async def _ensure_endpoint(self, chunk_id: str, key: str) -> Entity:
        """Make sure a relationship endpoint exists and lists the chunk as a source."""
        async with self.locks.hold(f"entity:{key}"):
            existing = await self._call(self.graph.get_entity(key))

            if existing is None:
                placeholder = Entity(
                    name=key,
                    type=UNKNOWN_ENTITY_TYPE,
                    description="",
                    source_chunk_ids=[chunk_id],
                )
                logger.debug(f"Creating placeholder entity {key!r} for chunk {chunk_id}")
                await self._call(self.graph.upsert_entity(key, placeholder))
                return placeholder

            if chunk_id in existing.source_chunk_ids:
                return existing

            updated = Entity(
                name=existing.name,
                type=existing.type,
                description=existing.description,
                source_chunk_ids=[*existing.source_chunk_ids, chunk_id],
            )
            await self._call(self.graph.upsert_entity(key, updated))
            return updated

    async def merge_relationship(
        self, chunk_id: str, candidate: Relationship
    ) -> tuple[Relationship, list[Entity]]:
        """
        Merge one relationship candidate under its identity lock.

        Missing endpoints are created as placeholder entities first.

        Args:
            chunk_id: Chunk the candidate came from
            candidate: Extracted relationship

        Returns:
            Stored relationship after the merge and the stored endpoints
        """
        key = candidate.key
        async with self.locks.hold(f"relationship:{key}"):
            endpoints = [
                await self._ensure_endpoint(chunk_id, endpoint) for endpoint in candidate.endpoints
            ]

            existing = await self._call(self.graph.get_relationship(key))

            if existing is None:
                merged = Relationship(
                    entity_a=candidate.entity_a,
                    entity_b=candidate.entity_b,
                    description=join_descriptions([candidate.description]),
                    keywords=merge_keywords(candidate.keywords),
                    weight=candidate.weight,
                    source_chunk_ids=[chunk_id],
                )
            elif chunk_id in existing.source_chunk_ids:
                return existing, endpoints
            else:
                description = join_descriptions(
                    [*split_description(existing.description), candidate.description]
                )
                merged = Relationship(
                    entity_a=existing.entity_a,
                    entity_b=existing.entity_b,
                    description=await self._maybe_summarize(
                        f"{existing.entity_a} and {existing.entity_b}", description
                    ),
                    keywords=merge_keywords(existing.keywords, candidate.keywords),
                    weight=existing.weight + candidate.weight,
                    source_chunk_ids=[*existing.source_chunk_ids, chunk_id],
                )

            await self._call(self.graph.upsert_relationship(key, merged))
            return merged, endpoints

    async def _maybe_summarize(self, name: str, description: str) -> str:
        """
        Condense a merged description that grew past the summary trigger.

        Single-segment descriptions are never summarized. A failed summary
        call keeps the unsummarized description.
        """
        extraction = self.config.extraction
        segments = split_description(description)
        if len(segments) < 2:
            return description
        if self.tokenizer.count_tokens(description) <= extraction.summary_trigger_tokens:
            return description

        try:
            messages = self.handler.summary_prompt(name, segments)
            summary = await self._call(
                self.llm.chat(
                    messages,
                    max_tokens=extraction.summary_max_tokens,
                    temperature=self.config.llm.temperature,
                )
            )
        except (LightGraphError, TimeoutError) as e:
            logger.warning(
                f"Description summary failed for {name!r}, keeping merged description: {e}"
            )
            return description

        summary = summary.strip()
        if not summary:
            return description
        logger.debug(f"Summarized description for {name!r}")
        return summary.replace(DESCRIPTION_SEP, " ")
