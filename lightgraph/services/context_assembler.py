"""
Context assembler - deduplicates, ranks and budgets the retrieved items.

Per category (entities, relationships, sources):
1. Deduplicate across legs by identity. The higher score wins and decides
   the leg; on a tie the local leg keeps the item.
2. Rank by score descending; discovery order (local leg first) breaks ties.
3. Truncate by count and then by token budget, dropping lowest-ranked
   items first. Sources share one budget across both legs.
"""

from collections.abc import Callable
from typing import TypeVar

from lightgraph.config import QueryConfig
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.models.graph import Entity, Relationship
from lightgraph.models.query import QueryResult
from lightgraph.services.retriever import RetrievalResult
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

LOCAL = "local"
GLOBAL = "global"


def entity_context_text(entity: Entity) -> str:
    """Text an entity contributes to the context (what the token budget measures)."""
    return f"{entity.name} ({entity.type}): {entity.description}"


def relationship_context_text(relationship: Relationship) -> str:
    """Text a relationship contributes to the context (what the token budget measures)."""
    return (
        f"{relationship.entity_a} <-> {relationship.entity_b} "
        f"[{', '.join(relationship.keywords)}]: {relationship.description}"
    )


class ContextAssembler:
    """Turns raw leg results into a budgeted QueryResult."""

    def __init__(self, config: QueryConfig, tokenizer: Tokenizer | None = None):
        """
        Initialize the assembler.

        Args:
            config: Query configuration (count and token budgets)
            tokenizer: Token counter for budgets
        """
        self.config = config
        self.tokenizer = tokenizer or Tokenizer()

    def assemble(self, retrieval: RetrievalResult) -> QueryResult:
        """
        Build the final query result.

        Args:
            retrieval: Output of both retrieval legs

        Returns:
            Deduplicated, ranked and budgeted result
        """
        local, global_ = retrieval.local_leg, retrieval.global_leg

        entities = self._select(
            self._dedupe(
                local.entities,
                global_.entities,
                key=lambda item: item.entity.key,
                score=lambda item: item.score,
            ),
            score=lambda item: item.score,
            max_items=self.config.max_entities,
            max_tokens=self.config.max_entity_tokens,
            text=lambda item: entity_context_text(item.entity),
        )
        relationships = self._select(
            self._dedupe(
                local.relationships,
                global_.relationships,
                key=lambda item: item.relationship.key,
                score=lambda item: item.score,
            ),
            score=lambda item: item.score,
            max_items=self.config.max_relationships,
            max_tokens=self.config.max_relationship_tokens,
            text=lambda item: relationship_context_text(item.relationship),
        )
        sources = self._select(
            self._dedupe(
                local.sources,
                global_.sources,
                key=lambda item: item.chunk_id,
                score=lambda item: item.relevance,
            ),
            score=lambda item: item.relevance,
            max_items=self.config.max_chunks,
            max_tokens=self.config.max_chunk_tokens,
            text=lambda item: item.content,
        )

        result = QueryResult(
            local_entities=self._leg(entities, LOCAL),
            global_entities=self._leg(entities, GLOBAL),
            local_relationships=self._leg(relationships, LOCAL),
            global_relationships=self._leg(relationships, GLOBAL),
            local_sources=self._leg(sources, LOCAL),
            global_sources=self._leg(sources, GLOBAL),
        )
        logger.info(
            f"Assembled context: {len(entities)} entities, {len(relationships)} relationships, "
            f"{len(sources)} sources"
        )
        return result

    @staticmethod
    def _dedupe(
        local_items: list[T],
        global_items: list[T],
        key: Callable[[T], str],
        score: Callable[[T], float],
    ) -> list[tuple[str, T]]:
        """Merge both legs into (leg, item) pairs in discovery order, one per identity."""
        winners: dict[str, tuple[str, T]] = {}
        for leg, items in ((LOCAL, local_items), (GLOBAL, global_items)):
            for item in items:
                identity = key(item)
                current = winners.get(identity)
                if current is None or score(item) > score(current[1]):
                    # Keep first-discovery position; only the winning leg/item changes
                    winners[identity] = (leg, item)
        return list(winners.values())

    def _select(
        self,
        candidates: list[tuple[str, T]],
        score: Callable[[T], float],
        max_items: int,
        max_tokens: int,
        text: Callable[[T], str],
    ) -> list[tuple[str, T]]:
        """Rank candidates and keep the longest prefix within the count and token budgets."""
        ranked = sorted(candidates, key=lambda pair: -score(pair[1]))

        selected = []
        used = 0
        for leg, item in ranked[:max_items]:
            tokens = self.tokenizer.count_tokens(text(item))
            if used + tokens > max_tokens:
                break
            used += tokens
            selected.append((leg, item))
        return selected

    @staticmethod
    def _leg(selected: list[tuple[str, T]], leg: str) -> tuple[T, ...]:
        return tuple(item for item_leg, item in selected if item_leg == leg)
