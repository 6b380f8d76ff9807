"""
Extraction results produced by parsing LLM output for one chunk.
"""

from pydantic import BaseModel, Field

from lightgraph.models.graph import Entity, Relationship


class ExtractionResult(BaseModel):
    """
    Candidate entities and relationships parsed from one or more LLM responses.

    Candidates carry the chunk ID they were extracted from in their source
    set. Diagnostics describe fragments the parser dropped.
    """

    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    diagnostics: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.entities and not self.relationships

    def entity_keys(self) -> set[str]:
        return {entity.key for entity in self.entities}

    def relationship_keys(self) -> set[str]:
        return {rel.key for rel in self.relationships}

    def absorb(self, other: "ExtractionResult") -> "ExtractionResult":
        """
        Combine with another result, collapsing candidates with the same identity.

        For duplicates the longer description wins; relationships also keep
        the higher weight and the union of keywords.

        Args:
            other: Result of a later pass over the same chunk

        Returns:
            New combined result
        """
        entities: dict[str, Entity] = {}
        for entity in [*self.entities, *other.entities]:
            current = entities.get(entity.key)
            if current is None or len(entity.description) > len(current.description):
                entities[entity.key] = entity

        relationships: dict[str, Relationship] = {}
        for rel in [*self.relationships, *other.relationships]:
            current = relationships.get(rel.key)
            if current is None:
                relationships[rel.key] = rel
                continue
            best = rel if len(rel.description) > len(current.description) else current
            keywords = list(dict.fromkeys([*current.keywords, *rel.keywords]))
            relationships[rel.key] = Relationship(
                entity_a=best.entity_a,
                entity_b=best.entity_b,
                description=best.description,
                keywords=keywords,
                weight=max(current.weight, rel.weight),
                source_chunk_ids=[*current.source_chunk_ids, *rel.source_chunk_ids],
            )

        return ExtractionResult(
            entities=list(entities.values()),
            relationships=list(relationships.values()),
            diagnostics=[*self.diagnostics, *other.diagnostics],
        )
