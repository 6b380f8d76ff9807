"""
Query-side models: conversation input, keyword sets and the retrieval result.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lightgraph.models.graph import Entity, Relationship


class Role(str, Enum):
    """Speaker of a chat/conversation message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One message of an LLM chat request or of a query conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        """Plain dict in the shape chat-completion APIs expect."""
        return {"role": self.role.value, "content": self.content}


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        cleaned = " ".join(str(value).split())
        if cleaned and cleaned.casefold() not in seen:
            seen.add(cleaned.casefold())
            result.append(cleaned)
    return result


class KeywordSets(BaseModel):
    """Keywords derived from a query conversation. Not persisted."""

    low_level: list[str] = Field(default_factory=list, description="Concrete entities/terms")
    high_level: list[str] = Field(default_factory=list, description="Themes and relation types")

    @field_validator("low_level", "high_level")
    @classmethod
    def _unique(cls, value: list[str]) -> list[str]:
        return _dedupe(value)

    def is_empty(self) -> bool:
        return not self.low_level and not self.high_level


class ScoredEntity(BaseModel):
    """Entity with the similarity score that led retrieval to it."""

    model_config = ConfigDict(frozen=True)

    entity: Entity
    score: float


class ScoredRelationship(BaseModel):
    """Relationship with the similarity score that led retrieval to it."""

    model_config = ConfigDict(frozen=True)

    relationship: Relationship
    score: float


class SourceChunk(BaseModel):
    """Chunk text returned as a retrieval source."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    content: str
    relevance: float


class QueryResult(BaseModel):
    """
    Assembled retrieval context for a query.

    Every category is ranked by score descending and already deduplicated
    across the local and global legs.
    """

    model_config = ConfigDict(frozen=True)

    local_entities: tuple[ScoredEntity, ...] = ()
    global_entities: tuple[ScoredEntity, ...] = ()
    local_relationships: tuple[ScoredRelationship, ...] = ()
    global_relationships: tuple[ScoredRelationship, ...] = ()
    local_sources: tuple[SourceChunk, ...] = ()
    global_sources: tuple[SourceChunk, ...] = ()

    def is_empty(self) -> bool:
        return not (
            self.local_entities
            or self.global_entities
            or self.local_relationships
            or self.global_relationships
            or self.local_sources
            or self.global_sources
        )
