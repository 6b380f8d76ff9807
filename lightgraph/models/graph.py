"""
Knowledge graph models: entities (nodes) and relationships (edges).

Identity rules:
- An entity is identified by its case/whitespace-folded name.
- A relationship is identified by the unordered pair of its endpoint keys.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

UNKNOWN_ENTITY_TYPE = "UNKNOWN"

RELATIONSHIP_KEY_SEP = "<->"


def normalize_entity_name(name: str) -> str:
    """
    Clean an extracted entity name for display.

    Collapses runs of whitespace and strips surrounding quotes.

    Args:
        name: Raw name

    Returns:
        Cleaned display name
    """
    return " ".join(name.split()).strip("\"'").strip()


def entity_key(name: str) -> str:
    """
    Identity key for an entity name.

    Args:
        name: Entity name (display form or already a key)

    Returns:
        Case/whitespace-folded key
    """
    return normalize_entity_name(name).casefold()


def relationship_key(entity_a: str, entity_b: str) -> str:
    """
    Identity key for the unordered pair of two entities.

    Args:
        entity_a: First endpoint name or key
        entity_b: Second endpoint name or key

    Returns:
        Pair key, identical for (a, b) and (b, a)
    """
    first, second = sorted((entity_key(entity_a), entity_key(entity_b)))
    return f"{first}{RELATIONSHIP_KEY_SEP}{second}"


class Entity(BaseModel):
    """Graph node for a named entity extracted from one or more chunks."""

    name: str = Field(..., min_length=1, description="Display name")
    type: str = Field(default=UNKNOWN_ENTITY_TYPE, description="Entity type from the configured vocabulary")
    description: str = Field(default="", description="Merged description")
    source_chunk_ids: list[str] = Field(
        default_factory=list, description="Sorted IDs of chunks mentioning this entity"
    )

    @field_validator("source_chunk_ids")
    @classmethod
    def _sorted_unique(cls, value: list[str]) -> list[str]:
        return sorted(set(value))

    @property
    def key(self) -> str:
        """Identity key of this entity."""
        return entity_key(self.name)

    @property
    def is_placeholder(self) -> bool:
        """True for nodes created only to anchor a relationship endpoint."""
        return self.type == UNKNOWN_ENTITY_TYPE and not self.description

    def embedding_text(self) -> str:
        """Text indexed in the vector store for this entity."""
        return f"{self.name}\n{self.description}".strip()


class Relationship(BaseModel):
    """Undirected graph edge between two entities."""

    entity_a: str = Field(..., min_length=1, description="Endpoint entity key (lexically first)")
    entity_b: str = Field(..., min_length=1, description="Endpoint entity key (lexically second)")
    description: str = Field(default="", description="Merged description")
    keywords: list[str] = Field(default_factory=list, description="Relation keywords/themes")
    weight: float = Field(default=1.0, ge=0.0, description="Relationship strength")
    source_chunk_ids: list[str] = Field(
        default_factory=list, description="Sorted IDs of chunks mentioning this relationship"
    )

    @model_validator(mode="before")
    @classmethod
    def _canonical_pair(cls, data: Any) -> Any:
        if isinstance(data, dict) and "entity_a" in data and "entity_b" in data:
            a, b = sorted((entity_key(str(data["entity_a"])), entity_key(str(data["entity_b"]))))
            data = {**data, "entity_a": a, "entity_b": b}
        return data

    @field_validator("source_chunk_ids")
    @classmethod
    def _sorted_unique(cls, value: list[str]) -> list[str]:
        return sorted(set(value))

    @property
    def key(self) -> str:
        """Identity key of this relationship."""
        return relationship_key(self.entity_a, self.entity_b)

    @property
    def endpoints(self) -> tuple[str, str]:
        """Both endpoint keys."""
        return self.entity_a, self.entity_b

    def embedding_text(self) -> str:
        """Text indexed in the vector store for this relationship."""
        return f"{', '.join(self.keywords)}\n{self.description}".strip()
