"""
Data models for LightGraph.

Core models:
- Document, Chunk: Source content and its ordered pieces
- Entity, Relationship: Knowledge graph nodes and edges
- ExtractionResult: Parsed LLM extraction output for a chunk
- ChatMessage, Role, KeywordSets: Query input and derived keywords
- QueryResult, ScoredEntity, ScoredRelationship, SourceChunk: Retrieval output
- InsertReport, ChunkFailure, ChunkStage: Insert outcome
"""

from lightgraph.models.document import Chunk, Document
from lightgraph.models.extraction import ExtractionResult
from lightgraph.models.graph import (
    UNKNOWN_ENTITY_TYPE,
    Entity,
    Relationship,
    entity_key,
    normalize_entity_name,
    relationship_key,
)
from lightgraph.models.ingestion import ChunkFailure, ChunkStage, InsertReport
from lightgraph.models.query import (
    ChatMessage,
    KeywordSets,
    QueryResult,
    Role,
    ScoredEntity,
    ScoredRelationship,
    SourceChunk,
)

__all__ = [
    # Source content models
    "Document",
    "Chunk",
    # Graph models
    "Entity",
    "Relationship",
    "UNKNOWN_ENTITY_TYPE",
    "entity_key",
    "relationship_key",
    "normalize_entity_name",
    # Extraction
    "ExtractionResult",
    # Ingestion
    "ChunkStage",
    "ChunkFailure",
    "InsertReport",
    # Query models
    "Role",
    "ChatMessage",
    "KeywordSets",
    "ScoredEntity",
    "ScoredRelationship",
    "SourceChunk",
    "QueryResult",
]
