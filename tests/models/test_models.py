"""
Tests for LightGraph data models.

Tests cover:
1. Entity and relationship identity
2. Source set normalization
3. Extraction result combining
4. Keyword sets, query results and insert reports
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from lightgraph.models import (
    UNKNOWN_ENTITY_TYPE,
    ChatMessage,
    Chunk,
    ChunkFailure,
    ChunkStage,
    Document,
    Entity,
    ExtractionResult,
    InsertReport,
    KeywordSets,
    QueryResult,
    Relationship,
    Role,
    entity_key,
    normalize_entity_name,
    relationship_key,
)
from lightgraph.utils import ExtractionError, InsertError


class TestIdentity:
    """Entity and relationship keys."""

    def test_entity_key_folds_case_and_whitespace(self):
        assert entity_key("  Acme   Corp ") == "acme corp"
        assert entity_key('"ACME CORP"') == "acme corp"

    def test_normalize_keeps_case(self):
        assert normalize_entity_name(' "Alice  Smith" ') == "Alice Smith"

    def test_relationship_key_is_unordered(self):
        assert relationship_key("Alice", "Acme") == relationship_key("ACME", "alice")
        assert relationship_key("Alice", "Acme") == "acme<->alice"

    def test_relationship_endpoints_canonical(self):
        rel = Relationship(entity_a="Alice", entity_b="Acme")

        assert rel.endpoints == ("acme", "alice")
        assert rel.key == "acme<->alice"

    def test_relationship_from_either_direction_is_equal(self):
        forward = Relationship(entity_a="Alice", entity_b="Acme", description="works at")
        backward = Relationship(entity_a="acme", entity_b="ALICE", description="works at")

        assert forward == backward


class TestEntity:
    """Entity behaviour."""

    def test_source_ids_sorted_and_unique(self):
        entity = Entity(name="Alice", source_chunk_ids=["c2", "c1", "c2"])
        assert entity.source_chunk_ids == ["c1", "c2"]

    def test_placeholder_detection(self):
        assert Entity(name="acme").is_placeholder
        assert not Entity(name="Acme", description="A company").is_placeholder
        assert not Entity(name="Acme", type="organization").is_placeholder

    def test_defaults(self):
        entity = Entity(name="Alice")
        assert entity.type == UNKNOWN_ENTITY_TYPE
        assert entity.description == ""

    def test_empty_name_rejected(self):
        with pytest.raises(PydanticValidationError):
            Entity(name="")

    def test_embedding_text(self):
        entity = Entity(name="Alice", description="An engineer")
        assert entity.embedding_text() == "Alice\nAn engineer"

    def test_negative_weight_rejected(self):
        with pytest.raises(PydanticValidationError):
            Relationship(entity_a="a", entity_b="b", weight=-1.0)


class TestExtractionResult:
    """Combining results from gleaning rounds."""

    def test_absorb_collapses_duplicate_entities(self):
        first = ExtractionResult(entities=[Entity(name="Alice", description="short")])
        second = ExtractionResult(
            entities=[Entity(name="ALICE", description="a longer description")]
        )

        combined = first.absorb(second)

        assert len(combined.entities) == 1
        assert combined.entities[0].description == "a longer description"

    def test_absorb_merges_relationships(self):
        first = ExtractionResult(
            relationships=[
                Relationship(entity_a="a", entity_b="b", keywords=["x"], weight=2.0)
            ]
        )
        second = ExtractionResult(
            relationships=[
                Relationship(entity_a="b", entity_b="a", keywords=["y", "x"], weight=1.0)
            ]
        )

        combined = first.absorb(second)

        assert len(combined.relationships) == 1
        rel = combined.relationships[0]
        assert rel.keywords == ["x", "y"]
        assert rel.weight == 2.0

    def test_keys_and_emptiness(self):
        result = ExtractionResult(
            entities=[Entity(name="Alice")],
            relationships=[Relationship(entity_a="Alice", entity_b="Acme")],
        )

        assert result.entity_keys() == {"alice"}
        assert result.relationship_keys() == {"acme<->alice"}
        assert not result.is_empty()
        assert ExtractionResult().is_empty()


class TestQueryModels:
    """Query input and output models."""

    def test_chat_message_to_dict(self):
        message = ChatMessage(role=Role.USER, content="Who is Alice?")
        assert message.to_dict() == {"role": "user", "content": "Who is Alice?"}

    def test_keyword_sets_deduplicate(self):
        keywords = KeywordSets(low_level=["Alice", "alice", " ", "Acme  Corp"], high_level=[])

        assert keywords.low_level == ["Alice", "Acme Corp"]
        assert not keywords.is_empty()
        assert KeywordSets().is_empty()

    def test_query_result_empty_and_frozen(self):
        result = QueryResult()

        assert result.is_empty()
        with pytest.raises(PydanticValidationError):
            result.local_entities = ()


class TestDocumentModels:
    """Document and chunk models."""

    def test_document_requires_id(self):
        with pytest.raises(PydanticValidationError):
            Document(id="", content="text")

    def test_chunk_preview(self):
        chunk = Chunk(id="c1", content="x" * 100, order_index=0, document_id="d1")
        assert chunk.content_preview == "x" * 80 + "..."

    def test_chunk_order_index_non_negative(self):
        with pytest.raises(PydanticValidationError):
            Chunk(id="c1", content="x", order_index=-1, document_id="d1")


class TestInsertReport:
    """Insert report and the error built from it."""

    def test_succeeded_chunks(self):
        report = InsertReport(
            document_id="d1",
            chunk_ids=["c1", "c2", "c3"],
            failures=[
                ChunkFailure(chunk_id="c2", stage=ChunkStage.EXTRACTING, error=ExtractionError("x"))
            ],
        )

        assert report.succeeded_chunk_ids == ["c1", "c3"]
        assert not report.ok
        assert report.failures[0].error_type == "ExtractionError"

    def test_insert_error_message(self):
        report = InsertReport(
            document_id="d1",
            chunk_ids=["c1", "c2"],
            failures=[
                ChunkFailure(chunk_id="c2", stage=ChunkStage.MERGING, error=ValueError("bad"))
            ],
        )

        error = InsertError(report)

        assert error.failed_chunk_ids == ["c2"]
        assert not error.cancelled
        assert "1/2 chunks failed" in str(error)
        assert "c2 (merging: bad)" in str(error)
        assert error.context == {"document_id": "d1"}
