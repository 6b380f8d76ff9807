"""
Tests for merging extraction candidates into the graph.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fakes import ScriptedLLM, is_summary_request, make_config

from lightgraph.config import ExtractionConfig
from lightgraph.core.graph_store.memory_store import InMemoryGraphStorage
from lightgraph.models import UNKNOWN_ENTITY_TYPE, Entity, ExtractionResult, Relationship
from lightgraph.services.merger import (
    DESCRIPTION_SEP,
    GraphMerger,
    join_descriptions,
    merge_keywords,
    pick_entity_type,
    split_description,
)
from lightgraph.utils import GraphStoreError, LLMError, MergeError


def alice(chunk_id: str, description: str = "Alice is an engineer.", type: str = "person") -> Entity:
    return Entity(name="Alice", type=type, description=description, source_chunk_ids=[chunk_id])


def employment(chunk_id: str, weight: float = 2.0, keywords=("employment",)) -> Relationship:
    return Relationship(
        entity_a="Alice",
        entity_b="Acme",
        description="Alice works at Acme.",
        keywords=list(keywords),
        weight=weight,
        source_chunk_ids=[chunk_id],
    )


@pytest.fixture
def graph() -> InMemoryGraphStorage:
    return InMemoryGraphStorage()


@pytest.fixture
def llm() -> ScriptedLLM:
    return ScriptedLLM(lambda messages: "Alice is a senior engineer.")


@pytest.fixture
def merger(graph, llm, document_handler, config) -> GraphMerger:
    return GraphMerger(graph, llm, document_handler, config)


@pytest.mark.unit
class TestDescriptionHelpers:
    """Description segments, keyword union and type resolution."""

    def test_join_sorts_and_dedupes(self):
        assert join_descriptions(["b", "a", " b ", ""]) == f"a{DESCRIPTION_SEP}b"

    def test_split_roundtrip(self):
        assert split_description(f"a{DESCRIPTION_SEP} b {DESCRIPTION_SEP}") == ["a", "b"]
        assert split_description("") == []

    def test_merge_keywords_case_insensitive(self):
        assert merge_keywords(["Employment", "career"], ["employment", "  work   life "]) == [
            "career",
            "Employment",
            "work life",
        ]

    @pytest.mark.parametrize(
        "current, candidate, expected",
        [
            (UNKNOWN_ENTITY_TYPE, "person", "person"),
            ("person", UNKNOWN_ENTITY_TYPE, "person"),
            ("person", "organization", "organization"),
            (UNKNOWN_ENTITY_TYPE, UNKNOWN_ENTITY_TYPE, UNKNOWN_ENTITY_TYPE),
        ],
    )
    def test_pick_entity_type(self, current, candidate, expected):
        assert pick_entity_type(current, candidate) == expected


@pytest.mark.unit
@pytest.mark.asyncio
class TestEntityMerge:
    """Entity upserts."""

    async def test_new_entity(self, merger, graph):
        stored = await merger.merge_entity("c1", alice("c1"))

        assert stored == await graph.get_entity("alice")
        assert stored.source_chunk_ids == ["c1"]

    async def test_second_chunk_unions_sources_and_descriptions(self, merger, graph):
        await merger.merge_entity("c1", alice("c1"))
        await merger.merge_entity("c2", alice("c2", description="Alice lives in Berlin."))

        stored = await graph.get_entity("alice")
        assert stored.source_chunk_ids == ["c1", "c2"]
        assert split_description(stored.description) == [
            "Alice is an engineer.",
            "Alice lives in Berlin.",
        ]

    async def test_same_chunk_twice_is_noop(self, merger, graph):
        first = await merger.merge_entity("c1", alice("c1"))
        second = await merger.merge_entity("c1", alice("c1", description="Something else."))

        assert first == second == await graph.get_entity("alice")

    async def test_merge_order_does_not_matter(self, llm, document_handler, config):
        candidates = [
            ("c1", Entity(name="ALICE", type="person", description="first", source_chunk_ids=["c1"])),
            ("c2", Entity(name="Alice", type="organization", description="second", source_chunk_ids=["c2"])),
            ("c3", Entity(name="alice", type=UNKNOWN_ENTITY_TYPE, description="third", source_chunk_ids=["c3"])),
        ]
        results = []
        for order in (candidates, candidates[::-1], [candidates[1], candidates[0], candidates[2]]):
            graph = InMemoryGraphStorage()
            merger = GraphMerger(graph, llm, document_handler, config)
            for chunk_id, candidate in order:
                await merger.merge_entity(chunk_id, candidate)
            results.append(await graph.get_entity("alice"))

        assert results[0] == results[1] == results[2]
        assert results[0].name == "ALICE"
        assert results[0].type == "organization"

    async def test_concurrent_merges_lose_nothing(self, merger, graph):
        await asyncio.gather(
            *(merger.merge_entity(f"c{i}", alice(f"c{i}", description=f"Fact {i}.")) for i in range(10))
        )

        stored = await graph.get_entity("alice")
        assert len(stored.source_chunk_ids) == 10
        assert len(split_description(stored.description)) == 10


@pytest.mark.unit
@pytest.mark.asyncio
class TestRelationshipMerge:
    """Relationship upserts and endpoint placeholders."""

    async def test_missing_endpoints_become_placeholders(self, merger, graph):
        relationship, endpoints = await merger.merge_relationship("c1", employment("c1"))

        assert relationship.key == "acme<->alice"
        assert [e.name for e in endpoints] == ["acme", "alice"]
        placeholder = await graph.get_entity("acme")
        assert placeholder.is_placeholder
        assert placeholder.source_chunk_ids == ["c1"]

    async def test_placeholder_upgraded_by_real_entity(self, merger, graph):
        await merger.merge_relationship("c1", employment("c1"))

        await merger.merge_entity(
            "c2", Entity(name="Acme", type="organization", description="A company.", source_chunk_ids=["c2"])
        )

        stored = await graph.get_entity("acme")
        assert stored.name == "Acme"
        assert stored.type == "organization"
        assert stored.description == "A company."
        assert stored.source_chunk_ids == ["c1", "c2"]

    async def test_existing_endpoint_gains_source(self, merger, graph):
        await merger.merge_entity("c1", alice("c1"))

        await merger.merge_relationship("c2", employment("c2"))

        assert (await graph.get_entity("alice")).source_chunk_ids == ["c1", "c2"]

    async def test_weights_sum_and_keywords_union(self, merger, graph):
        await merger.merge_relationship("c1", employment("c1", weight=2.0, keywords=["employment"]))
        await merger.merge_relationship("c2", employment("c2", weight=3.5, keywords=["Career", "employment"]))

        stored = await graph.get_relationship("acme<->alice")
        assert stored.weight == pytest.approx(5.5)
        assert stored.keywords == ["Career", "employment"]
        assert stored.source_chunk_ids == ["c1", "c2"]
        assert stored.description == "Alice works at Acme."

    async def test_same_chunk_twice_is_noop(self, merger, graph):
        await merger.merge_relationship("c1", employment("c1", weight=2.0))
        await merger.merge_relationship("c1", employment("c1", weight=2.0))

        assert (await graph.get_relationship("acme<->alice")).weight == 2.0

    async def test_concurrent_relationship_merges(self, merger, graph):
        await asyncio.gather(*(merger.merge_relationship(f"c{i}", employment(f"c{i}", weight=1.0)) for i in range(8)))

        stored = await graph.get_relationship("acme<->alice")
        assert stored.weight == pytest.approx(8.0)
        assert (await graph.get_entity("alice")).source_chunk_ids == sorted(f"c{i}" for i in range(8))


@pytest.mark.unit
@pytest.mark.asyncio
class TestMerge:
    """Whole-chunk merges."""

    async def test_outcome_lists_touched_records(self, merger):
        extraction = ExtractionResult(entities=[alice("c1")], relationships=[employment("c1")])

        outcome = await merger.merge("c1", extraction)

        assert sorted(e.key for e in outcome.entities) == ["acme", "alice"]
        assert [r.key for r in outcome.relationships] == ["acme<->alice"]
        alice_state = next(e for e in outcome.entities if e.key == "alice")
        assert alice_state.description == "Alice is an engineer."

    async def test_re_merge_leaves_graph_unchanged(self, merger, graph):
        extraction = ExtractionResult(entities=[alice("c1")], relationships=[employment("c1")])
        await merger.merge("c1", extraction)
        before = (await graph.get_entity("alice"), await graph.get_relationship("acme<->alice"))

        await merger.merge("c1", extraction)

        after = (await graph.get_entity("alice"), await graph.get_relationship("acme<->alice"))
        assert before == after

    async def test_storage_failure_raises_merge_error(self, merger, graph):
        with patch.object(graph, "get_entity", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = GraphStoreError("graph offline")

            with pytest.raises(MergeError, match="graph offline") as exc_info:
                await merger.merge("c1", ExtractionResult(entities=[alice("c1")]))

        assert exc_info.value.context == {"chunk_id": "c1"}


@pytest.mark.unit
@pytest.mark.asyncio
class TestDescriptionSummary:
    """LLM summaries of long merged descriptions."""

    @pytest.fixture
    def summary_config(self):
        return make_config(extraction=ExtractionConfig(gleaning_rounds=0, summary_trigger_tokens=5))

    async def test_long_description_summarized(self, graph, document_handler, summary_config):
        llm = ScriptedLLM(lambda messages: f"Alice is a senior{DESCRIPTION_SEP}engineer.")
        merger = GraphMerger(graph, llm, document_handler, summary_config)

        await merger.merge_entity("c1", alice("c1"))
        await merger.merge_entity("c2", alice("c2", description="Alice lives in Berlin."))

        assert len(llm.calls) == 1
        assert is_summary_request(llm.calls[0])
        assert (await graph.get_entity("alice")).description == "Alice is a senior engineer."

    async def test_single_segment_never_summarized(self, graph, document_handler, summary_config):
        llm = ScriptedLLM()
        merger = GraphMerger(graph, llm, document_handler, summary_config)

        await merger.merge_entity("c1", alice("c1", description="A very long description " * 20))

        assert llm.calls == []

    async def test_short_description_not_summarized(self, merger, llm):
        await merger.merge_entity("c1", alice("c1"))
        await merger.merge_entity("c2", alice("c2", description="Alice lives in Berlin."))

        assert llm.calls == []

    async def test_summary_failure_keeps_merged_text(self, graph, document_handler, summary_config):
        llm = ScriptedLLM(lambda messages: LLMError("rate limited"))
        merger = GraphMerger(graph, llm, document_handler, summary_config)

        await merger.merge_entity("c1", alice("c1"))
        await merger.merge_entity("c2", alice("c2", description="Alice lives in Berlin."))

        stored = await graph.get_entity("alice")
        assert stored.description == f"Alice is an engineer.{DESCRIPTION_SEP}Alice lives in Berlin."

    async def test_relationship_description_summarized(self, graph, document_handler, summary_config):
        llm = ScriptedLLM(lambda messages: "Long-time employee.")
        merger = GraphMerger(graph, llm, document_handler, summary_config)
        second = employment("c2").model_copy(update={"description": "Alice joined Acme in 2019."})

        await merger.merge_relationship("c1", employment("c1"))
        await merger.merge_relationship("c2", second)

        assert (await graph.get_relationship("acme<->alice")).description == "Long-time employee."
