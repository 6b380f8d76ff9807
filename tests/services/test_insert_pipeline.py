"""
Tests for the insert pipeline.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fakes import (
    ALICE_ACME,
    ScriptedLLM,
    alice_acme_responder,
    paragraph_config,
    prompt_text,
)

from lightgraph.config import ConcurrencyConfig
from lightgraph.core.vector_store.memory_store import CHUNKS, ENTITIES, RELATIONSHIPS
from lightgraph.models import ChunkStage, Document
from lightgraph.services.insert_pipeline import insert
from lightgraph.utils import (
    ChunkingError,
    ExtractionError,
    IndexingError,
    InsertError,
    LLMError,
    OperationCancelledError,
    VectorStoreError,
)

DOCUMENT = Document(id="doc-1", content=ALICE_ACME)


class GatedLLM(ScriptedLLM):
    """Blocks extraction of the Berlin paragraph until the test cancels."""

    async def chat(self, messages, **kwargs):
        if "Berlin" in prompt_text(messages):
            self.calls.append(list(messages))
            await asyncio.Event().wait()
        return await super().chat(messages, **kwargs)


class CountingLLM(ScriptedLLM):
    """Tracks how many chat calls are in flight at once."""

    def __init__(self, responder):
        super().__init__(responder)
        self.active = 0
        self.max_active = 0

    async def chat(self, messages, **kwargs):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.01)
            return await super().chat(messages, **kwargs)
        finally:
            self.active -= 1


@pytest.fixture
def config():
    return paragraph_config()


async def snapshot(storage):
    graph = storage.graph
    entities = [await graph.get_entity(k) for k in graph.entity_keys()]
    relationships = [await graph.get_relationship(k) for k in graph.relationship_keys()]
    return entities, relationships


@pytest.mark.unit
@pytest.mark.asyncio
class TestInsert:
    """Document insert end to end against the in-memory stores."""

    async def test_insert_builds_graph_and_index(self, document_handler, storage, config):
        await insert(DOCUMENT, document_handler, storage, ScriptedLLM(alice_acme_responder), config)

        assert storage.graph.entity_keys() == ["acme", "alice", "berlin"]
        assert storage.graph.relationship_keys() == ["acme<->alice", "acme<->berlin"]
        assert len(storage.kv) == 2
        assert storage.vector.count(CHUNKS) == 2
        assert storage.vector.count(ENTITIES) == 3
        assert storage.vector.count(RELATIONSHIPS) == 2

        acme = await storage.graph.get_entity("acme")
        assert acme.source_chunk_ids == sorted(storage.kv.keys())

    async def test_document_id_with_braces(self, document_handler, storage, config):
        document = Document(id="report-{2024}", content=ALICE_ACME)

        await insert(document, document_handler, storage, ScriptedLLM(alice_acme_responder), config)

        assert storage.graph.entity_keys() == ["acme", "alice", "berlin"]
        chunks = [await storage.kv.get_chunk(key) for key in storage.kv.keys()]
        assert {chunk.document_id for chunk in chunks} == {"report-{2024}"}

    async def test_reinsert_leaves_graph_unchanged(self, document_handler, storage, config):
        llm = ScriptedLLM(alice_acme_responder)
        await insert(DOCUMENT, document_handler, storage, llm, config)
        before = await snapshot(storage)

        await insert(DOCUMENT, document_handler, storage, llm, config)

        assert await snapshot(storage) == before
        assert len(storage.kv) == 2

    async def test_empty_document_is_noop(self, document_handler, storage, config):
        llm = ScriptedLLM(alice_acme_responder)

        await insert(Document(id="doc-2", content="  \n\n "), document_handler, storage, llm, config)

        assert llm.calls == []
        assert storage.graph.entity_keys() == []

    async def test_chunking_failure_writes_nothing(self, document_handler, storage, config):
        llm = ScriptedLLM(alice_acme_responder)

        with patch.object(document_handler, "chunks", side_effect=RuntimeError("bad encoding")):
            with pytest.raises(ChunkingError):
                await insert(DOCUMENT, document_handler, storage, llm, config)

        assert llm.calls == []
        assert len(storage.kv) == 0

    async def test_max_concurrency_bounds_chunk_workers(self, document_handler, storage):
        llm = CountingLLM(alice_acme_responder)
        config = paragraph_config(concurrency=ConcurrencyConfig(max_concurrency=1))

        await insert(DOCUMENT, document_handler, storage, llm, config)

        assert llm.max_active == 1
        assert len(storage.kv) == 2


@pytest.mark.unit
@pytest.mark.asyncio
class TestInsertFailures:
    """Per-chunk failures and cancellation."""

    async def test_failed_chunk_reported_siblings_kept(self, document_handler, storage, config):
        def respond(messages):
            if "Berlin" in prompt_text(messages):
                return LLMError("context length exceeded")
            return alice_acme_responder(messages)

        with pytest.raises(InsertError) as exc_info:
            await insert(DOCUMENT, document_handler, storage, ScriptedLLM(respond), config)

        report = exc_info.value.report
        assert not report.ok
        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.stage == ChunkStage.EXTRACTING
        assert isinstance(failure.error, ExtractionError)
        assert failure.error_type == "ExtractionError"
        assert report.succeeded_chunk_ids == storage.kv.keys()
        assert storage.graph.entity_keys() == ["acme", "alice"]

    async def test_failure_report_for_document_id_with_braces(self, document_handler, storage, config):
        def respond(messages):
            if "Berlin" in prompt_text(messages):
                return LLMError("unexpected token {0}")
            return alice_acme_responder(messages)

        document = Document(id="report-{2024}", content=ALICE_ACME)

        with pytest.raises(InsertError) as exc_info:
            await insert(document, document_handler, storage, ScriptedLLM(respond), config)

        assert exc_info.value.report.document_id == "report-{2024}"
        assert len(exc_info.value.report.failures) == 1

    async def test_index_failure_reports_indexing_stage(self, document_handler, storage, config):
        with patch.object(storage.vector, "index_chunk", new_callable=AsyncMock) as mock_index:
            mock_index.side_effect = VectorStoreError("collection missing")

            with pytest.raises(InsertError) as exc_info:
                await insert(
                    DOCUMENT, document_handler, storage, ScriptedLLM(alice_acme_responder), config
                )

        report = exc_info.value.report
        assert {f.stage for f in report.failures} == {ChunkStage.INDEXING}
        assert all(isinstance(f.error, IndexingError) for f in report.failures)
        # Merges happened before indexing failed
        assert storage.graph.entity_keys() == ["acme", "alice", "berlin"]

    async def test_cancellation_reports_unfinished_chunks(self, document_handler, storage, config):
        llm = GatedLLM(alice_acme_responder)
        task = asyncio.create_task(insert(DOCUMENT, document_handler, storage, llm, config))

        while len(llm.calls) < 2 or len(storage.kv) < 1:
            await asyncio.sleep(0.001)
        task.cancel()

        with pytest.raises(InsertError, match="Insert cancelled") as exc_info:
            await task

        report = exc_info.value.report
        assert report.cancelled
        berlin = [f for f in report.failures if f.chunk_id not in storage.kv.keys()]
        assert len(berlin) == 1
        assert berlin[0].stage == ChunkStage.EXTRACTING
        assert isinstance(berlin[0].error, OperationCancelledError)
