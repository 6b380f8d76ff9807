"""
Integration tests against real services.

Each class skips unless its service is configured:
- OPENAI_API_KEY for the OpenAI provider and end-to-end engine tests
- NEO4J_URI (plus NEO4J_USERNAME / NEO4J_PASSWORD) for Neo4j
- QDRANT_URL for Qdrant

Run with: pytest -m integration
"""

import os
import uuid
from urllib.parse import urlparse

import pytest
from fakes import BagOfWordsEmbedder

from lightgraph.config import Config, EmbedderConfig, LLMConfig
from lightgraph.core.embeddings.openai import OpenAIEmbedder
from lightgraph.core.graph_store.neo4j_store import Neo4jGraphStorage
from lightgraph.core.llm.openai import OpenAILLM
from lightgraph.core.vector_store.qdrant import QdrantVectorStorage
from lightgraph.models import ChatMessage, Entity, Relationship, Role
from lightgraph.services import LightGraph


def require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        pytest.skip(f"{name} not set")
    return value


@pytest.mark.integration
@pytest.mark.asyncio
class TestOpenAIIntegration:
    """Real OpenAI chat, embeddings and a full insert/query round."""

    async def test_chat(self):
        llm = OpenAILLM(api_key=require_env("OPENAI_API_KEY"))
        try:
            reply = await llm.chat(
                [ChatMessage(role=Role.USER, content="Reply with the single word: ready")], max_tokens=5
            )
            assert reply.strip()
        finally:
            await llm.close()

    async def test_embedding_dimension(self):
        embedder = OpenAIEmbedder(api_key=require_env("OPENAI_API_KEY"))
        try:
            vector = await embedder.embed("Alice works at Acme.")
            assert len(vector) == await embedder.get_dimension() == 1536
        finally:
            await embedder.close()

    async def test_engine_end_to_end(self):
        api_key = require_env("OPENAI_API_KEY")
        config = Config(
            llm=LLMConfig(provider="openai", model="gpt-4o-mini", api_key=api_key),
            embedder=EmbedderConfig(provider="openai", model="text-embedding-3-small", api_key=api_key),
        )

        async with LightGraph.from_config(config) as engine:
            await engine.insert_text(
                "Alice is a senior engineer at Acme Corp. Acme Corp is headquartered in Berlin.",
                document_id="integration-doc",
            )
            result = await engine.query_text("Where does Alice work?")

        assert not result.is_empty()


@pytest.mark.integration
@pytest.mark.asyncio
class TestNeo4jIntegration:
    """Graph storage against a running Neo4j."""

    @pytest.fixture
    async def store(self):
        store = Neo4jGraphStorage(
            uri=require_env("NEO4J_URI"),
            username=os.getenv("NEO4J_USERNAME", "neo4j"),
            password=os.getenv("NEO4J_PASSWORD", "password"),
        )
        await store.initialize()
        yield store
        await store.close()

    async def test_upsert_and_traverse(self, store):
        suffix = uuid.uuid4().hex[:8]
        alice = Entity(name=f"Alice {suffix}", type="person", description="An engineer.", source_chunk_ids=["c1"])
        acme = Entity(name=f"Acme {suffix}", type="organization", description="A company.", source_chunk_ids=["c1"])
        works_at = Relationship(
            entity_a=alice.name,
            entity_b=acme.name,
            description="Alice works at Acme.",
            keywords=["employment"],
            source_chunk_ids=["c1"],
        )

        await store.upsert_entity(alice.key, alice)
        await store.upsert_entity(acme.key, acme)
        await store.upsert_relationship(works_at.key, works_at)

        assert await store.get_entity(alice.key) == alice
        assert await store.get_relationship(works_at.key) == works_at
        assert [edge.key for edge in await store.entity_edges(acme.key)] == [works_at.key]


@pytest.mark.integration
@pytest.mark.asyncio
class TestQdrantIntegration:
    """Vector storage against a running Qdrant."""

    @pytest.fixture
    async def store(self):
        url = urlparse(require_env("QDRANT_URL"))
        store = QdrantVectorStorage(
            embedder=BagOfWordsEmbedder(dimension=16),
            host=url.hostname or "localhost",
            port=url.port or 6333,
            collection_prefix=f"test_{uuid.uuid4().hex[:8]}",
            score_threshold=0.1,
            vector_size=16,
        )
        await store.initialize()
        yield store
        for namespace in ("entities", "relationships", "chunks"):
            await store.client.delete_collection(store.collection(namespace))
        await store.close()

    async def test_index_and_search(self, store):
        await store.index_entity("alice", "Alice\nAn engineer.")
        await store.index_entity("berlin", "Berlin\nA city.")

        hits = await store.search_entities("Alice", top_k=5)

        assert [key for key, _ in hits] == ["alice"]
