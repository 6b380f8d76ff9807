"""
Shared test fixtures for graph store tests.
"""

import pytest

from lightgraph.core.graph_store.memory_store import InMemoryGraphStorage
from lightgraph.core.graph_store.neo4j_store import Neo4jGraphStorage
from lightgraph.models import Entity, Relationship


@pytest.fixture
def neo4j_store():
    """Create Neo4j store for testing."""
    return Neo4jGraphStorage(
        uri="bolt://localhost:7687",
        username="neo4j",
        password="password",
        database="neo4j",
    )


@pytest.fixture
def graph_store():
    return InMemoryGraphStorage()


@pytest.fixture
def alice():
    return Entity(name="Alice", type="person", description="An engineer", source_chunk_ids=["c1"])


@pytest.fixture
def acme():
    return Entity(name="Acme", type="organization", description="A company", source_chunk_ids=["c1"])


@pytest.fixture
def works_at():
    return Relationship(
        entity_a="Alice",
        entity_b="Acme",
        description="Alice works at Acme",
        keywords=["employment"],
        weight=9.0,
        source_chunk_ids=["c1"],
    )
