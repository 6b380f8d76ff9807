"""
Shared test fixtures for vector store tests.
"""

import pytest
from fakes import BagOfWordsEmbedder

from lightgraph.core.vector_store.memory_store import InMemoryVectorStorage
from lightgraph.core.vector_store.qdrant import QdrantVectorStorage


@pytest.fixture
def qdrant_store():
    """Create Qdrant store for testing."""
    return QdrantVectorStorage(
        embedder=BagOfWordsEmbedder(dimension=8),
        host="localhost",
        port=6333,
        collection_prefix="test",
        vector_size=8,
    )


@pytest.fixture
def vector_store():
    return InMemoryVectorStorage(BagOfWordsEmbedder())
