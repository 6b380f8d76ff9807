"""Shared fixtures for LightGraph tests.

Unit tests run against the in-memory storages with the fakes from
tests/fakes.py. Integration tests (marked "integration") need running
services and skip when they are unavailable.
"""

import pytest
from fakes import BagOfWordsEmbedder, make_config

from lightgraph.config import Config, TokenizerConfig
from lightgraph.core.graph_store.memory_store import InMemoryGraphStorage
from lightgraph.core.handlers.default import DefaultDocumentHandler, DefaultQueryHandler
from lightgraph.core.kv_store.memory_store import InMemoryKeyValueStorage
from lightgraph.core.storage import Storage
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.core.vector_store.memory_store import InMemoryVectorStorage


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def tokenizer() -> Tokenizer:
    return Tokenizer(TokenizerConfig(provider="approximate"))


@pytest.fixture
def embedder() -> BagOfWordsEmbedder:
    return BagOfWordsEmbedder()


@pytest.fixture
def storage(embedder) -> Storage:
    return Storage(
        graph=InMemoryGraphStorage(),
        vector=InMemoryVectorStorage(embedder),
        kv=InMemoryKeyValueStorage(),
    )


@pytest.fixture
def document_handler(tokenizer) -> DefaultDocumentHandler:
    return DefaultDocumentHandler(tokenizer=tokenizer)


@pytest.fixture
def query_handler() -> DefaultQueryHandler:
    return DefaultQueryHandler()
