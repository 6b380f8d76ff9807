"""
Factory modules for creating LightGraph components.

Provides modular factories for LLM, Embedder and the three storage backends.
"""

from lightgraph.core.factory.embedder_factory import EmbedderFactory
from lightgraph.core.factory.llm_factory import LLMFactory
from lightgraph.core.factory.storage_factory import (
    GraphStoreFactory,
    KeyValueStoreFactory,
    StorageFactory,
    VectorStoreFactory,
)

__all__ = [
    "LLMFactory",
    "EmbedderFactory",
    "GraphStoreFactory",
    "VectorStoreFactory",
    "KeyValueStoreFactory",
    "StorageFactory",
]
