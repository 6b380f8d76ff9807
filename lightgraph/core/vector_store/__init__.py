"""
Vector store implementations for LightGraph.

Available backends:
- InMemoryVectorStorage: numpy brute-force cosine search
- QdrantVectorStorage: Qdrant collections with HNSW indexing
"""

from lightgraph.core.vector_store.base import VectorStorage
from lightgraph.core.vector_store.memory_store import InMemoryVectorStorage
from lightgraph.core.vector_store.qdrant import QdrantVectorStorage

__all__ = ["VectorStorage", "InMemoryVectorStorage", "QdrantVectorStorage"]
