"""
Graph store implementations for LightGraph.

Available backends:
- InMemoryGraphStorage: Dictionary-backed reference implementation
- Neo4jGraphStorage: Production-grade graph database
"""

from lightgraph.core.graph_store.base import GraphStorage
from lightgraph.core.graph_store.memory_store import InMemoryGraphStorage
from lightgraph.core.graph_store.neo4j_store import Neo4jGraphStorage

__all__ = [
    "GraphStorage",
    "InMemoryGraphStorage",
    "Neo4jGraphStorage",
]
