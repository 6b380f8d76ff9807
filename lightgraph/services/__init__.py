"""
Services for LightGraph.

Insert side: chunker, extractor, merger, indexer, insert pipeline.
Query side: keyword extractor, hybrid retriever, context assembler, query pipeline.
"""

from lightgraph.services.context_assembler import ContextAssembler
from lightgraph.services.engine import LightGraph
from lightgraph.services.insert_pipeline import insert
from lightgraph.services.merger import GraphMerger, MergeOutcome
from lightgraph.services.query_pipeline import query
from lightgraph.services.retriever import HybridRetriever, LegResult, RetrievalResult

__all__ = [
    "LightGraph",
    "insert",
    "query",
    "GraphMerger",
    "MergeOutcome",
    "HybridRetriever",
    "LegResult",
    "RetrievalResult",
    "ContextAssembler",
]
