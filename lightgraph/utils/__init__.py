"""Utility modules for LightGraph."""

from lightgraph.utils.exceptions import (
    ChunkingError,
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    GraphStoreError,
    IndexingError,
    InsertError,
    KeyValueStoreError,
    KeywordExtractionError,
    LightGraphError,
    LLMError,
    MergeError,
    OperationCancelledError,
    RetrievalError,
    StoreError,
    ValidationError,
    VectorStoreError,
)
from lightgraph.utils.id_generator import generate_chunk_id, generate_document_id
from lightgraph.utils.locks import KeyedLock
from lightgraph.utils.logger import get_logger, setup_logging
from lightgraph.utils.timeouts import with_timeout

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_document_id",
    "generate_chunk_id",
    # Concurrency
    "KeyedLock",
    "with_timeout",
    # Exceptions
    "LightGraphError",
    "StoreError",
    "VectorStoreError",
    "GraphStoreError",
    "KeyValueStoreError",
    "ValidationError",
    "ConfigurationError",
    "EmbeddingError",
    "LLMError",
    "ChunkingError",
    "ExtractionError",
    "MergeError",
    "IndexingError",
    "InsertError",
    "KeywordExtractionError",
    "RetrievalError",
    "OperationCancelledError",
]
