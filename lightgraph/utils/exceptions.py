"""
Custom exception hierarchy for LightGraph.

Provides structured error types for the insert and query pipelines and for
the storage/LLM adapters they call. All exceptions inherit from
LightGraphError for easy catching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lightgraph.models.ingestion import InsertReport


class LightGraphError(Exception):
    """
    Base exception for all LightGraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize LightGraph error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


# ═══════════════════════════════════════════════════════════
# ADAPTER ERRORS
# ═══════════════════════════════════════════════════════════


class StoreError(LightGraphError):
    """
    Base exception for store operations.
    Used for errors related to data storage operations.
    """

    pass


class VectorStoreError(StoreError):
    """
    Vector store operation errors.
    Raised when vector database operations fail.
    """

    pass


class GraphStoreError(StoreError):
    """
    Graph store operation errors.
    Raised when graph database operations fail.
    """

    pass


class KeyValueStoreError(StoreError):
    """
    Key-value store operation errors.
    Raised when chunk storage operations fail.
    """

    pass


class ValidationError(LightGraphError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class ConfigurationError(LightGraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class EmbeddingError(LightGraphError):
    """
    Embedding generation errors.
    Raised when embedding generation fails.
    """

    pass


class LLMError(LightGraphError):
    """
    LLM operation errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass


# ═══════════════════════════════════════════════════════════
# INSERT PIPELINE ERRORS (per chunk)
# ═══════════════════════════════════════════════════════════


class ChunkingError(LightGraphError):
    """Raised when the document handler cannot split a document into chunks."""

    pass


class ExtractionError(LightGraphError):
    """Raised when the primary extraction call for a chunk fails."""

    pass


class MergeError(LightGraphError):
    """Raised when merging a chunk's entities/relationships into the graph fails."""

    pass


class IndexingError(LightGraphError):
    """Raised when writing a chunk's records to the vector or key-value store fails."""

    pass


class InsertError(LightGraphError):
    """
    Aggregate error for a document insert.

    Raised once all chunks have finished if one or more of them failed.
    Writes made by chunks that succeeded are kept.
    """

    def __init__(self, report: InsertReport, context: dict | None = None):
        """
        Initialize insert error from a finished insert report.

        Args:
            report: Report holding every chunk failure
            context: Optional context dictionary
        """
        failed = ", ".join(f"{f.chunk_id} ({f.stage.value}: {f.error})" for f in report.failures)
        prefix = "Insert cancelled" if report.cancelled else "Insert failed"
        super().__init__(
            f"{prefix} for document {report.document_id}: "
            f"{len(report.failures)}/{len(report.chunk_ids)} chunks failed: {failed}",
            context=context or {"document_id": report.document_id},
        )
        self.report = report

    @property
    def failed_chunk_ids(self) -> list[str]:
        """IDs of the chunks that failed or never finished."""
        return [f.chunk_id for f in self.report.failures]

    @property
    def cancelled(self) -> bool:
        """True when the insert was cancelled by the caller."""
        return self.report.cancelled


# ═══════════════════════════════════════════════════════════
# QUERY PIPELINE ERRORS
# ═══════════════════════════════════════════════════════════


class KeywordExtractionError(LightGraphError):
    """Raised when keywords cannot be extracted from the query conversation."""

    pass


class RetrievalError(LightGraphError):
    """Raised when every retrieval leg of a query fails."""

    pass


class OperationCancelledError(LightGraphError):
    """Raised (or recorded per chunk) when the caller cancels an insert or query."""

    pass
