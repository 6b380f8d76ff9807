"""
Chunker - splits a document into chunks via the document handler.
"""

from lightgraph.config import ChunkingConfig
from lightgraph.core.handlers.base import DocumentHandler
from lightgraph.models.document import Chunk, Document
from lightgraph.utils.exceptions import ChunkingError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


def chunks_for_document(
    document: Document, handler: DocumentHandler, config: ChunkingConfig
) -> list[Chunk]:
    """
    Split a document into ordered chunks.

    Args:
        document: Document to split
        handler: Document handler owning the chunking policy
        config: Chunking configuration

    Returns:
        Chunks in document order (empty for a blank document)

    Raises:
        ChunkingError: If the handler fails or returns invalid chunks
    """
    try:
        chunks = list(handler.chunks(document, config))
    except Exception as e:
        logger.error(f"Chunking failed for document {document.id}: {e}")
        raise ChunkingError(
            f"Failed to chunk document {document.id}: {e}",
            context={"document_id": document.id},
        ) from e

    seen: set[str] = set()
    for chunk in chunks:
        if chunk.id in seen:
            raise ChunkingError(
                f"Duplicate chunk ID {chunk.id} in document {document.id}",
                context={"document_id": document.id, "chunk_id": chunk.id},
            )
        if chunk.document_id != document.id:
            raise ChunkingError(
                f"Chunk {chunk.id} belongs to document {chunk.document_id}, not {document.id}",
                context={"document_id": document.id, "chunk_id": chunk.id},
            )
        seen.add(chunk.id)

    logger.bind(document_id=document.id, chunks=len(chunks)).info(
        f"Document {document.id} split into {len(chunks)} chunks"
    )
    return chunks
