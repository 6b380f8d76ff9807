"""
ID generation utilities for LightGraph.

Provides consistent ID generation:
- Documents: doc_xxx (random, for callers that do not bring their own ID)
- Chunks: chunk-<md5> (deterministic over document ID, position and content)
"""

from hashlib import md5
from uuid import uuid4


def generate_document_id() -> str:
    """
    Generate unique Document ID.

    Returns:
        ID in format "doc_xxx" where xxx is 12 hex characters
    """
    return f"doc_{uuid4().hex[:12]}"


def generate_chunk_id(document_id: str, order_index: int, content: str) -> str:
    """
    Generate a deterministic Chunk ID.

    The same document ID, position and content always produce the same ID,
    so re-inserting an unchanged document upserts the same keys.

    Args:
        document_id: Parent document ID
        order_index: Zero-based chunk position within the document
        content: Chunk text

    Returns:
        ID in format "chunk-<32 hex chars>"
    """
    digest = md5(f"{document_id}\x1f{order_index}\x1f{content}".encode()).hexdigest()
    return f"chunk-{digest}"
