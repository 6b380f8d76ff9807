"""
Document and Chunk models for source content.

Documents are caller-owned input. The document handler splits them into
ordered, possibly overlapping chunks whose IDs are deterministic so that
re-inserting unchanged content touches the same storage keys.
"""

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """
    Source document handed to insert.

    The core never mutates a document.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Caller-owned document ID")
    content: str = Field(..., description="Full document text")


class Chunk(BaseModel):
    """
    Ordered piece of a document.

    Chunks are immutable once produced. The ID is derived from the parent
    document ID, the order index and the content (see generate_chunk_id).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Deterministic chunk ID")
    content: str = Field(..., description="Chunk text")
    order_index: int = Field(..., ge=0, description="Zero-based position within the document")
    document_id: str = Field(..., min_length=1, description="Parent document ID")
    tokens: int = Field(default=0, ge=0, description="Token count of the chunk text")

    @property
    def content_preview(self) -> str:
        """First 80 characters of the chunk, for log lines."""
        return self.content[:80] + "..." if len(self.content) > 80 else self.content
