"""
Ingestion models describing the outcome of a document insert.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChunkStage(str, Enum):
    """Per-chunk insert state machine."""

    CHUNKED = "chunked"
    EXTRACTING = "extracting"
    MERGING = "merging"
    INDEXING = "indexing"
    DONE = "done"


class ChunkFailure(BaseModel):
    """A chunk that failed (or never finished) during insert."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    chunk_id: str
    stage: ChunkStage = Field(..., description="Stage the chunk was in when it failed")
    error: BaseException

    @property
    def error_type(self) -> str:
        return type(self.error).__name__


class InsertReport(BaseModel):
    """Summary of one insert call."""

    document_id: str
    chunk_ids: list[str] = Field(default_factory=list, description="All chunk IDs, in order")
    failures: list[ChunkFailure] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded_chunk_ids(self) -> list[str]:
        failed = {f.chunk_id for f in self.failures}
        return [chunk_id for chunk_id in self.chunk_ids if chunk_id not in failed]

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled
