"""
Indexer - writes a merged chunk's records to key-value and vector storage.
"""

from lightgraph.core.storage import Storage
from lightgraph.models.document import Chunk
from lightgraph.services.merger import MergeOutcome
from lightgraph.utils.exceptions import IndexingError
from lightgraph.utils.logger import get_logger
from lightgraph.utils.timeouts import with_timeout

logger = get_logger(__name__)


async def index_chunk(
    chunk: Chunk,
    outcome: MergeOutcome,
    storage: Storage,
    timeout: float | None = None,
) -> None:
    """
    Store the chunk text and (re-)index the chunk and everything its merge touched.

    Re-indexing a key overwrites the previous vector for it.

    Args:
        chunk: Chunk that was merged
        outcome: Post-merge entities and relationships
        storage: Storage bundle
        timeout: Optional per-call timeout in seconds

    Raises:
        IndexingError: If any key-value or vector write fails
    """
    try:
        await with_timeout(storage.kv.put_chunk(chunk.id, chunk), timeout)
        await with_timeout(storage.vector.index_chunk(chunk.id, chunk.content), timeout)

        for entity in outcome.entities:
            await with_timeout(
                storage.vector.index_entity(entity.key, entity.embedding_text()), timeout
            )
        for relationship in outcome.relationships:
            await with_timeout(
                storage.vector.index_relationship(relationship.key, relationship.embedding_text()),
                timeout,
            )
    except Exception as e:
        logger.error(f"Indexing failed for chunk {chunk.id}: {e}")
        raise IndexingError(
            f"Indexing failed for chunk {chunk.id}: {e}", context={"chunk_id": chunk.id}
        ) from e

    logger.bind(chunk_id=chunk.id).debug(
        f"Indexed chunk {chunk.id}: {len(outcome.entities)} entities, "
        f"{len(outcome.relationships)} relationships"
    )
