"""
Extractor - LLM-driven entity/relationship extraction for one chunk.

One primary extraction call, then up to `gleaning_rounds` follow-up calls
asking for records the previous passes missed. Gleaning stops as soon as a
round adds no new entity or relationship.
"""

from lightgraph.config import Config
from lightgraph.core.handlers.base import DocumentHandler
from lightgraph.core.llm.base import LLMProvider
from lightgraph.models.document import Chunk
from lightgraph.models.extraction import ExtractionResult
from lightgraph.utils.exceptions import ExtractionError
from lightgraph.utils.logger import get_logger
from lightgraph.utils.timeouts import with_timeout

logger = get_logger(__name__)


async def extract_chunk(
    chunk: Chunk,
    handler: DocumentHandler,
    llm: LLMProvider,
    config: Config,
) -> ExtractionResult:
    """
    Extract candidate entities and relationships from a chunk.

    Args:
        chunk: Chunk to extract from
        handler: Builds prompts and parses the output
        llm: LLM provider
        config: Configuration (extraction, llm and concurrency sections)

    Returns:
        Candidates with source set {chunk.id}, duplicates collapsed

    Raises:
        ExtractionError: If the primary extraction call fails
    """
    timeout = config.concurrency.call_timeout
    entity_types = config.extraction.entity_types

    async def ask(messages) -> str:
        return await with_timeout(
            llm.chat(
                messages,
                max_tokens=config.llm.max_tokens,
                temperature=config.llm.temperature,
            ),
            timeout,
        )

    try:
        messages = handler.extraction_prompt(chunk, entity_types)
        result = handler.parse_extraction(await ask(messages), chunk.id, entity_types)
    except Exception as e:
        logger.error(f"Extraction failed for chunk {chunk.id}: {e}")
        raise ExtractionError(
            f"Extraction failed for chunk {chunk.id}: {e}", context={"chunk_id": chunk.id}
        ) from e

    for round_number in range(1, config.extraction.gleaning_rounds + 1):
        try:
            messages = handler.gleaning_prompt(chunk, result)
            gleaned = handler.parse_extraction(await ask(messages), chunk.id, entity_types)
        except Exception as e:
            logger.warning(f"Gleaning round {round_number} failed for chunk {chunk.id}, keeping prior result: {e}")
            break

        new_entities = gleaned.entity_keys() - result.entity_keys()
        new_relationships = gleaned.relationship_keys() - result.relationship_keys()
        result = result.absorb(gleaned)

        logger.debug(
            f"Gleaning round {round_number} for chunk {chunk.id}: "
            f"{len(new_entities)} new entities, {len(new_relationships)} new relationships"
        )
        if not new_entities and not new_relationships:
            break

    if not result.entities:
        logger.bind(chunk_id=chunk.id).info(
            f"No entities extracted from chunk {chunk.id}: {chunk.content_preview!r}"
        )
    if result.diagnostics:
        logger.bind(chunk_id=chunk.id).debug(
            f"Dropped {len(result.diagnostics)} malformed records in chunk {chunk.id}"
        )

    return result
