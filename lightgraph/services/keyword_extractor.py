"""
Keyword extractor - one LLM call turning a conversation into keyword sets.
"""

from lightgraph.config import Config
from lightgraph.core.handlers.base import QueryHandler
from lightgraph.core.llm.base import LLMProvider
from lightgraph.models.query import ChatMessage, KeywordSets
from lightgraph.utils.exceptions import KeywordExtractionError
from lightgraph.utils.logger import get_logger
from lightgraph.utils.timeouts import with_timeout

logger = get_logger(__name__)


async def extract_keywords(
    conversation: list[ChatMessage],
    handler: QueryHandler,
    llm: LLMProvider,
    config: Config,
) -> KeywordSets:
    """
    Extract low-level and high-level keywords from a query conversation.

    Empty keyword sets are a valid result.

    Args:
        conversation: Query conversation
        handler: Builds the prompt and parses the output
        llm: LLM provider
        config: Configuration (llm and concurrency sections)

    Returns:
        Keyword sets

    Raises:
        KeywordExtractionError: If the LLM call or the handler fails
    """
    try:
        messages = handler.keyword_prompt(conversation)
        text = await with_timeout(
            llm.chat(
                messages,
                max_tokens=config.llm.max_tokens,
                temperature=config.llm.temperature,
            ),
            config.concurrency.call_timeout,
        )
        keywords = handler.parse_keywords(text)
    except Exception as e:
        logger.error(f"Keyword extraction failed: {e}")
        raise KeywordExtractionError(f"Keyword extraction failed: {e}") from e

    logger.bind(low_level=keywords.low_level, high_level=keywords.high_level).info(
        f"Extracted {len(keywords.low_level)} low-level and "
        f"{len(keywords.high_level)} high-level keywords"
    )
    return keywords
