"""
Query pipeline - conversation -> keywords -> hybrid retrieval -> assembled context.
"""

import asyncio

from lightgraph.config import Config, default_config
from lightgraph.core.handlers.base import QueryHandler
from lightgraph.core.llm.base import LLMProvider
from lightgraph.core.storage import Storage
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.models.query import ChatMessage, QueryResult
from lightgraph.services.context_assembler import ContextAssembler
from lightgraph.services.keyword_extractor import extract_keywords
from lightgraph.services.retriever import HybridRetriever
from lightgraph.utils.exceptions import OperationCancelledError, ValidationError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


async def query(
    conversation: list[ChatMessage],
    handler: QueryHandler,
    storage: Storage,
    llm: LLMProvider,
    config: Config | None = None,
    *,
    tokenizer: Tokenizer | None = None,
) -> QueryResult:
    """
    Retrieve the structured context for a conversation.

    Args:
        conversation: Ordered messages; the last one is the question
        handler: Keyword prompting/parsing strategy
        storage: Graph, vector and key-value stores
        llm: LLM provider for keyword extraction
        config: Configuration (default_config if omitted)
        tokenizer: Token counter for the context budgets

    Returns:
        Deduplicated, ranked and budgeted query result

    Raises:
        ValidationError: If the conversation is empty
        KeywordExtractionError: If keywords cannot be extracted
        RetrievalError: If every retrieval leg fails
        OperationCancelledError: If the query is cancelled
    """
    config = config or default_config
    if not conversation:
        raise ValidationError("Conversation cannot be empty")

    try:
        keywords = await extract_keywords(conversation, handler, llm, config)
        retriever = HybridRetriever(storage, config.query, config.concurrency.call_timeout)
        retrieval = await retriever.retrieve(keywords)
    except asyncio.CancelledError as e:
        logger.warning("Query cancelled")
        raise OperationCancelledError("Query cancelled") from e

    assembler = ContextAssembler(config.query, tokenizer or Tokenizer(config.tokenizer))
    return assembler.assemble(retrieval)
