"""
Default document and query handlers.

Customize by wrapping these classes and delegating the methods you do not
change, e.g. a handler that pre-cleans markup before calling
DefaultDocumentHandler.chunks.
"""

import pydantic
from pydantic import BaseModel, Field

from lightgraph.config import DEFAULT_ENTITY_TYPES, ChunkingConfig
from lightgraph.core.handlers.base import DocumentHandler, QueryHandler
from lightgraph.core.handlers.parsing import parse_extraction_records
from lightgraph.core.handlers.prompts import (
    COMPLETION_DELIMITER,
    EXTRACTION_SYSTEM_PROMPT,
    EXTRACTION_USER_PROMPT,
    GLEANING_PROMPT,
    KEYWORD_SYSTEM_PROMPT,
    KEYWORD_USER_PROMPT,
    SUMMARY_PROMPT,
    TUPLE_DELIMITER,
)
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.models.document import Chunk, Document
from lightgraph.models.extraction import ExtractionResult
from lightgraph.models.query import ChatMessage, KeywordSets, Role
from lightgraph.utils.exceptions import ValidationError
from lightgraph.utils.id_generator import generate_chunk_id
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class DefaultDocumentHandler(DocumentHandler):
    """
    Token-window chunking plus delimiter-record extraction prompts.

    Chunking: the document is split into windows of chunk_token_size tokens
    overlapping by chunk_overlap_token_size. With split_by_character set,
    the document is first split on that separator and only pieces longer
    than chunk_token_size are re-windowed.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        entity_types: list[str] | None = None,
        language: str = "English",
    ):
        """
        Initialize the default document handler.

        Args:
            tokenizer: Token counter used for windowing (default tiktoken)
            entity_types: Vocabulary extracted types are mapped onto
            language: Language descriptions and summaries are written in
        """
        self.tokenizer = tokenizer or Tokenizer()
        self.entity_types = list(entity_types or DEFAULT_ENTITY_TYPES)
        self.language = language

    def chunks(self, document: Document, config: ChunkingConfig) -> list[Chunk]:
        if not document.content.strip():
            return []

        size, overlap = config.chunk_token_size, config.chunk_overlap_token_size
        if config.split_by_character:
            pieces = []
            for piece in document.content.split(config.split_by_character):
                if self.tokenizer.count_tokens(piece) > size:
                    pieces.extend(self.tokenizer.split_windows(piece, size, overlap))
                else:
                    pieces.append(piece)
        else:
            pieces = self.tokenizer.split_windows(document.content, size, overlap)

        chunks = []
        for piece in pieces:
            content = piece.strip()
            if not content:
                continue
            order_index = len(chunks)
            chunks.append(
                Chunk(
                    id=generate_chunk_id(document.id, order_index, content),
                    content=content,
                    order_index=order_index,
                    document_id=document.id,
                    tokens=self.tokenizer.count_tokens(content),
                )
            )
        return chunks

    def extraction_prompt(self, chunk: Chunk, entity_types: list[str]) -> list[ChatMessage]:
        return [
            ChatMessage(role=Role.SYSTEM, content=EXTRACTION_SYSTEM_PROMPT),
            ChatMessage(
                role=Role.USER,
                content=EXTRACTION_USER_PROMPT.format(
                    entity_types=", ".join(entity_types),
                    language=self.language,
                    content=chunk.content,
                ),
            ),
        ]

    def gleaning_prompt(self, chunk: Chunk, prior_result: ExtractionResult) -> list[ChatMessage]:
        known = [
            TUPLE_DELIMITER.join(("entity", entity.name, entity.type))
            for entity in prior_result.entities
        ]
        known.extend(
            TUPLE_DELIMITER.join(("relationship", rel.entity_a, rel.entity_b))
            for rel in prior_result.relationships
        )
        return [
            ChatMessage(role=Role.SYSTEM, content=EXTRACTION_SYSTEM_PROMPT),
            ChatMessage(
                role=Role.USER,
                content=GLEANING_PROMPT.format(
                    known="\n".join(known) or "(nothing)",
                    completion=COMPLETION_DELIMITER,
                    content=chunk.content,
                ),
            ),
        ]

    def parse_extraction(
        self, text: str, chunk_id: str, entity_types: list[str] | None = None
    ) -> ExtractionResult:
        result = parse_extraction_records(text, chunk_id, entity_types or self.entity_types)
        for note in result.diagnostics:
            logger.debug(f"Extraction parse ({chunk_id}): {note}")
        return result

    def summary_prompt(self, name: str, descriptions: list[str]) -> list[ChatMessage]:
        return [
            ChatMessage(
                role=Role.USER,
                content=SUMMARY_PROMPT.format(
                    name=name,
                    descriptions="\n".join(f"- {d}" for d in descriptions),
                    language=self.language,
                ),
            )
        ]


class KeywordResponse(BaseModel):
    """JSON shape the keyword prompt asks for."""

    high_level_keywords: list[str] = Field(default_factory=list)
    low_level_keywords: list[str] = Field(default_factory=list)


class DefaultQueryHandler(QueryHandler):
    """JSON keyword extraction from the last conversation message plus history."""

    def keyword_prompt(self, conversation: list[ChatMessage]) -> list[ChatMessage]:
        if not conversation:
            raise ValidationError("Conversation cannot be empty")

        *history, question = conversation
        history_text = "\n".join(f"{m.role.value}: {m.content}" for m in history)
        return [
            ChatMessage(role=Role.SYSTEM, content=KEYWORD_SYSTEM_PROMPT),
            ChatMessage(
                role=Role.USER,
                content=KEYWORD_USER_PROMPT.format(
                    history=history_text or "(none)", query=question.content
                ),
            ),
        ]

    def parse_keywords(self, text: str) -> KeywordSets:
        cleaned = self._extract_json(text or "")
        try:
            response = KeywordResponse.model_validate_json(cleaned)
        except pydantic.ValidationError as e:
            logger.warning(f"Keyword output is not valid JSON, using empty keyword sets: {e}")
            return KeywordSets()

        return KeywordSets(
            low_level=response.low_level_keywords,
            high_level=response.high_level_keywords,
        )

    def _extract_json(self, content: str) -> str:
        """
        Extract JSON from content that might have markdown formatting.

        Args:
            content: Raw content that may contain JSON

        Returns:
            Cleaned JSON string
        """
        content = content.strip()

        # Remove markdown code blocks
        if "```json" in content:
            content = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            content = content.split("```")[1].split("```")[0].strip()

        return content
