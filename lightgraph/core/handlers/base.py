"""
Handler contracts - the customization points for chunking, prompting and parsing.

The pipelines never build prompts or parse LLM output themselves; they ask a
DocumentHandler (insert side) or a QueryHandler (query side). Custom
handlers usually wrap the default ones and override a single method.
"""

from abc import ABC, abstractmethod

from lightgraph.config import ChunkingConfig
from lightgraph.models.document import Chunk, Document
from lightgraph.models.extraction import ExtractionResult
from lightgraph.models.query import ChatMessage, KeywordSets


class DocumentHandler(ABC):
    """Chunking, extraction prompting and extraction parsing for inserts."""

    @abstractmethod
    def chunks(self, document: Document, config: ChunkingConfig) -> list[Chunk]:
        """
        Split a document into ordered chunks with deterministic IDs.

        Args:
            document: Document to split
            config: Chunking policy

        Returns:
            Chunks in document order (empty for blank documents)
        """
        pass

    @abstractmethod
    def extraction_prompt(self, chunk: Chunk, entity_types: list[str]) -> list[ChatMessage]:
        """
        Build the primary extraction request for a chunk.

        Args:
            chunk: Chunk to extract from
            entity_types: Entity type vocabulary

        Returns:
            Chat messages for the LLM
        """
        pass

    @abstractmethod
    def gleaning_prompt(self, chunk: Chunk, prior_result: ExtractionResult) -> list[ChatMessage]:
        """
        Build a follow-up request asking for records missed so far.

        Args:
            chunk: Chunk being extracted
            prior_result: Everything extracted from the chunk so far

        Returns:
            Chat messages for the LLM
        """
        pass

    @abstractmethod
    def parse_extraction(
        self, text: str, chunk_id: str, entity_types: list[str] | None = None
    ) -> ExtractionResult:
        """
        Parse LLM output into candidate entities and relationships.

        Must never raise on malformed output; dropped fragments go into
        the result's diagnostics.

        Args:
            text: Raw LLM output
            chunk_id: Chunk the output was extracted from
            entity_types: Vocabulary the prompt asked for (handler default if None)

        Returns:
            Parsed candidates with source set {chunk_id}
        """
        pass

    @abstractmethod
    def summary_prompt(self, name: str, descriptions: list[str]) -> list[ChatMessage]:
        """
        Build a request to condense an overlong merged description.

        Args:
            name: Entity name or relationship pair label
            descriptions: Description segments to summarize

        Returns:
            Chat messages for the LLM
        """
        pass


class QueryHandler(ABC):
    """Keyword prompting and parsing for queries."""

    @abstractmethod
    def keyword_prompt(self, conversation: list[ChatMessage]) -> list[ChatMessage]:
        """
        Build the keyword extraction request for a conversation.

        Args:
            conversation: Query conversation, last message is the question

        Returns:
            Chat messages for the LLM
        """
        pass

    @abstractmethod
    def parse_keywords(self, text: str) -> KeywordSets:
        """
        Parse LLM output into low- and high-level keyword sets.

        Args:
            text: Raw LLM output

        Returns:
            Keyword sets (possibly empty)
        """
        pass
