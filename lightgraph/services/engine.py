"""
LightGraph engine - facade over the insert and query pipelines.

Brings together:
- LLM provider and storage bundle
- Document and query handlers
- One KeyedLock shared by every insert, so concurrent inserts merge safely
"""

from lightgraph.config import Config, default_config
from lightgraph.core.embeddings.base import Embedder
from lightgraph.core.factory import EmbedderFactory, LLMFactory, StorageFactory
from lightgraph.core.handlers.base import DocumentHandler, QueryHandler
from lightgraph.core.handlers.default import DefaultDocumentHandler, DefaultQueryHandler
from lightgraph.core.llm.base import LLMProvider
from lightgraph.core.storage import Storage
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.models.document import Document
from lightgraph.models.query import ChatMessage, QueryResult, Role
from lightgraph.services.insert_pipeline import insert as run_insert
from lightgraph.services.query_pipeline import query as run_query
from lightgraph.utils.exceptions import ValidationError
from lightgraph.utils.id_generator import generate_document_id
from lightgraph.utils.locks import KeyedLock
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class LightGraph:
    """
    Graph-RAG engine.

    Usage:
        async with LightGraph.from_config(Config.from_env()) as engine:
            await engine.insert_text("Alice works at Acme.")
            result = await engine.query_text("Where does Alice work?")
    """

    def __init__(
        self,
        llm: LLMProvider,
        storage: Storage,
        config: Config | None = None,
        document_handler: DocumentHandler | None = None,
        query_handler: QueryHandler | None = None,
    ):
        """
        Initialize the engine.

        Args:
            llm: LLM provider for extraction, summaries and keywords
            storage: Graph, vector and key-value stores
            config: Configuration (default_config if omitted)
            document_handler: Insert-side handler (DefaultDocumentHandler if omitted)
            query_handler: Query-side handler (DefaultQueryHandler if omitted)
        """
        self.llm = llm
        self.storage = storage
        self.config = config or default_config
        self.tokenizer = Tokenizer(self.config.tokenizer)
        self.document_handler = document_handler or DefaultDocumentHandler(
            tokenizer=self.tokenizer,
            entity_types=self.config.extraction.entity_types,
            language=self.config.extraction.language,
        )
        self.query_handler = query_handler or DefaultQueryHandler()
        self.locks = KeyedLock()
        self.embedder: Embedder | None = None

    @classmethod
    def from_config(cls, config: Config | None = None) -> "LightGraph":
        """
        Build an engine and all its collaborators from configuration.

        Args:
            config: Configuration (default_config if omitted)

        Returns:
            Engine (call initialize() before use)
        """
        config = config or default_config
        llm = LLMFactory.create(config.llm)
        embedder = EmbedderFactory.create(config.embedder)
        storage = StorageFactory.create(config, embedder)

        engine = cls(llm=llm, storage=storage, config=config)
        engine.embedder = embedder
        return engine

    async def initialize(self) -> None:
        """Initialize all stores."""
        logger.info("Initializing LightGraph engine")
        await self.storage.initialize()
        logger.info("LightGraph engine ready")

    async def insert(self, document: Document) -> None:
        """
        Insert a document.

        Raises:
            ChunkingError: If the document cannot be chunked
            InsertError: If any chunk failed
        """
        await run_insert(
            document,
            self.document_handler,
            self.storage,
            self.llm,
            self.config,
            locks=self.locks,
            tokenizer=self.tokenizer,
        )

    async def insert_text(self, content: str, document_id: str | None = None) -> str:
        """
        Insert raw text as a document.

        Args:
            content: Document text
            document_id: Optional ID (generated if omitted)

        Returns:
            Document ID
        """
        document = Document(id=document_id or generate_document_id(), content=content)
        await self.insert(document)
        return document.id

    async def query(self, conversation: list[ChatMessage]) -> QueryResult:
        """Retrieve the context for a conversation."""
        return await run_query(
            conversation,
            self.query_handler,
            self.storage,
            self.llm,
            self.config,
            tokenizer=self.tokenizer,
        )

    async def query_text(self, text: str) -> QueryResult:
        """Retrieve the context for a single user question."""
        if not text or not text.strip():
            raise ValidationError("Query text cannot be empty")
        return await self.query([ChatMessage(role=Role.USER, content=text)])

    async def close(self) -> None:
        """Close stores and providers."""
        logger.info("Closing LightGraph engine")
        await self.storage.close()
        await self.llm.close()
        if self.embedder is not None:
            await self.embedder.close()

    async def __aenter__(self) -> "LightGraph":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
