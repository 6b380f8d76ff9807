"""
Ollama embedder using native ollama-python SDK.
"""

import ollama

from lightgraph.core.embeddings.base import Embedder
from lightgraph.utils.exceptions import EmbeddingError, ValidationError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaEmbedder(Embedder):
    """
    Ollama embedder for entity, relationship and chunk text.

    Supports models like nomic-embed-text, mxbai-embed-large, bge-m3.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama embedder.

        Args:
            host: Ollama server URL
            model: Embedding model name
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self._dimension: int | None = None

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Generate embedding for text using Ollama.

        Args:
            text: Text to embed
            **kwargs: Additional options passed to Ollama

        Returns:
            Embedding vector as list of floats

        Raises:
            ValidationError: If text is invalid
            EmbeddingError: If Ollama embedding fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        vectors = await self.batch_embed([text], **kwargs)
        return vectors[0]

    async def batch_embed(self, texts: list[str], **kwargs) -> list[list[float]]:
        """
        Embed several texts in one request via the /api/embed endpoint.

        Args:
            texts: Texts to embed
            **kwargs: Additional options passed to Ollama

        Returns:
            Embedding vectors in input order

        Raises:
            ValidationError: If texts list is empty
            EmbeddingError: If Ollama embedding fails
        """
        if not texts:
            raise ValidationError("Texts list cannot be empty")

        try:
            response = await self.client.embed(model=self.model, input=texts, **kwargs)
        except Exception as e:
            logger.error(f"Ollama embedding error: {e}")
            raise EmbeddingError(f"Ollama embedding error: {e}") from e

        embeddings = response["embeddings"]
        if not embeddings or len(embeddings) != len(texts):
            raise EmbeddingError("Ollama returned invalid embedding response")

        if self._dimension is None:
            self._dimension = len(embeddings[0])
        return [list(vector) for vector in embeddings]

    async def get_dimension(self) -> int:
        """
        Get embedding dimension.
        Caches result after first call.

        Returns:
            Embedding vector dimension
        """
        if self._dimension is None:
            await self.embed("test")
        return self._dimension

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
