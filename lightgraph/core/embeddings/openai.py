"""
OpenAI embedder using official SDK.
"""

from openai import AsyncOpenAI

from lightgraph.core.embeddings.base import Embedder
from lightgraph.utils.exceptions import EmbeddingError, ValidationError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAIEmbedder(Embedder):
    """
    OpenAI embedder for entity, relationship and chunk text.

    Supports text-embedding-3-small, text-embedding-3-large and any
    OpenAI-compatible embedding endpoint via base_url.
    """

    # Known dimensions for OpenAI embedding models
    _MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    # OpenAI accepts up to 2048 inputs per request
    _MAX_BATCH = 2048

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key
            model: Embedding model name
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Generate embedding for text using OpenAI.

        Args:
            text: Text to embed
            **kwargs: Additional parameters (e.g., dimensions)

        Returns:
            Embedding vector as list of floats

        Raises:
            ValidationError: If text is invalid
            EmbeddingError: If OpenAI API call fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        vectors = await self.batch_embed([text], **kwargs)
        return vectors[0]

    async def batch_embed(self, texts: list[str], **kwargs) -> list[list[float]]:
        """
        Batch embed using OpenAI's native batch input.

        Args:
            texts: List of texts to embed
            **kwargs: Additional parameters

        Returns:
            List of embedding vectors in input order

        Raises:
            ValidationError: If texts list is empty
            EmbeddingError: If batch embedding fails
        """
        if not texts:
            raise ValidationError("Texts list cannot be empty")

        embeddings: list[list[float]] = []
        try:
            for i in range(0, len(texts), self._MAX_BATCH):
                batch = texts[i : i + self._MAX_BATCH]
                response = await self.client.embeddings.create(
                    model=self.model, input=batch, **kwargs
                )
                if not response.data:
                    raise EmbeddingError("OpenAI returned empty embedding response")
                embeddings.extend(item.embedding for item in response.data)
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(f"OpenAI embedding error: {e}")
            raise EmbeddingError(f"OpenAI embedding error: {e}") from e

        return embeddings

    async def get_dimension(self) -> int:
        """
        Get embedding dimension.

        Uses known dimensions for OpenAI models, falling back to a test embedding.

        Returns:
            Embedding vector dimension
        """
        if self.model in self._MODEL_DIMENSIONS:
            return self._MODEL_DIMENSIONS[self.model]
        return await super().get_dimension()

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
