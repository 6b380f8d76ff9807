"""
Embedding provider interface.

The vector storages call an embedder for every entity, relationship and
chunk they index and for every search query, so the same provider (and
model) must be used for indexing and querying a given store.
"""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """Maps text to fixed-size vectors."""

    @abstractmethod
    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Embed one text.

        Args:
            text: Non-blank text
            **kwargs: Provider-specific options

        Returns:
            Vector of get_dimension() floats

        Raises:
            ValidationError: If the text is blank
            EmbeddingError: If the provider call fails
        """

    async def batch_embed(self, texts: list[str], **kwargs) -> list[list[float]]:
        """
        Embed several texts, one vector per text in input order.

        Providers with a native batch endpoint override this.
        """
        return [await self.embed(text, **kwargs) for text in texts]

    async def get_dimension(self) -> int:
        """Vector size, probed with a one-word embedding unless the provider knows it."""
        return len(await self.embed("dimension"))

    @abstractmethod
    async def close(self):
        """Release the provider's client."""
