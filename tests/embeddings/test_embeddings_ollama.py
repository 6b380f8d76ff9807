"""
Tests for Ollama embedder.
"""

from unittest.mock import AsyncMock, patch

import pytest

from lightgraph.core.embeddings.ollama import OllamaEmbedder
from lightgraph.utils import EmbeddingError, ValidationError


@pytest.fixture
def ollama_embedder():
    """Create Ollama embedder for testing."""
    return OllamaEmbedder(host="http://localhost:11434", model="nomic-embed-text")


@pytest.mark.unit
@pytest.mark.asyncio
class TestOllamaEmbedder:
    """Test Ollama embedder."""

    async def test_initialization(self, ollama_embedder):
        assert ollama_embedder.model == "nomic-embed-text"
        assert ollama_embedder.client is not None

    async def test_embed(self, ollama_embedder):
        with patch.object(ollama_embedder.client, "embed", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embeddings": [[0.1, 0.2, 0.3]]}

            vector = await ollama_embedder.embed("Alice works at Acme")

            assert vector == [0.1, 0.2, 0.3]
            assert mock_embed.call_args.kwargs == {
                "model": "nomic-embed-text",
                "input": ["Alice works at Acme"],
            }

    async def test_batch_embed(self, ollama_embedder):
        with patch.object(ollama_embedder.client, "embed", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embeddings": [[1.0, 0.0], [0.0, 1.0]]}

            vectors = await ollama_embedder.batch_embed(["first", "second"])

            assert vectors == [[1.0, 0.0], [0.0, 1.0]]
            mock_embed.assert_awaited_once()

    async def test_dimension_cached(self, ollama_embedder):
        with patch.object(ollama_embedder.client, "embed", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embeddings": [[0.0] * 768]}

            assert await ollama_embedder.get_dimension() == 768
            assert await ollama_embedder.get_dimension() == 768
            assert mock_embed.await_count == 1

    @pytest.mark.parametrize("text", ["", "   "])
    async def test_empty_text(self, ollama_embedder, text):
        with pytest.raises(ValidationError):
            await ollama_embedder.embed(text)

    async def test_empty_batch(self, ollama_embedder):
        with pytest.raises(ValidationError):
            await ollama_embedder.batch_embed([])

    async def test_request_error(self, ollama_embedder):
        with patch.object(ollama_embedder.client, "embed", new_callable=AsyncMock) as mock_embed:
            mock_embed.side_effect = Exception("connection refused")

            with pytest.raises(EmbeddingError, match="connection refused"):
                await ollama_embedder.embed("text")

    async def test_mismatched_response(self, ollama_embedder):
        with patch.object(ollama_embedder.client, "embed", new_callable=AsyncMock) as mock_embed:
            mock_embed.return_value = {"embeddings": [[0.1]]}

            with pytest.raises(EmbeddingError, match="invalid embedding response"):
                await ollama_embedder.batch_embed(["a", "b"])
