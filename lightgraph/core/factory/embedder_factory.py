"""
Factory for creating embedder providers.
"""

from lightgraph.config import EmbedderConfig
from lightgraph.core.embeddings.base import Embedder
from lightgraph.core.embeddings.ollama import OllamaEmbedder
from lightgraph.core.embeddings.openai import OpenAIEmbedder
from lightgraph.utils.exceptions import ConfigurationError

OLLAMA_HOST = "http://localhost:11434"


class EmbedderFactory:
    """Factory for creating embedder providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig) -> Embedder:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration

        Returns:
            Embedder instance

        Raises:
            ConfigurationError: If provider is not supported or the API key is missing
        """
        if config.provider == "ollama":
            return OllamaEmbedder(
                host=config.base_url or OLLAMA_HOST,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAIEmbedder(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported embedder provider: {config.provider}")
