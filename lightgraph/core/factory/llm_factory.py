"""
Factory for creating LLM providers.
"""

from lightgraph.config import LLMConfig
from lightgraph.core.llm.base import LLMProvider
from lightgraph.core.llm.ollama import OllamaLLM
from lightgraph.core.llm.openai import OpenAILLM
from lightgraph.utils.exceptions import ConfigurationError

OLLAMA_HOST = "http://localhost:11434"


class LLMFactory:
    """Factory for creating LLM providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """
        Create LLM provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            LLM provider instance

        Raises:
            ConfigurationError: If provider is not supported or the API key is missing
        """
        if config.provider == "ollama":
            return OllamaLLM(
                host=config.base_url or OLLAMA_HOST,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            return OpenAILLM(
                api_key=config.api_key,
                model=config.model,
                base_url=config.base_url,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported LLM provider: {config.provider}")
