"""
Ollama LLM provider using native ollama-python SDK.
"""

import ollama

from lightgraph.core.llm.base import LLMProvider
from lightgraph.models.query import ChatMessage
from lightgraph.utils.exceptions import LLMError, ValidationError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for chat completions.

    Uses native ollama-python SDK.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
        num_ctx: int | None = None,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "qwen2.5")
            timeout: Request timeout in seconds
            num_ctx: Optional context window override (extraction prompts are long)
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self.num_ctx = num_ctx

        # Create async client
        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def chat(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> str:
        """
        Generate the next assistant message using Ollama.

        Args:
            messages: Ordered chat messages
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional options (passed to Ollama)

        Returns:
            Generated text

        Raises:
            LLMError: If the Ollama call fails
            ValidationError: If no messages are given
        """
        if not messages:
            raise ValidationError("Messages cannot be empty")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.get("options", {}),
        }
        if self.num_ctx:
            options.setdefault("num_ctx", self.num_ctx)

        try:
            response = await self.client.chat(
                model=self.model,
                messages=[message.to_dict() for message in messages],
                options=options,
                **{k: v for k, v in kwargs.items() if k != "options"},
            )
        except Exception as e:
            logger.error(f"Ollama chat error: {e}")
            raise LLMError(f"Ollama chat error: {e}") from e

        content = response["message"]["content"]
        if content is None:
            raise LLMError("Ollama returned empty content")

        return content

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
