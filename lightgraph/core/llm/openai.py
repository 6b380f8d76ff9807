"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI

from lightgraph.core.llm.base import LLMProvider
from lightgraph.models.query import ChatMessage
from lightgraph.utils.exceptions import LLMError, ValidationError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for chat completions.

    Works with any OpenAI-compatible endpoint via base_url.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def chat(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> str:
        """
        Generate the next assistant message using OpenAI.

        Args:
            messages: Ordered chat messages
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional parameters (e.g., stop, presence_penalty)
        Returns:
            Generated text
        Raises:
            LLMError: If OpenAI API call fails
            ValidationError: If no messages are given
        """
        if not messages:
            raise ValidationError("Messages cannot be empty")

        params = {
            "model": self.model,
            "messages": [message.to_dict() for message in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        try:
            response = await self.client.chat.completions.create(**params)
            content = response.choices[0].message.content

            if not content:
                raise LLMError("OpenAI returned empty content")

            return content
        except LLMError:
            raise
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise LLMError(f"OpenAI API error: {e}") from e

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
