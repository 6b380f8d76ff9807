"""
Abstract base class for LLM providers.
Handles chat-style text generation.
"""

from abc import ABC, abstractmethod

from lightgraph.models.query import ChatMessage, Role


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Single synchronous (non-streaming) chat completion
    - Connection cleanup
    """

    @abstractmethod
    async def chat(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> str:
        """
        Generate the next assistant message for a conversation.

        Args:
            messages: Ordered chat messages (system/user/assistant)
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative)
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            LLMError: If the provider call fails
        """
        pass

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        **kwargs,
    ) -> str:
        """
        Generate completion for a single user prompt.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Provider-specific parameters

        Returns:
            Generated text
        """
        return await self.chat(
            [ChatMessage(role=Role.USER, content=prompt)],
            max_tokens=max_tokens,
            temperature=temperature,
            **kwargs,
        )

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """
        # Default implementation does nothing
        # Providers should override if cleanup is needed
