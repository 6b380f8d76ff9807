"""
Token counting utilities for chunking and context budgets.

Uses tiktoken for accurate OpenAI-compatible token counting with
character-based approximation as a configurable alternative.
"""

import tiktoken

from lightgraph.config import TokenizerConfig


class Tokenizer:
    """
    Universal token counter.

    Used by the default document handler to window documents into chunks
    and by the merger and context assembler to enforce token budgets.

    Usage:
        tokenizer = Tokenizer()
        count = tokenizer.count_tokens("Hello world")
        tokens = tokenizer.tokenize("Long text...")
        text = tokenizer.detokenize(tokens[:100])
    """

    def __init__(self, config: TokenizerConfig | None = None):
        """
        Initialize tokenizer with configuration.

        Args:
            config: Optional tokenizer configuration. Uses defaults if not provided.
        """
        self.config = config or TokenizerConfig()
        self._encoder: tiktoken.Encoding | None = None

    @property
    def encoder(self) -> tiktoken.Encoding:
        """
        Lazy-load tiktoken encoder.

        Returns:
            Tiktoken encoding instance
        """
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.config.model)
        return self._encoder

    def count_tokens(self, text: str) -> int:
        """
        Count tokens in text.

        Args:
            text: Text to count tokens for

        Returns:
            Token count (approximate when the provider is "approximate")
        """
        if not text:
            return 0

        if self.config.provider == "approximate":
            return self.estimate_tokens(text)

        return len(self.encoder.encode(text))

    def estimate_tokens(self, text: str) -> int:
        """
        Fast approximate token count using character ratio.

        Uses the configured chars_per_token ratio (default 4.0) for
        quick estimation without loading the tokenizer. Never returns 0 for
        non-empty text so budgets always account for every item.

        Args:
            text: Text to estimate tokens for

        Returns:
            Approximate token count
        """
        if not text:
            return 0
        return max(1, int(len(text) / self.config.chars_per_token))

    def tokenize(self, text: str) -> list[int]:
        """
        Get token IDs for text.

        Useful for chunking operations that need exact token boundaries.

        Args:
            text: Text to tokenize

        Returns:
            List of token IDs
        """
        if not text:
            return []
        return self.encoder.encode(text)

    def detokenize(self, tokens: list[int]) -> str:
        """
        Convert token IDs back to text.

        Args:
            tokens: List of token IDs

        Returns:
            Decoded text
        """
        if not tokens:
            return ""
        return self.encoder.decode(tokens)

    def split_windows(self, text: str, window: int, overlap: int) -> list[str]:
        """
        Split text into consecutive windows of at most `window` tokens.

        Consecutive windows share `overlap` tokens. With the "approximate"
        provider the windows are measured in characters using
        chars_per_token, so no encoding files are needed.

        Args:
            text: Text to split
            window: Maximum tokens per window
            overlap: Tokens shared by consecutive windows (must be < window)

        Returns:
            Window texts in order (empty for empty text)

        Raises:
            ValueError: If overlap is not smaller than window
        """
        if overlap >= window:
            raise ValueError(f"Overlap ({overlap}) must be smaller than window ({window})")
        if not text:
            return []

        if self.config.provider == "approximate":
            units: list = list(text)
            scale = self.config.chars_per_token
            size, step = max(1, int(window * scale)), max(1, int((window - overlap) * scale))

            def decode(part: list) -> str:
                return "".join(part)

        else:
            units = self.tokenize(text)
            size, step = window, window - overlap
            decode = self.detokenize

        windows = []
        for start in range(0, len(units), step):
            windows.append(decode(units[start : start + size]))
            if start + size >= len(units):
                break
        return windows
