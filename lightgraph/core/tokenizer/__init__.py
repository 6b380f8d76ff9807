"""
Tokenizer module for token counting.

Provides accurate token counting using tiktoken with fast approximation
fallback. Used for chunk windows and context token budgets.
"""

from lightgraph.config import TokenizerConfig
from lightgraph.core.tokenizer.tokenizer import Tokenizer

__all__ = ["Tokenizer", "TokenizerConfig"]
