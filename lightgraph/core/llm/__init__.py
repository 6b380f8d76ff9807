"""
LLM provider abstraction layer for chat completions.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from lightgraph.core.llm.base import LLMProvider
from lightgraph.core.llm.ollama import OllamaLLM
from lightgraph.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]
