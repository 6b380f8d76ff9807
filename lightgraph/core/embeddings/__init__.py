"""
Embedder abstraction layer used by the vector storages.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from lightgraph.core.embeddings.base import Embedder
from lightgraph.core.embeddings.ollama import OllamaEmbedder
from lightgraph.core.embeddings.openai import OpenAIEmbedder

__all__ = [
    "Embedder",
    "OllamaEmbedder",
    "OpenAIEmbedder",
]
