"""
Core adapters and contracts: LLM and embedding providers, storages,
handlers, tokenizer and factories.
"""

from lightgraph.core.storage import Storage

__all__ = ["Storage"]
