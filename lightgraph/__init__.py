"""
LightGraph - hybrid graph retrieval-augmented generation engine.

Insert builds a merged knowledge graph plus vector-indexed chunks from
documents; query turns a conversation into a deduplicated, token-budgeted
retrieval context.
"""

from lightgraph.config import Config, default_config
from lightgraph.core.storage import Storage
from lightgraph.models import ChatMessage, Document, QueryResult, Role
from lightgraph.services import LightGraph, insert, query

__version__ = "0.1.0"

__all__ = [
    "Config",
    "default_config",
    "Storage",
    "Document",
    "ChatMessage",
    "Role",
    "QueryResult",
    "LightGraph",
    "insert",
    "query",
]
