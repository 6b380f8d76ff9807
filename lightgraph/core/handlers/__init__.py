"""
Handlers: chunking, prompting and parsing strategies used by the pipelines.
"""

from lightgraph.core.handlers.base import DocumentHandler, QueryHandler
from lightgraph.core.handlers.default import (
    DefaultDocumentHandler,
    DefaultQueryHandler,
    KeywordResponse,
)
from lightgraph.core.handlers.parsing import parse_extraction_records

__all__ = [
    "DocumentHandler",
    "QueryHandler",
    "DefaultDocumentHandler",
    "DefaultQueryHandler",
    "KeywordResponse",
    "parse_extraction_records",
]
