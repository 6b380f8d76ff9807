"""
Chunk key-value store implementations for LightGraph.

Available backends:
- InMemoryKeyValueStorage: Dictionary-backed reference implementation
- SQLiteKeyValueStorage: Local SQLite database via aiosqlite
"""

from lightgraph.core.kv_store.base import KeyValueStorage
from lightgraph.core.kv_store.memory_store import InMemoryKeyValueStorage
from lightgraph.core.kv_store.sqlite_store import SQLiteKeyValueStorage

__all__ = ["KeyValueStorage", "InMemoryKeyValueStorage", "SQLiteKeyValueStorage"]
