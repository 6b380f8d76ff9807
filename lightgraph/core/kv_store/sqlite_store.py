"""
SQLite chunk store implementation using aiosqlite.
"""

from pathlib import Path

import aiosqlite

from lightgraph.core.kv_store.base import KeyValueStorage
from lightgraph.models.document import Chunk
from lightgraph.utils.exceptions import KeyValueStoreError
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteKeyValueStorage(KeyValueStorage):
    """
    SQLite-based chunk storage.

    Features:
    - Fast local storage
    - WAL journal for concurrent readers
    - INSERT OR REPLACE upserts keyed by chunk ID
    """

    def __init__(self, db_path: str = "data/lightgraph_chunks.db"):
        """
        Initialize SQLite chunk store.

        Args:
            db_path: Path to SQLite database file (":memory:" for a private in-memory db)
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS chunks (
                id TEXT PRIMARY KEY,
                document_id TEXT NOT NULL,
                order_index INTEGER NOT NULL,
                content TEXT NOT NULL,
                tokens INTEGER DEFAULT 0
            )
        """
        )
        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_chunks_document ON chunks(document_id)"
        )
        await self.connection.commit()

    async def put_chunk(self, key: str, chunk: Chunk) -> None:
        """Insert or replace a chunk."""
        if not key:
            raise KeyValueStoreError("Chunk key cannot be empty")
        await self.connect()
        try:
            await self.connection.execute(
                """
                INSERT OR REPLACE INTO chunks (id, document_id, order_index, content, tokens)
                VALUES (?, ?, ?, ?, ?)
                """,
                (key, chunk.document_id, chunk.order_index, chunk.content, chunk.tokens),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.error(f"Failed to store chunk {key}: {e}")
            raise KeyValueStoreError(f"Failed to store chunk: {e}") from e

    async def get_chunk(self, key: str) -> Chunk | None:
        """Fetch a chunk by ID."""
        await self.connect()
        try:
            async with self.connection.execute(
                "SELECT id, document_id, order_index, content, tokens FROM chunks WHERE id = ?",
                (key,),
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            logger.error(f"Failed to read chunk {key}: {e}")
            raise KeyValueStoreError(f"Failed to read chunk: {e}") from e

        if row is None:
            return None
        return Chunk(id=row[0], document_id=row[1], order_index=row[2], content=row[3], tokens=row[4])

    async def close(self) -> None:
        """Close the connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None
