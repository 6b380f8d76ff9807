"""
Factories for creating graph, vector and key-value storage backends.
"""

from urllib.parse import urlparse

from lightgraph.config import Config
from lightgraph.core.embeddings.base import Embedder
from lightgraph.core.graph_store.base import GraphStorage
from lightgraph.core.graph_store.memory_store import InMemoryGraphStorage
from lightgraph.core.graph_store.neo4j_store import Neo4jGraphStorage
from lightgraph.core.kv_store.base import KeyValueStorage
from lightgraph.core.kv_store.memory_store import InMemoryKeyValueStorage
from lightgraph.core.kv_store.sqlite_store import SQLiteKeyValueStorage
from lightgraph.core.storage import Storage
from lightgraph.core.vector_store.base import VectorStorage
from lightgraph.core.vector_store.memory_store import InMemoryVectorStorage
from lightgraph.core.vector_store.qdrant import QdrantVectorStorage
from lightgraph.utils.exceptions import ConfigurationError


class GraphStoreFactory:
    """Factory for creating graph store backends from configuration."""

    @staticmethod
    def create(config: Config) -> GraphStorage:
        """
        Create graph store from configuration.

        Args:
            config: Main configuration object

        Returns:
            Graph store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.graph_backend == "memory":
            return InMemoryGraphStorage()
        elif config.graph_backend == "neo4j":
            return Neo4jGraphStorage(
                uri=config.neo4j.uri,
                username=config.neo4j.username,
                password=config.neo4j.password,
                database=config.neo4j.database,
            )
        else:
            raise ConfigurationError(f"Unsupported graph backend: {config.graph_backend}")


class VectorStoreFactory:
    """Factory for creating vector store backends from configuration."""

    @staticmethod
    def create(config: Config, embedder: Embedder) -> VectorStorage:
        """
        Create vector store from configuration.

        Args:
            config: Main configuration object
            embedder: Embedder for indexed text and queries

        Returns:
            Vector store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.vector_backend == "memory":
            return InMemoryVectorStorage(embedder)
        elif config.vector_backend == "qdrant":
            # Parse URL to extract host and port
            parsed = urlparse(config.qdrant.url)
            host = parsed.hostname or "localhost"
            port = parsed.port or 6333

            return QdrantVectorStorage(
                embedder=embedder,
                host=host,
                port=port,
                collection_prefix=config.qdrant.collection_prefix,
                use_grpc=config.qdrant.use_grpc,
                score_threshold=config.qdrant.score_threshold,
                timeout=config.qdrant.timeout,
                vector_size=config.embedder.dimension,
            )
        else:
            raise ConfigurationError(f"Unsupported vector backend: {config.vector_backend}")


class KeyValueStoreFactory:
    """Factory for creating chunk key-value store backends from configuration."""

    @staticmethod
    def create(config: Config) -> KeyValueStorage:
        """
        Create key-value store from configuration.

        Args:
            config: Main configuration object

        Returns:
            Key-value store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.kv_backend == "memory":
            return InMemoryKeyValueStorage()
        elif config.kv_backend == "sqlite":
            return SQLiteKeyValueStorage(db_path=config.sqlite.db_path)
        else:
            raise ConfigurationError(f"Unsupported key-value backend: {config.kv_backend}")


class StorageFactory:
    """Factory for the full storage bundle."""

    @staticmethod
    def create(config: Config, embedder: Embedder) -> Storage:
        """
        Create graph, vector and key-value stores and bundle them.

        Args:
            config: Main configuration object
            embedder: Embedder for the vector store

        Returns:
            Storage bundle (not yet initialized)
        """
        return Storage(
            graph=GraphStoreFactory.create(config),
            vector=VectorStoreFactory.create(config, embedder),
            kv=KeyValueStoreFactory.create(config),
        )
