"""
Configuration for LightGraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)

`default_config` is applied wherever a caller supplies no configuration.
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_ENTITY_TYPES = ["organization", "person", "geo", "event", "category"]


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str | None = None  # Ollama host, or custom OpenAI-compatible endpoint
    api_key: str | None = None
    temperature: float = 0.0
    max_tokens: int = 2000
    timeout: float = 120.0


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "nomic-embed-text"
    base_url: str | None = None  # Ollama host, or custom OpenAI-compatible endpoint
    api_key: str | None = None
    timeout: float = 120.0
    # Optional: embedding dimension (fallback to auto-detect)
    dimension: int | None = None


class TokenizerConfig(BaseModel):
    """Token counting configuration."""

    provider: Literal["tiktoken", "approximate"] = "tiktoken"
    model: str = "cl100k_base"  # tiktoken encoding name
    chars_per_token: float = Field(default=4.0, gt=0.0)


class ChunkingConfig(BaseModel):
    """Default document handler chunking policy."""

    chunk_token_size: int = Field(default=1200, gt=0)
    chunk_overlap_token_size: int = Field(default=100, ge=0)
    split_by_character: str | None = None


class ExtractionConfig(BaseModel):
    """Entity/relationship extraction and merge configuration."""

    entity_types: list[str] = Field(default_factory=lambda: list(DEFAULT_ENTITY_TYPES))
    gleaning_rounds: int = Field(default=1, ge=0)
    language: str = "English"
    # Merged descriptions longer than this (in tokens) are summarized by the LLM
    summary_trigger_tokens: int = Field(default=1200, gt=0)
    summary_max_tokens: int = Field(default=500, gt=0)


class QueryConfig(BaseModel):
    """Retrieval and context assembly configuration."""

    mode: Literal["hybrid", "local", "global"] = "hybrid"
    top_k: int = Field(default=40, gt=0)
    related_chunks_per_item: int = Field(default=5, gt=0)
    max_entities: int = Field(default=40, gt=0)
    max_relationships: int = Field(default=40, gt=0)
    max_chunks: int = Field(default=20, gt=0)
    max_entity_tokens: int = Field(default=4000, gt=0)
    max_relationship_tokens: int = Field(default=4000, gt=0)
    max_chunk_tokens: int = Field(default=4000, gt=0)


class ConcurrencyConfig(BaseModel):
    """Worker bounds and per-call timeouts."""

    max_concurrency: int = Field(default=4, gt=0)
    # Seconds per LLM/storage call; None disables the limit
    call_timeout: float | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class QdrantConfig(BaseModel):
    """Qdrant vector storage configuration."""

    url: str = "http://localhost:6333"
    collection_prefix: str = "lightgraph"
    use_grpc: bool = False
    score_threshold: float | None = 0.2
    timeout: int = 30


class Neo4jConfig(BaseModel):
    """Neo4j graph database configuration."""

    uri: str = "bolt://localhost:7687"
    username: str = "neo4j"
    password: str = "password"
    database: str = "neo4j"


class SQLiteConfig(BaseModel):
    """SQLite key-value storage configuration."""

    db_path: str = "data/lightgraph_chunks.db"


class Config(BaseModel):
    """Main configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    qdrant: QdrantConfig = Field(default_factory=QdrantConfig)
    neo4j: Neo4jConfig = Field(default_factory=Neo4jConfig)
    sqlite: SQLiteConfig = Field(default_factory=SQLiteConfig)

    # Storage backends
    graph_backend: str = "memory"  # memory, neo4j
    vector_backend: str = "memory"  # memory, qdrant
    kv_backend: str = "memory"  # memory, sqlite

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            LIGHTGRAPH_LLM_PROVIDER: LLM provider (ollama, openai)
            LIGHTGRAPH_LLM_MODEL: LLM model name
            LIGHTGRAPH_LLM_BASE_URL: LLM base URL
            LIGHTGRAPH_LLM_API_KEY: LLM API key (for OpenAI)
            LIGHTGRAPH_EMBEDDER_PROVIDER: Embedder provider
            LIGHTGRAPH_EMBEDDER_MODEL: Embedder model name
            LIGHTGRAPH_EMBEDDER_API_KEY: Embedder API key (for OpenAI)
            LIGHTGRAPH_EMBEDDER_DIMENSION: Embedding dimension (optional)
            LIGHTGRAPH_ENTITY_TYPES: Comma-separated entity type vocabulary
            LIGHTGRAPH_GLEANING_ROUNDS: Follow-up extraction passes per chunk
            LIGHTGRAPH_QUERY_MODE: hybrid, local or global
            LIGHTGRAPH_TOP_K: Vector search depth per retrieval leg
            LIGHTGRAPH_MAX_CONCURRENCY: Chunk workers per insert
            LIGHTGRAPH_GRAPH_BACKEND / _VECTOR_BACKEND / _KV_BACKEND: Storage backends
            LIGHTGRAPH_NEO4J_URI: Neo4j URI
            LIGHTGRAPH_QDRANT_URL: Qdrant URL
            LIGHTGRAPH_SQLITE_PATH: SQLite database path
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            if isinstance(default, list):
                return [item.strip() for item in value.split(",") if item.strip()]
            return value

        timeout = get_env("LIGHTGRAPH_CALL_TIMEOUT")

        return cls(
            llm=LLMConfig(
                provider=get_env("LIGHTGRAPH_LLM_PROVIDER", "ollama"),
                model=get_env("LIGHTGRAPH_LLM_MODEL", "llama3.1:8b"),
                base_url=get_env("LIGHTGRAPH_LLM_BASE_URL"),
                api_key=get_env("LIGHTGRAPH_LLM_API_KEY"),
                temperature=get_env("LIGHTGRAPH_LLM_TEMPERATURE", 0.0),
                max_tokens=get_env("LIGHTGRAPH_LLM_MAX_TOKENS", 2000),
                timeout=get_env("LIGHTGRAPH_LLM_TIMEOUT", 120.0),
            ),
            embedder=EmbedderConfig(
                provider=get_env("LIGHTGRAPH_EMBEDDER_PROVIDER", "ollama"),
                model=get_env("LIGHTGRAPH_EMBEDDER_MODEL", "nomic-embed-text"),
                base_url=get_env("LIGHTGRAPH_EMBEDDER_BASE_URL"),
                api_key=get_env("LIGHTGRAPH_EMBEDDER_API_KEY"),
                timeout=get_env("LIGHTGRAPH_EMBEDDER_TIMEOUT", 120.0),
                dimension=get_env("LIGHTGRAPH_EMBEDDER_DIMENSION", 0) or None,
            ),
            chunking=ChunkingConfig(
                chunk_token_size=get_env("LIGHTGRAPH_CHUNK_TOKEN_SIZE", 1200),
                chunk_overlap_token_size=get_env("LIGHTGRAPH_CHUNK_OVERLAP_TOKEN_SIZE", 100),
            ),
            extraction=ExtractionConfig(
                entity_types=get_env("LIGHTGRAPH_ENTITY_TYPES", list(DEFAULT_ENTITY_TYPES)),
                gleaning_rounds=get_env("LIGHTGRAPH_GLEANING_ROUNDS", 1),
                language=get_env("LIGHTGRAPH_LANGUAGE", "English"),
                summary_trigger_tokens=get_env("LIGHTGRAPH_SUMMARY_TRIGGER_TOKENS", 1200),
                summary_max_tokens=get_env("LIGHTGRAPH_SUMMARY_MAX_TOKENS", 500),
            ),
            query=QueryConfig(
                mode=get_env("LIGHTGRAPH_QUERY_MODE", "hybrid"),
                top_k=get_env("LIGHTGRAPH_TOP_K", 40),
                max_entity_tokens=get_env("LIGHTGRAPH_MAX_ENTITY_TOKENS", 4000),
                max_relationship_tokens=get_env("LIGHTGRAPH_MAX_RELATIONSHIP_TOKENS", 4000),
                max_chunk_tokens=get_env("LIGHTGRAPH_MAX_CHUNK_TOKENS", 4000),
            ),
            concurrency=ConcurrencyConfig(
                max_concurrency=get_env("LIGHTGRAPH_MAX_CONCURRENCY", 4),
                call_timeout=float(timeout) if timeout is not None else None,
            ),
            graph_backend=get_env("LIGHTGRAPH_GRAPH_BACKEND", "memory"),
            vector_backend=get_env("LIGHTGRAPH_VECTOR_BACKEND", "memory"),
            kv_backend=get_env("LIGHTGRAPH_KV_BACKEND", "memory"),
            neo4j=Neo4jConfig(
                uri=get_env("LIGHTGRAPH_NEO4J_URI", "bolt://localhost:7687"),
                username=get_env("LIGHTGRAPH_NEO4J_USERNAME", "neo4j"),
                password=get_env("LIGHTGRAPH_NEO4J_PASSWORD", "password"),
                database=get_env("LIGHTGRAPH_NEO4J_DATABASE", "neo4j"),
            ),
            qdrant=QdrantConfig(
                url=get_env("LIGHTGRAPH_QDRANT_URL", "http://localhost:6333"),
                collection_prefix=get_env("LIGHTGRAPH_QDRANT_COLLECTION_PREFIX", "lightgraph"),
                use_grpc=get_env("LIGHTGRAPH_QDRANT_USE_GRPC", False),
            ),
            sqlite=SQLiteConfig(
                db_path=get_env("LIGHTGRAPH_SQLITE_PATH", "data/lightgraph_chunks.db"),
            ),
            logging=LoggingConfig(
                level=get_env("LIGHTGRAPH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("LIGHTGRAPH_LOG_TO_FILE", False),
                log_dir=get_env("LIGHTGRAPH_LOG_DIR", "logs"),
                file_rotation=get_env("LIGHTGRAPH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("LIGHTGRAPH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("LIGHTGRAPH_LOG_COMPRESSION", "zip"),
                serialize=get_env("LIGHTGRAPH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Only sections whose environment-derived values differ from the
        defaults override the YAML file.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        final_dict = {**config_dict}

        # Apply env overrides (non-default values)
        default = cls()
        for section in (
            "llm",
            "embedder",
            "chunking",
            "extraction",
            "query",
            "concurrency",
            "neo4j",
            "qdrant",
            "sqlite",
            "logging",
        ):
            if getattr(env_config, section) != getattr(default, section):
                final_dict[section] = getattr(env_config, section).model_dump()

        # Also check top-level fields
        for field in ("graph_backend", "vector_backend", "kv_backend"):
            if getattr(env_config, field) != getattr(default, field):
                final_dict[field] = getattr(env_config, field)

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
