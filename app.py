"""
LightGraph FastAPI Application

A REST API server for the LightGraph engine.
Provides endpoints for inserting documents and retrieving query context.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from lightgraph.config import Config
from lightgraph.models import ChatMessage, QueryResult, Role
from lightgraph.services.engine import LightGraph
from lightgraph.utils.exceptions import (
    ChunkingError,
    InsertError,
    KeywordExtractionError,
    LightGraphError,
    RetrievalError,
    ValidationError,
)
from lightgraph.utils.logger import get_logger, setup_logging

# Global engine instance
engine: LightGraph | None = None
logger = get_logger(__name__)


# Pydantic models for API
class InsertDocumentRequest(BaseModel):
    """Request model for inserting a document."""

    content: str = Field(..., description="Document text")
    document_id: str | None = Field(default=None, description="Optional document ID")


class ChunkFailureResponse(BaseModel):
    """One failed chunk of a partially failed insert."""

    chunk_id: str
    stage: str
    error_type: str
    error: str


class InsertDocumentResponse(BaseModel):
    """Response model for insert."""

    document_id: str
    status: str  # "inserted" or "partial"
    failures: list[ChunkFailureResponse] = Field(default_factory=list)


class QueryRequest(BaseModel):
    """Request model for querying. Either `query` or `messages` must be given."""

    query: str | None = Field(default=None, description="Single user question")
    messages: list[ChatMessage] | None = Field(default=None, description="Full conversation")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    engine_initialized: bool
    graph_backend: str
    vector_backend: str
    kv_backend: str
    llm: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global engine

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting LightGraph server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
        f"Embedder={config.embedder.provider}/{config.embedder.model}, "
        f"Graph={config.graph_backend}, Vector={config.vector_backend}, KV={config.kv_backend}"
    )

    engine = LightGraph.from_config(config)
    await engine.initialize()
    logger.info("LightGraph engine initialized")

    yield

    # Cleanup
    logger.info("Shutting down LightGraph server")
    await engine.close()
    engine = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="LightGraph API",
    description="Hybrid graph retrieval-augmented generation engine",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_engine() -> LightGraph:
    if not engine:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    config = engine.config if engine else Config()
    return HealthResponse(
        status="healthy" if engine else "initializing",
        engine_initialized=engine is not None,
        graph_backend=config.graph_backend,
        vector_backend=config.vector_backend,
        kv_backend=config.kv_backend,
        llm=f"{config.llm.provider}/{config.llm.model}",
    )


@app.post("/documents", response_model=InsertDocumentResponse)
async def insert_document(request: InsertDocumentRequest):
    """
    Insert a document.

    The document is chunked, entities and relationships are extracted from
    every chunk and merged into the knowledge graph, and chunks, entities and
    relationships are indexed for retrieval. If some chunks fail, the others
    are kept and the response status is 207 with the failed chunks listed.
    """
    current = get_engine()

    try:
        document_id = await current.insert_text(request.content, request.document_id)
        return InsertDocumentResponse(document_id=document_id, status="inserted")
    except InsertError as e:
        body = InsertDocumentResponse(
            document_id=e.report.document_id,
            status="partial",
            failures=[
                ChunkFailureResponse(
                    chunk_id=f.chunk_id,
                    stage=f.stage.value,
                    error_type=f.error_type,
                    error=str(f.error),
                )
                for f in e.report.failures
            ],
        )
        return JSONResponse(status_code=207, content=body.model_dump())
    except (ChunkingError, ValidationError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except LightGraphError as e:
        logger.error(f"Error inserting document: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@app.post("/query", response_model=QueryResult)
async def query_context(request: QueryRequest):
    """
    Retrieve the structured context for a question or conversation.

    Returns entities, relationships and source chunks from the local
    (entity-centric) and global (relationship-centric) retrieval legs.
    """
    current = get_engine()

    conversation = request.messages or (
        [ChatMessage(role=Role.USER, content=request.query)] if request.query else []
    )
    if not conversation:
        raise HTTPException(status_code=422, detail="Either query or messages is required")

    try:
        return await current.query(conversation)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except (KeywordExtractionError, RetrievalError) as e:
        logger.error(f"Error querying: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    except LightGraphError as e:
        logger.error(f"Error querying: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "LightGraph API",
        "version": "0.1.0",
        "description": "Hybrid graph retrieval-augmented generation engine",
        "docs": "/docs",
        "health": "/health",
    }
