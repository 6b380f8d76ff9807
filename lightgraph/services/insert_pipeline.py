"""
Insert pipeline - document -> chunks -> extraction -> merge -> indexing.

Chunks run concurrently, bounded by max_concurrency. Each chunk moves
through CHUNKED -> EXTRACTING -> MERGING -> INDEXING -> DONE; a failing
chunk stops where it failed without affecting its siblings. Once every
chunk has finished, any failure is raised as one InsertError carrying the
full report. Writes made by successful chunks are kept.
"""

import asyncio

from lightgraph.config import Config, default_config
from lightgraph.core.handlers.base import DocumentHandler
from lightgraph.core.llm.base import LLMProvider
from lightgraph.core.storage import Storage
from lightgraph.core.tokenizer import Tokenizer
from lightgraph.models.document import Chunk, Document
from lightgraph.models.ingestion import ChunkFailure, ChunkStage, InsertReport
from lightgraph.services.chunker import chunks_for_document
from lightgraph.services.extractor import extract_chunk
from lightgraph.services.indexer import index_chunk
from lightgraph.services.merger import GraphMerger
from lightgraph.utils.exceptions import InsertError, OperationCancelledError
from lightgraph.utils.locks import KeyedLock
from lightgraph.utils.logger import get_logger

logger = get_logger(__name__)


async def insert(
    document: Document,
    handler: DocumentHandler,
    storage: Storage,
    llm: LLMProvider,
    config: Config | None = None,
    *,
    locks: KeyedLock | None = None,
    tokenizer: Tokenizer | None = None,
) -> None:
    """
    Insert a document into the knowledge graph and vector index.

    Args:
        document: Document to insert
        handler: Chunking/prompting/parsing strategy
        storage: Graph, vector and key-value stores
        llm: LLM provider for extraction and summaries
        config: Configuration (default_config if omitted)
        locks: Per-identity locks shared with concurrent inserts
        tokenizer: Token counter for the summary trigger

    Raises:
        ChunkingError: If the document cannot be chunked (nothing is written)
        InsertError: If one or more chunks failed or the insert was cancelled
    """
    config = config or default_config
    chunks = chunks_for_document(document, handler, config.chunking)
    if not chunks:
        logger.info(f"Document {document.id} produced no chunks, nothing to insert")
        return

    merger = GraphMerger(storage.graph, llm, handler, config, locks=locks, tokenizer=tokenizer)
    semaphore = asyncio.Semaphore(config.concurrency.max_concurrency)
    timeout = config.concurrency.call_timeout
    stages: dict[str, ChunkStage] = {chunk.id: ChunkStage.CHUNKED for chunk in chunks}

    async def process(chunk: Chunk) -> None:
        async with semaphore:
            stages[chunk.id] = ChunkStage.EXTRACTING
            extraction = await extract_chunk(chunk, handler, llm, config)

            stages[chunk.id] = ChunkStage.MERGING
            outcome = await merger.merge(chunk.id, extraction)

            stages[chunk.id] = ChunkStage.INDEXING
            await index_chunk(chunk, outcome, storage, timeout)

            stages[chunk.id] = ChunkStage.DONE
            logger.bind(document_id=document.id, chunk_id=chunk.id).info(
                f"Chunk {chunk.order_index + 1}/{len(chunks)} of {document.id} done: "
                f"{len(extraction.entities)} entities, {len(extraction.relationships)} relationships"
            )

    logger.bind(document_id=document.id, chunks=len(chunks)).info(
        f"Inserting document {document.id} ({len(chunks)} chunks)"
    )
    tasks = [asyncio.create_task(process(chunk)) for chunk in chunks]

    try:
        results = await asyncio.gather(*tasks, return_exceptions=True)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        failures = [
            ChunkFailure(
                chunk_id=chunk.id,
                stage=stages[chunk.id],
                error=OperationCancelledError(
                    f"Insert cancelled before chunk {chunk.id} finished",
                    context={"chunk_id": chunk.id},
                ),
            )
            for chunk in chunks
            if stages[chunk.id] != ChunkStage.DONE
        ]
        report = InsertReport(
            document_id=document.id,
            chunk_ids=[chunk.id for chunk in chunks],
            failures=failures,
            cancelled=True,
        )
        logger.bind(document_id=document.id).warning(
            f"Insert of {document.id} cancelled with {len(failures)} unfinished chunks"
        )
        raise InsertError(report) from None

    failures = []
    for chunk, result in zip(chunks, results, strict=True):
        if isinstance(result, asyncio.CancelledError):
            result = OperationCancelledError(
                f"Chunk {chunk.id} was cancelled", context={"chunk_id": chunk.id}
            )
        if isinstance(result, BaseException):
            failures.append(ChunkFailure(chunk_id=chunk.id, stage=stages[chunk.id], error=result))

    if failures:
        report = InsertReport(
            document_id=document.id,
            chunk_ids=[chunk.id for chunk in chunks],
            failures=failures,
        )
        logger.bind(document_id=document.id, failed=[f.chunk_id for f in failures]).error(
            f"Insert of {document.id} finished with {len(failures)}/{len(chunks)} failed chunks"
        )
        raise InsertError(report)

    logger.bind(document_id=document.id).info(f"Inserted document {document.id}")
