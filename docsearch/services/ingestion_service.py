"""Ingestion pipeline: documents -> chunks -> vectors -> persisted index.

The pipeline is a one-shot batch job. Every step runs to completion before
the next starts, and the store is only written once the whole index has been
built, so a failure at any step leaves the destination untouched.
"""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from docsearch.chunking import split_document
from docsearch.domain import (
    Chunk,
    Document,
    EmbeddingError,
    EmptyBatch,
    IndexedEntry,
    IngestionError,
)
from docsearch.indexes import IndexAlgo, VectorIndex
from docsearch.services.embedder import Embedder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionReport:
    """Outcome of a successful ingestion run.

    Attributes:
        documents_processed: Number of documents chunked
        chunks_indexed: Number of entries written to the store
        destination: Store location that was (re)written
        duration_s: Wall-clock duration of the run
    """

    documents_processed: int
    chunks_indexed: int
    destination: str
    duration_s: float


class IngestionPipeline:
    """Orchestrates Chunker -> Embedder -> VectorIndex build -> save.

    Process:
    1. Split every document into chunks
    2. Embed all chunks in batches of ``batch_size``
    3. Build the vector index from the embedded chunks
    4. Save it, fully replacing any existing store at the destination
    """

    def __init__(
        self,
        embedder: Embedder,
        algorithm: IndexAlgo | str = IndexAlgo.HNSW,
        index_params: dict[str, Any] | None = None,
        batch_size: int = 64,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self._embedder = embedder
        self._algorithm = IndexAlgo(algorithm)
        self._index_params = dict(index_params or {})
        self._batch_size = batch_size

        logger.info(
            f"Initialized IngestionPipeline with algorithm={self._algorithm.value}, "
            f"batch_size={batch_size}"
        )

    def run(
        self,
        documents: Sequence[Document],
        chunk_size: int,
        chunk_overlap: int,
        destination: str | Path,
    ) -> IngestionReport:
        """Ingest ``documents`` into a fresh store at ``destination``.

        Raises:
            ValidationError: If chunk parameters are invalid
            IngestionError: If embedding any chunk fails (names the chunk)
            EmptyBatch: If the documents produce no chunks at all
            DimensionMismatch: If the embedder yields inconsistent vectors
        """
        start = time.perf_counter()

        chunks: list[Chunk] = []
        for document in documents:
            document_chunks = split_document(document, chunk_size, chunk_overlap)
            logger.debug(f"Document {document.id}: {len(document_chunks)} chunks")
            chunks.extend(document_chunks)

        logger.info(f"Split {len(documents)} documents into {len(chunks)} chunks")
        if not chunks:
            raise EmptyBatch()

        entries = self._embed_chunks(chunks)

        index = VectorIndex.from_entries(entries, self._algorithm, **self._index_params)
        saved_to = index.save(destination)

        report = IngestionReport(
            documents_processed=len(documents),
            chunks_indexed=index.size,
            destination=str(saved_to),
            duration_s=round(time.perf_counter() - start, 3),
        )
        logger.info(
            f"Saved {report.chunks_indexed} chunks from {report.documents_processed} "
            f"documents to {report.destination} in {report.duration_s}s"
        )
        return report

    def _embed_chunks(self, chunks: list[Chunk]) -> list[IndexedEntry]:
        """Embed chunks batch by batch; the first failure aborts the run."""
        entries: list[IndexedEntry] = []
        for offset in range(0, len(chunks), self._batch_size):
            batch = chunks[offset : offset + self._batch_size]
            try:
                vectors = self._embedder.embed_batch([chunk.text for chunk in batch])
            except EmbeddingError as e:
                failed = self._locate_failure(batch, e)
                raise IngestionError(
                    f"Embedding failed for document '{failed.document_id}' "
                    f"chunk {failed.ordinal_index}: {e.message}",
                    document_id=failed.document_id,
                    chunk_index=failed.ordinal_index,
                ) from e

            entries.extend(
                IndexedEntry(vector=tuple(vector), chunk=chunk)
                for vector, chunk in zip(vectors, batch, strict=True)
            )
            logger.debug(f"Embedded {len(entries)}/{len(chunks)} chunks")

        return entries

    def _locate_failure(self, batch: list[Chunk], error: EmbeddingError) -> Chunk:
        """Find the first chunk of a failed batch that fails on its own."""
        if len(batch) == 1:
            return batch[0]
        for chunk in batch:
            try:
                self._embedder.embed(chunk.text)
            except EmbeddingError:
                return chunk
        # The batch failed as a whole (e.g. provider outage); blame its head
        logger.debug(f"Batch failure not reproducible per chunk: {error.message}")
        return batch[0]
