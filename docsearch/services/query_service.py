"""Query service serving similarity searches over a loaded vector index.

The service owns an explicit state machine::

    LOADING --initialize ok--> READY
    LOADING --initialize error--> FAILED

Queries are only accepted in READY. In any other state ``search`` fails
immediately with ``IndexUnavailable`` instead of waiting for the load.
FAILED is terminal for the process; recovery is a restart.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from docsearch.domain import DomainError, IndexUnavailable, ValidationError
from docsearch.indexes import VectorIndex
from docsearch.services.embedder import Embedder
from docsearch.utils import validate_non_empty_text

logger = logging.getLogger(__name__)


class ServiceState(str, Enum):
    """Lifecycle states of the query service."""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchMatch:
    """Content/metadata projection of one ranked chunk (no vector)."""

    content: str
    metadata: dict[str, str] = field(default_factory=dict)
    score: float = 0.0


@dataclass(frozen=True)
class ServiceStatus:
    """Snapshot of the service state for health reporting."""

    state: ServiceState
    store_path: str | None
    size: int | None
    embedding_dim: int | None
    algorithm: str | None
    error: str | None


class QueryService:
    """Loads a VectorIndex once and answers text similarity queries.

    Thread Safety:
    - The loaded index is immutable and shared read-only by all queries
    - State only moves forward (LOADING -> READY/FAILED), set once
    """

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder
        self._state = ServiceState.LOADING
        self._index: VectorIndex | None = None
        self._store_path: str | None = None
        self._error: DomainError | Exception | None = None
        self._load_started = False

        logger.info("Initialized QueryService")

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def load_started(self) -> bool:
        return self._load_started

    @property
    def error(self) -> Exception | None:
        """Load failure kept for diagnostics when state is FAILED."""
        return self._error

    async def initialize(self, store_path: str | Path) -> ServiceState:
        """Load the persisted index; moves to READY or FAILED.

        Load errors are recorded, logged and reflected in the state; they are
        not retried.
        """
        if self._load_started:
            raise RuntimeError("QueryService.initialize may only be called once")
        self._load_started = True
        self._store_path = str(store_path)

        logger.info(f"Loading vector store from {self._store_path}...")
        start = time.perf_counter()
        try:
            index = await asyncio.to_thread(VectorIndex.load, store_path)
        except Exception as e:
            self._error = e
            self._state = ServiceState.FAILED
            logger.error(f"Failed to load vector store: {e}")
            return self._state

        if index.dim != self._embedder.dim:
            self._error = ValidationError(
                f"Store dimension {index.dim} does not match embedder dimension "
                f"{self._embedder.dim}"
            )
            self._state = ServiceState.FAILED
            logger.error(f"Failed to load vector store: {self._error}")
            return self._state

        self._index = index
        self._state = ServiceState.READY
        logger.info(
            f"Vector store loaded successfully ({index.size} entries, dim={index.dim}) "
            f"in {(time.perf_counter() - start) * 1000:.2f}ms"
        )
        return self._state

    async def search(
        self, query_text: str, k: int, timeout_ms: int
    ) -> list[SearchMatch]:
        """Embed ``query_text`` (bounded by ``timeout_ms``) and rank the top-k chunks.

        Raises:
            IndexUnavailable: If the service is not READY
            ValidationError: If the query text is blank or k is not positive
            EmbeddingTimeout: If embedding exceeds ``timeout_ms``
            EmbeddingError: If embedding fails
        """
        index = self._index
        if self._state is not ServiceState.READY or index is None:
            logger.warning(f"Search rejected: service state is {self._state.value}")
            raise IndexUnavailable(self._state.value)

        try:
            text = validate_non_empty_text(query_text, "Query text cannot be empty")
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise ValidationError(f"k must be a positive integer, got {k!r}")

        vector = await self._embedder.embed_with_timeout(text, timeout_ms)

        start = time.perf_counter()
        results = index.query(vector, k)
        logger.debug(
            f"similarity_search returned {len(results)} results in "
            f"{(time.perf_counter() - start) * 1000:.2f}ms"
        )

        return [
            SearchMatch(content=chunk.text, metadata=dict(chunk.metadata), score=score)
            for chunk, score in results
        ]

    def status(self) -> ServiceStatus:
        """Current state plus index shape (when loaded) or load error."""
        index = self._index
        return ServiceStatus(
            state=self._state,
            store_path=self._store_path,
            size=index.size if index is not None else None,
            embedding_dim=index.dim if index is not None else None,
            algorithm=index.algorithm.value if index is not None else None,
            error=str(self._error) if self._error is not None else None,
        )

    def stats(self) -> dict[str, Any]:
        """Index statistics, empty when no index is loaded."""
        return self._index.stats() if self._index is not None else {}
