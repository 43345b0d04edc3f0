"""Base protocol and interfaces for nearest-neighbour algorithms.

All algorithms rank by cosine similarity (higher is more similar). Vectors
are L2-normalized once at build time so a similarity is a single dot
product; zero vectors are kept as zeros and score 0.0 against everything.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np

from docsearch.domain import DimensionMismatch, EmptyBatch, ValidationError, VectorIndexError

logger = logging.getLogger(__name__)


@runtime_checkable
class NeighborIndex(Protocol):
    """Protocol for nearest-neighbour algorithm implementations."""

    @property
    def dim(self) -> int:
        """Vector dimension."""
        ...

    @property
    def size(self) -> int:
        """Number of indexed vectors."""
        ...

    @property
    def is_built(self) -> bool:
        """True if index is built and ready for queries."""
        ...

    def build(self, vectors: Sequence[Sequence[float]] | np.ndarray) -> None:
        """Build the index from vectors."""
        ...

    def query(
        self, query_vector: Sequence[float], k: int = 10
    ) -> list[tuple[int, float]]:
        """Find k nearest neighbours, returns (position, similarity) sorted best first."""
        ...


class IndexNotBuiltError(VectorIndexError):
    """Raised when querying an index that hasn't been built."""

    def __init__(self) -> None:
        super().__init__("Index must be built before querying", "INDEX_NOT_BUILT")


def normalize_rows(matrix: np.ndarray) -> np.ndarray:
    """L2-normalize each row, leaving zero rows untouched."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms


def rank_by_similarity(
    positions: np.ndarray, similarities: np.ndarray, k: int
) -> list[tuple[int, float]]:
    """Top-k (position, similarity) pairs, best first, ties by position."""
    order = np.lexsort((positions, -similarities))[:k]
    return [(int(positions[i]), float(similarities[i])) for i in order]


class BaseNeighborIndex(ABC):
    """Base class with common functionality for neighbour index implementations."""

    def __init__(self, dimension: int | None = None) -> None:
        """Initialize base index."""
        self._dimension = dimension
        self._matrix: np.ndarray = np.empty((0, dimension or 0), dtype=np.float64)
        self._is_built = False
        self._size = 0

        logger.debug(f"Initialized {self.__class__.__name__} with dim={dimension}")

    @property
    def dim(self) -> int:
        """Get the dimension of vectors in this index."""
        if self._dimension is None:
            raise IndexNotBuiltError()
        return self._dimension

    @property
    def size(self) -> int:
        """Get the number of vectors currently in the index."""
        return self._size

    @property
    def is_built(self) -> bool:
        """Check if the index has been built and is ready for queries."""
        return self._is_built

    def build(self, vectors: Sequence[Sequence[float]] | np.ndarray) -> None:
        """Build the index from a collection of vectors.

        Raises:
            EmptyBatch: If ``vectors`` is empty
            DimensionMismatch: If vector lengths disagree with each other or
                with the configured dimension
        """
        if len(vectors) == 0:
            raise EmptyBatch()

        first_dim = len(vectors[0])
        expected = self._dimension if self._dimension is not None else first_dim
        for i, vector in enumerate(vectors):
            if len(vector) != expected:
                raise DimensionMismatch(expected, len(vector), i)

        matrix = np.asarray(vectors, dtype=np.float64)
        if not np.all(np.isfinite(matrix)):
            raise ValidationError("Vectors must contain only finite values")

        self._dimension = expected
        self._matrix = normalize_rows(matrix)
        self._size = matrix.shape[0]

        logger.info(
            f"Building {self.__class__.__name__} with {self._size} vectors of dimension {self._dimension}"
        )

        self._build_index()
        self._is_built = True

        logger.info(f"Successfully built {self.__class__.__name__}")

    @abstractmethod
    def _build_index(self) -> None:
        """Build concrete index structure."""
        pass

    def query(
        self, query_vector: Sequence[float], k: int = 10
    ) -> list[tuple[int, float]]:
        """Find the k most similar vectors to the query vector."""
        if not self._is_built:
            raise IndexNotBuiltError()

        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise ValidationError(f"k must be a positive integer, got {k!r}")

        query_np = np.asarray(query_vector, dtype=np.float64)
        if query_np.ndim != 1 or len(query_np) != self._dimension:
            raise DimensionMismatch(self._dimension, int(query_np.size))
        if not np.all(np.isfinite(query_np)):
            raise ValidationError("Query vector must contain only finite values")

        norm = np.linalg.norm(query_np)
        if norm > 0:
            query_np = query_np / norm

        # Limit k to available vectors
        k = min(k, self._size)
        return self._query_index(query_np, k)

    @abstractmethod
    def _query_index(self, query_vector: np.ndarray, k: int) -> list[tuple[int, float]]:
        """Concrete query implementation; receives a normalized query."""
        pass

    def _exact_query(self, query_vector: np.ndarray, k: int) -> list[tuple[int, float]]:
        """Brute-force cosine ranking over every stored vector."""
        similarities = self._matrix @ query_vector
        positions = np.arange(self._size)
        return rank_by_similarity(positions, similarities, k)

    def get_stats(self) -> dict[str, Any]:
        """Basic statistics shared by all algorithms."""
        return {
            "algorithm": self.__class__.__name__,
            "dimension": self._dimension,
            "total_vectors": self._size,
            "is_built": self._is_built,
            "metric": "cosine",
        }
