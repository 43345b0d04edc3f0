"""VectorIndex aggregate: indexed entries plus a nearest-neighbour structure."""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import numpy as np

from docsearch.domain import (
    Chunk,
    CorruptStore,
    DimensionMismatch,
    EmptyBatch,
    IndexedEntry,
    ValidationError,
)

from .base import NeighborIndex
from .manager import IndexAlgo, create_index, index_params
from .store import read_store, write_store

logger = logging.getLogger(__name__)


class VectorIndex:
    """Immutable collection of IndexedEntry with top-k cosine queries.

    Built once (``from_entries``), optionally persisted (``save``) and
    reconstituted (``load``). Scores are cosine similarities in [-1, 1],
    results are ordered best first and ties keep insertion order.
    """

    def __init__(
        self,
        entries: Sequence[IndexedEntry],
        neighbor_index: NeighborIndex | None,
        dim: int,
        algorithm: IndexAlgo,
        params: dict[str, Any] | None = None,
    ) -> None:
        self._entries = tuple(entries)
        self._neighbor_index = neighbor_index
        self._dim = dim
        self._algorithm = algorithm
        self._params = dict(params or {})

    @classmethod
    def from_entries(
        cls,
        entries: Sequence[IndexedEntry],
        algorithm: IndexAlgo | str = IndexAlgo.HNSW,
        **params: Any,
    ) -> "VectorIndex":
        """Build a fresh index from a batch of entries.

        Raises:
            EmptyBatch: If ``entries`` is empty
            DimensionMismatch: If entry vectors have inconsistent lengths
        """
        if not entries:
            raise EmptyBatch()

        algorithm = IndexAlgo(algorithm)
        dim = entries[0].dim
        for position, entry in enumerate(entries):
            if entry.dim != dim:
                raise DimensionMismatch(dim, entry.dim, position)

        neighbor_index = create_index(algorithm, dimension=dim, **params)
        neighbor_index.build(np.array([entry.vector for entry in entries], dtype=np.float64))

        logger.info(
            f"Built {algorithm.value} vector index with {len(entries)} entries (dim={dim})"
        )
        return cls(entries, neighbor_index, dim, algorithm, index_params(neighbor_index))

    @classmethod
    def empty(
        cls, dim: int, algorithm: IndexAlgo | str = IndexAlgo.HNSW, **params: Any
    ) -> "VectorIndex":
        """Explicitly empty index; queries on it return no matches."""
        if dim <= 0:
            raise ValidationError("dim must be positive")
        return cls((), None, dim, IndexAlgo(algorithm), params)

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def algorithm(self) -> IndexAlgo:
        return self._algorithm

    @property
    def entries(self) -> tuple[IndexedEntry, ...]:
        return self._entries

    def query(self, vector: Sequence[float], k: int) -> list[tuple[Chunk, float]]:
        """Top-k chunks by descending cosine similarity.

        Raises:
            ValidationError: If ``k`` is not a positive integer
            DimensionMismatch: If ``vector`` has the wrong length
        """
        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise ValidationError(f"k must be a positive integer, got {k!r}")
        if len(vector) != self._dim:
            raise DimensionMismatch(self._dim, len(vector))

        if self._neighbor_index is None:
            return []

        results = self._neighbor_index.query(vector, k)
        return [(self._entries[position].chunk, score) for position, score in results]

    def save(self, destination: str | Path) -> Path:
        """Persist entries and index configuration, replacing ``destination`` atomically."""
        args = {
            "algorithm": self._algorithm.value,
            "params": self._params,
            "dim": self._dim,
            "count": self.size,
            "metric": "cosine",
        }
        if self._entries:
            vectors = np.array([entry.vector for entry in self._entries], dtype=np.float64)
        else:
            vectors = np.empty((0, self._dim), dtype=np.float64)
        chunks = [entry.chunk.to_dict() for entry in self._entries]
        return write_store(destination, args, vectors, chunks)

    @classmethod
    def load(cls, source: str | Path) -> "VectorIndex":
        """Reconstruct an index from a prior ``save``.

        Raises:
            StoreNotFound: If ``source`` does not exist
            CorruptStore: If the persisted data is incomplete or inconsistent
        """
        args, vectors, chunk_dicts = read_store(source)
        location = str(source)

        try:
            algorithm = IndexAlgo(args.get("algorithm", IndexAlgo.HNSW.value))
        except ValueError as e:
            raise CorruptStore(location, f"unknown algorithm {args.get('algorithm')!r}") from e

        params = args.get("params") or {}
        if not isinstance(params, dict):
            raise CorruptStore(location, "index params must be an object")

        try:
            entries = [
                IndexedEntry(vector=tuple(row.tolist()), chunk=Chunk.from_dict(data))
                for row, data in zip(vectors, chunk_dicts, strict=True)
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CorruptStore(location, f"invalid entry: {e}") from e

        try:
            if not entries:
                logger.info(f"Loaded empty vector store from {location}")
                return cls.empty(args["dim"], algorithm, **params)
            index = cls.from_entries(entries, algorithm, **params)
        except (TypeError, ValueError, ValidationError) as e:
            raise CorruptStore(location, f"invalid index params: {e}") from e

        logger.info(f"Loaded vector store with {index.size} entries from {location}")
        return index

    def stats(self) -> dict[str, Any]:
        """Summary of the index shape and algorithm."""
        stats = {
            "algorithm": self._algorithm.value,
            "dimension": self._dim,
            "size": self.size,
            "metric": "cosine",
        }
        if self._neighbor_index is not None and hasattr(self._neighbor_index, "get_stats"):
            stats["index"] = self._neighbor_index.get_stats()
        return stats
