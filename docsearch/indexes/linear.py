"""Linear scan vector index implementation."""

import logging
from typing import Any

import numpy as np

from .base import BaseNeighborIndex

logger = logging.getLogger(__name__)


class LinearScanIndex(BaseNeighborIndex):
    """Linear scan index - exhaustive cosine search baseline.

    Time: Build O(N*D), Query O(N*D + N log N), Space O(N*D)
    Best for: Small datasets, exact results, reference implementation
    """

    def _build_index(self) -> None:
        """Build linear scan index (trivial - vectors are already normalized)."""
        logger.debug(f"Built LinearScanIndex with {self.size} vectors")

    def _query_index(self, query_vector: np.ndarray, k: int) -> list[tuple[int, float]]:
        """Linear scan query for k most similar vectors."""
        if self.size == 0:
            return []
        return self._exact_query(query_vector, k)

    def get_stats(self) -> dict[str, Any]:
        """Comprehensive linear scan statistics."""
        return {
            **super().get_stats(),
            "algorithm": "LinearScan",
            "memory_usage_bytes": int(self._matrix.nbytes),
            "complexity": {
                "build_time": "O(N * D)",
                "query_time": "O(N * D)",
                "space": "O(N * D)",
            },
        }
