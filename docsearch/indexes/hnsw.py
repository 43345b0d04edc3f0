"""HNSW (Hierarchical Navigable Small World) vector index implementation.

This module implements a graph-based approximate nearest neighbour index.
Every vector is a node; each node is assigned a random top layer drawn from
an exponentially decaying distribution, and at every layer it is linked to
its closest neighbours found while inserting. A query greedily descends the
sparse upper layers to find a good entry point, then runs a best-first beam
search (width ``ef_search``) on the dense bottom layer.
"""

import heapq
import logging
import math
from typing import Any

import numpy as np

from .base import BaseNeighborIndex, rank_by_similarity

logger = logging.getLogger(__name__)


class HNSWIndex(BaseNeighborIndex):
    """HNSW vector index implementation.

    Time Complexity:
    - Build: O(N * log N * ef_construction) on average
    - Query: O(log N * ef_search) on average

    Space Complexity:
    - O(N * D + N * M) - vectors plus adjacency lists

    Characteristics:
    - Approximate results (recall tunable via ef_search)
    - Good performance in high dimensions
    - Deterministic build: level assignment uses a seeded generator, so the
      same vectors in the same order always produce the same graph

    Exactness guarantee:
    - Indexes with at most ``exact_threshold`` vectors, or where the beam
      (``max(ef_search, k)``) covers the whole index, are answered by exact
      cosine ranking. Top-k results on small indexes therefore match the
      linear scan exactly.
    - All returned candidates are scored exactly and ordered by similarity,
      ties broken by insertion order.
    """

    def __init__(
        self,
        dimension: int | None = None,
        m: int = 16,
        ef_construction: int = 200,
        ef_search: int = 64,
        exact_threshold: int = 1000,
        seed: int = 42,
    ) -> None:
        """Initialize the HNSW index.

        Args:
            dimension: Expected vector dimension (auto-detected if None)
            m: Max links per node on upper layers (2*m on the bottom layer)
            ef_construction: Beam width used while inserting
            ef_search: Beam width used while querying
            exact_threshold: Index sizes up to this are searched exhaustively
            seed: Seed for level assignment
        """
        super().__init__(dimension)

        if m < 2:
            raise ValueError("m must be at least 2")

        self._m = m
        self._m0 = 2 * m
        self._ef_construction = max(ef_construction, m)
        self._ef_search = max(1, ef_search)
        self._exact_threshold = max(0, exact_threshold)
        self._seed = seed
        self._level_mult = 1.0 / math.log(m)

        # Will be initialized during build
        self._layers: list[dict[int, list[int]]] = []
        self._entry_point: int | None = None
        self._max_level = -1

        logger.debug(
            f"Initialized HNSWIndex with m={m}, ef_construction={ef_construction}, "
            f"ef_search={ef_search}"
        )

    @property
    def params(self) -> dict[str, int]:
        """Construction parameters needed to rebuild an identical graph."""
        return {
            "m": self._m,
            "ef_construction": self._ef_construction,
            "ef_search": self._ef_search,
            "exact_threshold": self._exact_threshold,
            "seed": self._seed,
        }

    def _build_index(self) -> None:
        """Insert every vector, in order, into a fresh graph."""
        self._layers = []
        self._entry_point = None
        self._max_level = -1

        rng = np.random.default_rng(self._seed)
        for node in range(self.size):
            level = int(-math.log(1.0 - rng.random()) * self._level_mult)
            self._insert(node, level)

        logger.info(
            f"Built HNSW graph: {self.size} nodes, {len(self._layers)} layers, "
            f"entry point {self._entry_point}"
        )

    def _distance(self, query_vector: np.ndarray, node: int) -> float:
        """Cosine distance between a normalized query and a stored node."""
        return 1.0 - float(self._matrix[node] @ query_vector)

    def _search_layer(
        self,
        query_vector: np.ndarray,
        entry_points: list[int],
        ef: int,
        level: int,
    ) -> list[tuple[float, int]]:
        """Best-first beam search on one layer, returns (distance, node) sorted."""
        visited = set(entry_points)
        candidates = [(self._distance(query_vector, node), node) for node in entry_points]
        heapq.heapify(candidates)
        # Max-heap of the current best ``ef`` results
        best = [(-distance, node) for distance, node in candidates]
        heapq.heapify(best)

        graph = self._layers[level]
        while candidates:
            distance, node = heapq.heappop(candidates)
            if len(best) >= ef and distance > -best[0][0]:
                break

            for neighbour in graph.get(node, ()):
                if neighbour in visited:
                    continue
                visited.add(neighbour)

                neighbour_distance = self._distance(query_vector, neighbour)
                if len(best) < ef or neighbour_distance < -best[0][0]:
                    heapq.heappush(candidates, (neighbour_distance, neighbour))
                    heapq.heappush(best, (-neighbour_distance, neighbour))
                    if len(best) > ef:
                        heapq.heappop(best)

        return sorted((-negative, node) for negative, node in best)

    def _insert(self, node: int, level: int) -> None:
        """Link a new node into layers 0..level."""
        while len(self._layers) <= level:
            self._layers.append({})
        for layer in range(level + 1):
            self._layers[layer][node] = []

        if self._entry_point is None:
            self._entry_point = node
            self._max_level = level
            return

        query_vector = self._matrix[node]
        entry_points = [self._entry_point]

        # Greedy descent through layers above the node's top layer
        for layer in range(self._max_level, level, -1):
            entry_points = [self._search_layer(query_vector, entry_points, 1, layer)[0][1]]

        for layer in range(min(level, self._max_level), -1, -1):
            found = self._search_layer(
                query_vector, entry_points, self._ef_construction, layer
            )
            max_links = self._m0 if layer == 0 else self._m
            neighbours = [candidate for _, candidate in found[: self._m]]
            self._layers[layer][node] = neighbours

            for neighbour in neighbours:
                links = self._layers[layer][neighbour]
                links.append(node)
                if len(links) > max_links:
                    anchor = self._matrix[neighbour]
                    links.sort(key=lambda other: (self._distance(anchor, other), other))
                    del links[max_links:]

            entry_points = [candidate for _, candidate in found]

        if level > self._max_level:
            self._max_level = level
            self._entry_point = node

    def _query_index(self, query_vector: np.ndarray, k: int) -> list[tuple[int, float]]:
        """Approximate k most similar vectors, exact on small indexes."""
        if self._entry_point is None:
            return []

        ef = max(self._ef_search, k)
        if self.size <= self._exact_threshold or ef >= self.size:
            return self._exact_query(query_vector, k)

        entry_points = [self._entry_point]
        for layer in range(self._max_level, 0, -1):
            entry_points = [self._search_layer(query_vector, entry_points, 1, layer)[0][1]]

        found = self._search_layer(query_vector, entry_points, ef, 0)
        positions = np.array([node for _, node in found], dtype=np.int64)
        similarities = self._matrix[positions] @ query_vector
        return rank_by_similarity(positions, similarities, k)

    def get_stats(self) -> dict[str, Any]:
        """Comprehensive HNSW statistics."""
        bottom = self._layers[0] if self._layers else {}
        avg_degree = (
            sum(len(links) for links in bottom.values()) / len(bottom) if bottom else 0
        )
        return {
            **super().get_stats(),
            "algorithm": "HNSW",
            **self.params,
            "layers": len(self._layers),
            "entry_point": self._entry_point,
            "avg_degree_layer0": avg_degree,
            "memory_usage_bytes": int(self._matrix.nbytes),
            "complexity": {
                "build_time": "O(N * log N * ef_construction)",
                "query_time": "O(log N * ef_search)",
                "space": "O(N * D + N * M)",
            },
        }
