"""Vector indexing for nearest neighbour search.

This package provides the neighbour search algorithms, the ``VectorIndex``
aggregate that pairs them with chunks, and directory-backed persistence.

Available Algorithms:
- LinearScanIndex: Exhaustive cosine ranking, the reference semantics
- HNSWIndex: Graph-based approximate search for larger indexes
"""

from .base import BaseNeighborIndex, IndexNotBuiltError, NeighborIndex
from .hnsw import HNSWIndex
from .linear import LinearScanIndex
from .manager import IndexAlgo, create_index
from .store import read_store, remove_store, write_store
from .vector_index import VectorIndex

__all__ = [
    "BaseNeighborIndex",
    "HNSWIndex",
    "IndexAlgo",
    "IndexNotBuiltError",
    "LinearScanIndex",
    "NeighborIndex",
    "VectorIndex",
    "create_index",
    "read_store",
    "remove_store",
    "write_store",
]
