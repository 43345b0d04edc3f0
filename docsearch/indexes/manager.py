"""Factory functions for neighbour index algorithms."""

import logging
from enum import Enum
from typing import Any

from .base import NeighborIndex
from .hnsw import HNSWIndex
from .linear import LinearScanIndex

logger = logging.getLogger(__name__)


class IndexAlgo(str, Enum):
    """Supported vector index algorithms."""

    LINEAR = "linear"
    HNSW = "hnsw"


def create_index(
    index_type: IndexAlgo | str = IndexAlgo.HNSW,
    dimension: int | None = None,
    **kwargs: Any,
) -> NeighborIndex:
    """Factory to create neighbour index instances."""
    if isinstance(index_type, IndexAlgo):
        index_type = index_type.value

    index_type = index_type.lower().strip()

    if index_type == IndexAlgo.LINEAR.value:
        return LinearScanIndex(dimension=dimension)
    elif index_type == IndexAlgo.HNSW.value:
        return HNSWIndex(dimension=dimension, **kwargs)
    else:
        raise ValueError(
            f"Unsupported index type: {index_type}. "
            f"Supported types: {', '.join(algo.value for algo in IndexAlgo)}"
        )


def index_params(index: NeighborIndex) -> dict[str, Any]:
    """Construction parameters of an index, as persisted alongside it."""
    return dict(getattr(index, "params", {}))
