"""Domain layer for the search pipeline.

This package contains the core entities and domain-specific exceptions. It's
framework-agnostic and shared by the ingestion and query sides.
"""

from .entities import Chunk, Document, IndexedEntry
from .errors import (
    CorruptStore,
    DimensionMismatch,
    DomainError,
    EmbeddingError,
    EmbeddingTimeout,
    EmptyBatch,
    IndexUnavailable,
    IngestionError,
    StoreError,
    StoreNotFound,
    ValidationError,
    VectorIndexError,
)

__all__ = [
    # Entities
    "Document",
    "Chunk",
    "IndexedEntry",
    # Errors
    "DomainError",
    "ValidationError",
    "EmbeddingError",
    "EmbeddingTimeout",
    "VectorIndexError",
    "DimensionMismatch",
    "EmptyBatch",
    "StoreError",
    "StoreNotFound",
    "CorruptStore",
    "IndexUnavailable",
    "IngestionError",
]
