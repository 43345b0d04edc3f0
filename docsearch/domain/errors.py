"""Domain-specific exceptions for the search pipeline.

This module contains all domain-level exceptions raised by chunking,
embedding, index construction, persistence and query serving. These
exceptions are framework-agnostic and are mapped to HTTP responses at the
API layer. Every error carries a stable ``code`` and a human-readable
message.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when an argument or entity violates a domain invariant."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "VALIDATION_ERROR")


class EmbeddingError(DomainError):
    """Raised when the embedding capability fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        code: str = "EMBEDDING_FAILED",
    ) -> None:
        super().__init__(message, code)
        self.cause = cause


class EmbeddingTimeout(EmbeddingError):
    """Raised when an embedding call does not finish before its deadline."""

    def __init__(self, timeout_ms: int) -> None:
        message = f"Embedding query timed out after {timeout_ms}ms"
        super().__init__(message, code="EMBEDDING_TIMEOUT")
        self.timeout_ms = timeout_ms


class VectorIndexError(DomainError):
    """Base class for vector index errors."""


class DimensionMismatch(VectorIndexError):
    """Raised when vector lengths are inconsistent within one index."""

    def __init__(self, expected: int, actual: int, position: int | None = None) -> None:
        message = f"Vector dimension mismatch: expected {expected}, got {actual}"
        if position is not None:
            message += f" at entry {position}"
        super().__init__(message, "DIMENSION_MISMATCH")
        self.expected = expected
        self.actual = actual
        self.position = position


class EmptyBatch(VectorIndexError):
    """Raised when building an index from zero entries."""

    def __init__(self) -> None:
        super().__init__("Cannot build an index from an empty batch", "EMPTY_BATCH")


class StoreError(VectorIndexError):
    """Base class for persisted store errors."""


class StoreNotFound(StoreError):
    """Raised when the persisted store location does not exist."""

    def __init__(self, location: str) -> None:
        super().__init__(f"Vector store not found at '{location}'", "STORE_NOT_FOUND")
        self.location = location


class CorruptStore(StoreError):
    """Raised when persisted data is incomplete or cannot be parsed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(
            f"Vector store at '{location}' is corrupt: {reason}", "CORRUPT_STORE"
        )
        self.location = location
        self.reason = reason


class IndexUnavailable(DomainError):
    """Raised when a query arrives while the service is not ready.

    Transient: callers may retry later.
    """

    def __init__(self, state: str) -> None:
        super().__init__(
            f"Vector store not loaded (service state: {state})", "INDEX_UNAVAILABLE"
        )
        self.state = state


class IngestionError(DomainError):
    """Raised when an ingestion run aborts; names the failing document/chunk."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        chunk_index: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "INGESTION_FAILED")
        self.document_id = document_id
        self.chunk_index = chunk_index
        self.context = context or {}
