"""Client modules for external services.

This package contains client implementations for external services
such as embedding providers (OpenAI API).
"""

from .embedding import (
    EmbeddingClient,
    EmbeddingResult,
    FakeEmbeddingClient,
    OpenAIEmbeddingClient,
    create_embedding_client,
)

__all__ = [
    "EmbeddingClient",
    "EmbeddingResult",
    "FakeEmbeddingClient",
    "OpenAIEmbeddingClient",
    "create_embedding_client",
]
