"""Embedding clients for computing text embeddings.

This module defines the embedding client protocol and concrete implementations
for different embedding providers (OpenAI API, fake client for testing).
It follows the strategy pattern to allow switching between different embedding
providers based on configuration.
"""

import hashlib
import logging
import math
import re
from dataclasses import dataclass
from http import HTTPStatus
from typing import Protocol, runtime_checkable

import httpx

from docsearch.domain import EmbeddingError
from docsearch.utils import validate_non_empty_text

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\w+")


@dataclass(frozen=True)
class EmbeddingResult:
    """Embedding computation result with metadata.

    Attributes:
        embeddings: List of embedding vectors
        model_name: Name/identifier of the embedding model used
        embedding_dim: Dimension of each embedding vector
    """

    embeddings: list[list[float]]
    model_name: str
    embedding_dim: int

    @property
    def single_embedding(self) -> list[float]:
        """Get single embedding for single-text operations.

        Raises:
            ValueError: If result contains != 1 embedding
        """
        if len(self.embeddings) != 1:
            raise ValueError(f"Expected 1 embedding, got {len(self.embeddings)}")
        return self.embeddings[0]


@runtime_checkable
class EmbeddingClient(Protocol):
    """Protocol for embedding clients with pluggable providers."""

    @property
    def embedding_dim(self) -> int:
        """Get embedding vector dimension."""
        ...

    def embed_text(self, text: str) -> EmbeddingResult:
        """Compute embedding for single text.

        Raises:
            EmbeddingError: If embedding computation fails
        """
        ...

    def embed_texts(self, texts: list[str]) -> EmbeddingResult:
        """Compute embeddings for multiple texts.

        Raises:
            EmbeddingError: If embedding computation fails
        """
        ...


class FakeEmbeddingClient:
    """Deterministic offline embedding client.

    Uses feature hashing over lower-cased word tokens, so texts sharing words
    land close to each other under cosine similarity. Vectors are L2
    normalized.
    """

    MODEL_NAME = "fake-embedding-model"

    def __init__(self, embedding_dim: int = 256) -> None:
        """Initialize fake embedding client."""
        if embedding_dim <= 0:
            raise ValueError("embedding_dim must be positive")
        self._embedding_dim = embedding_dim
        logger.info(f"Initialized FakeEmbeddingClient with dim={self._embedding_dim}")

    @property
    def embedding_dim(self) -> int:
        """Get embedding vector dimension."""
        return self._embedding_dim

    def embed_text(self, text: str) -> EmbeddingResult:
        """Generate a deterministic hashed bag-of-words embedding."""
        try:
            text_clean = validate_non_empty_text(text, "Cannot embed empty text")
        except ValueError as e:
            raise EmbeddingError(str(e)) from e

        tokens = _TOKEN_PATTERN.findall(text_clean.lower()) or [text_clean.lower()]

        embedding = [0.0] * self._embedding_dim
        for token in tokens:
            digest = hashlib.md5(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:4], "big") % self._embedding_dim
            sign = 1.0 if digest[4] % 2 == 0 else -1.0
            embedding[bucket] += sign

        norm = math.sqrt(sum(x * x for x in embedding))
        if norm > 0:
            embedding = [x / norm for x in embedding]

        logger.debug(f"Generated fake embedding for text length {len(text)}")

        return EmbeddingResult(
            embeddings=[embedding],
            model_name=self.MODEL_NAME,
            embedding_dim=self._embedding_dim,
        )

    def embed_texts(self, texts: list[str]) -> EmbeddingResult:
        """Generate fake embeddings for multiple texts."""
        embeddings = [self.embed_text(text).single_embedding for text in texts]
        return EmbeddingResult(
            embeddings=embeddings,
            model_name=self.MODEL_NAME,
            embedding_dim=self._embedding_dim,
        )


class OpenAIEmbeddingClient:
    """OpenAI embeddings API client with authentication and error handling."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str = "https://api.openai.com/v1",
        embedding_dim: int = 1536,
        timeout: float = 30.0,
    ) -> None:
        """Initialize OpenAI embedding client."""
        if not api_key or not api_key.strip():
            raise ValueError("OpenAI API key is required")

        self._api_key = api_key.strip()
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._embedding_dim = embedding_dim
        self._timeout = timeout

        logger.info(f"Initialized OpenAIEmbeddingClient with model={self._model}")

    @property
    def embedding_dim(self) -> int:
        """Get the configured embedding dimension."""
        return self._embedding_dim

    def embed_text(self, text: str) -> EmbeddingResult:
        """Compute single text embedding using the OpenAI API.

        Raises:
            EmbeddingError: If API call fails or returns invalid data
        """
        try:
            validate_non_empty_text(text, "Cannot embed empty text")
        except ValueError as e:
            raise EmbeddingError(str(e)) from e

        return self.embed_texts([text])

    def embed_texts(self, texts: list[str]) -> EmbeddingResult:
        """Compute batch embeddings using the OpenAI API.

        Raises:
            EmbeddingError: If API call fails or returns invalid data
        """
        if not texts:
            return EmbeddingResult(
                embeddings=[],
                model_name=self._model,
                embedding_dim=self._embedding_dim,
            )

        for text in texts:
            try:
                validate_non_empty_text(text, "Cannot embed empty text")
            except ValueError as e:
                raise EmbeddingError(str(e)) from e

        try:
            headers = {
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            }
            payload = {"input": texts, "model": self._model}

            logger.debug(f"Making OpenAI embeddings request for {len(texts)} texts")

            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(
                    f"{self._base_url}/embeddings",
                    headers=headers,
                    json=payload,
                )

            if response.status_code != HTTPStatus.OK:
                error_msg = f"OpenAI API error {response.status_code}: {response.text}"
                logger.error(error_msg)
                raise EmbeddingError(error_msg)

            data = response.json()

            if "data" not in data:
                raise EmbeddingError("Invalid response format: missing 'data'")

            items = sorted(data["data"], key=lambda item: item.get("index", 0))
            embeddings = [item["embedding"] for item in items]

            if len(embeddings) != len(texts):
                raise EmbeddingError(
                    f"Expected {len(texts)} embeddings, got {len(embeddings)}"
                )

            logger.debug(f"Successfully embedded {len(texts)} texts")

            return EmbeddingResult(
                embeddings=embeddings,
                model_name=data.get("model", self._model),
                embedding_dim=len(embeddings[0]) if embeddings else self._embedding_dim,
            )

        except EmbeddingError:
            raise
        except Exception as e:
            error_msg = f"Failed to call OpenAI API: {e}"
            logger.error(error_msg)
            raise EmbeddingError(error_msg, e) from e


def create_embedding_client(
    api_key: str | None = None,
    model: str = "text-embedding-3-small",
    base_url: str = "https://api.openai.com/v1",
    embedding_dim: int = 1536,
    timeout: float = 30.0,
) -> EmbeddingClient:
    """Create OpenAI client (if API key available) or fake client."""
    if api_key and api_key.strip():
        logger.info("Creating OpenAIEmbeddingClient")
        return OpenAIEmbeddingClient(
            api_key,
            model=model,
            base_url=base_url,
            embedding_dim=embedding_dim,
            timeout=timeout,
        )

    logger.info("No API key provided, creating FakeEmbeddingClient")
    return FakeEmbeddingClient(embedding_dim=embedding_dim)
