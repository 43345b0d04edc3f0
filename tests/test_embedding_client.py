"""Tests for embedding client functionality.

This module contains essential tests for the embedding client implementations,
focusing on the core functionality and error handling.
"""

import math
from unittest.mock import MagicMock, patch

import httpx
import pytest

from docsearch.clients.embedding import (
    EmbeddingClient,
    FakeEmbeddingClient,
    OpenAIEmbeddingClient,
    create_embedding_client,
)
from docsearch.domain import EmbeddingError


def _cosine(a: list[float], b: list[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


class TestFakeEmbeddingClient:
    """Test the fake embedding client."""

    def test_embed_text_returns_deterministic_embedding(self):
        """Test that fake client returns deterministic embeddings."""
        client = FakeEmbeddingClient(embedding_dim=10)

        text = "This is a test text"
        result1 = client.embed_text(text)
        result2 = client.embed_text(text)

        assert result1 == result2
        assert len(result1.single_embedding) == 10
        assert all(isinstance(x, float) for x in result1.single_embedding)
        assert result1.model_name == "fake-embedding-model"
        assert result1.embedding_dim == 10

    def test_embeddings_are_unit_length(self):
        """Test that embeddings are L2 normalized."""
        client = FakeEmbeddingClient(embedding_dim=64)

        vector = client.embed_text("The ocean is deep and blue").single_embedding

        assert math.isclose(math.sqrt(_cosine(vector, vector)), 1.0, rel_tol=1e-9)

    def test_embedding_ignores_case_and_punctuation(self):
        """Test that only lower-cased word tokens contribute."""
        client = FakeEmbeddingClient(embedding_dim=64)

        assert (
            client.embed_text("Hello, World!").single_embedding
            == client.embed_text("hello world").single_embedding
        )

    def test_embed_text_different_texts_different_embeddings(self):
        """Test that different texts produce different embeddings."""
        client = FakeEmbeddingClient(embedding_dim=4096)

        result1 = client.embed_text("Hello world")
        result2 = client.embed_text("Goodbye world")

        assert result1.single_embedding != result2.single_embedding

    def test_shared_words_increase_similarity(self):
        """Test that texts sharing words score higher than unrelated texts."""
        client = FakeEmbeddingClient(embedding_dim=4096)

        query = client.embed_text("quick test sentence").single_embedding
        related = client.embed_text("A quick test. Another sentence here.").single_embedding
        unrelated = client.embed_text("Completely different content about oceans.").single_embedding

        assert _cosine(query, related) > _cosine(query, unrelated)

    def test_embed_text_empty_text_raises_error(self):
        """Test that empty text raises an error."""
        client = FakeEmbeddingClient()

        with pytest.raises(EmbeddingError, match="Cannot embed empty text"):
            client.embed_text("")

        with pytest.raises(EmbeddingError, match="Cannot embed empty text"):
            client.embed_text("   ")

    def test_embed_texts_batch_processing(self):
        """Test batch embedding processing."""
        client = FakeEmbeddingClient(embedding_dim=4096)

        texts = ["First text", "Second text", "Third text"]
        result = client.embed_texts(texts)

        assert len(result.embeddings) == 3
        assert result.model_name == "fake-embedding-model"
        assert result.embedding_dim == 4096
        assert all(len(emb) == 4096 for emb in result.embeddings)
        assert result.embeddings[0] == client.embed_text("First text").single_embedding

    def test_invalid_dimension_rejected(self):
        """Test that a non-positive dimension is rejected."""
        with pytest.raises(ValueError, match="embedding_dim must be positive"):
            FakeEmbeddingClient(embedding_dim=0)

    def test_satisfies_client_protocol(self):
        """Test that the fake client satisfies the EmbeddingClient protocol."""
        assert isinstance(FakeEmbeddingClient(embedding_dim=8), EmbeddingClient)


class TestOpenAIEmbeddingClient:
    """Test the OpenAI client against a mocked HTTP transport."""

    @pytest.fixture
    def http_client(self):
        with patch("docsearch.clients.embedding.httpx.Client") as client_cls:
            yield client_cls.return_value.__enter__.return_value

    @staticmethod
    def _response(status_code: int = 200, payload: dict | None = None) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload or {}
        response.text = "error body"
        return response

    def test_missing_api_key_rejected(self):
        """Test that the client requires an API key."""
        with pytest.raises(ValueError, match="API key is required"):
            OpenAIEmbeddingClient("  ")

    def test_embed_texts_orders_by_index(self, http_client):
        """Test that response items are returned in request order."""
        http_client.post.return_value = self._response(
            payload={
                "model": "text-embedding-3-small",
                "data": [
                    {"index": 1, "embedding": [0.0, 1.0]},
                    {"index": 0, "embedding": [1.0, 0.0]},
                ],
            }
        )
        client = OpenAIEmbeddingClient("sk-test", embedding_dim=2)

        result = client.embed_texts(["first", "second"])

        assert result.embeddings == [[1.0, 0.0], [0.0, 1.0]]
        assert result.embedding_dim == 2
        url = http_client.post.call_args.args[0]
        assert url == "https://api.openai.com/v1/embeddings"
        kwargs = http_client.post.call_args.kwargs
        assert kwargs["json"] == {"input": ["first", "second"], "model": "text-embedding-3-small"}
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"

    def test_api_error_status_raises(self, http_client):
        """Test that a non-200 response becomes an EmbeddingError."""
        http_client.post.return_value = self._response(status_code=429)
        client = OpenAIEmbeddingClient("sk-test")

        with pytest.raises(EmbeddingError, match="OpenAI API error 429"):
            client.embed_text("hello")

    def test_missing_data_raises(self, http_client):
        """Test that a malformed payload becomes an EmbeddingError."""
        http_client.post.return_value = self._response(payload={"object": "list"})
        client = OpenAIEmbeddingClient("sk-test")

        with pytest.raises(EmbeddingError, match="missing 'data'"):
            client.embed_text("hello")

    def test_transport_error_is_wrapped(self, http_client):
        """Test that network failures keep the original cause."""
        http_client.post.side_effect = httpx.ConnectError("connection refused")
        client = OpenAIEmbeddingClient("sk-test")

        with pytest.raises(EmbeddingError, match="Failed to call OpenAI API") as exc_info:
            client.embed_text("hello")

        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_empty_text_rejected_before_request(self, http_client):
        """Test that blank inputs never reach the API."""
        client = OpenAIEmbeddingClient("sk-test")

        with pytest.raises(EmbeddingError, match="Cannot embed empty text"):
            client.embed_texts(["ok", " "])

        http_client.post.assert_not_called()


class TestCreateEmbeddingClient:
    """Test the embedding client factory function."""

    def test_create_client_with_empty_api_key_returns_fake(self):
        """Test that factory returns fake client with empty API key."""
        client = create_embedding_client(api_key="")
        assert isinstance(client, FakeEmbeddingClient)

        client = create_embedding_client(api_key="   ")
        assert isinstance(client, FakeEmbeddingClient)

    def test_fake_client_uses_configured_dimension(self):
        """Test that the fallback client honours the configured dimension."""
        client = create_embedding_client(api_key=None, embedding_dim=32)
        assert client.embedding_dim == 32

    def test_create_client_with_valid_api_key_returns_openai(self):
        """Test that factory returns OpenAI client with valid API key."""
        client = create_embedding_client(api_key="test_api_key_123")
        assert isinstance(client, OpenAIEmbeddingClient)


class TestEmbeddingError:
    """Test the embedding error exception."""

    def test_embedding_error_with_message(self):
        """Test embedding error with just a message."""
        error = EmbeddingError("Test error message")
        assert str(error) == "Test error message"
        assert error.cause is None
        assert error.code == "EMBEDDING_FAILED"

    def test_embedding_error_with_cause(self):
        """Test embedding error with a cause exception."""
        cause = ValueError("Original error")
        error = EmbeddingError("Wrapped error", cause)

        assert str(error) == "Wrapped error"
        assert error.cause is cause
