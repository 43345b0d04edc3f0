"""Shared test fixtures and configuration."""

import asyncio
import contextlib
import logging
import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from docsearch.clients import FakeEmbeddingClient
from docsearch.core.config import Settings
from docsearch.domain import Document
from docsearch.main import create_app
from docsearch.services import Embedder, IngestionPipeline, QueryService

TEST_EMBEDDING_DIM = 4096

DOC_ONE_TEXT = "A quick test. Another sentence here."
DOC_TWO_TEXT = "Completely different content about oceans."


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env and API key."""
    values = {
        "openai_api_key": None,
        "embedding_dim": TEST_EMBEDDING_DIM,
        "index_algorithm": "linear",
        **overrides,
    }
    return Settings(_env_file=None, **values)


def make_embedder(dim: int = TEST_EMBEDDING_DIM) -> Embedder:
    return Embedder(FakeEmbeddingClient(embedding_dim=dim))


def sample_documents() -> list[Document]:
    """The two-document corpus used by the end-to-end scenarios."""
    return [
        Document(
            id="doc1.md",
            source_path="books/doc1.md",
            raw_text=DOC_ONE_TEXT,
            source_metadata={"file_name": "doc1.md"},
        ),
        Document(
            id="doc2.md",
            source_path="books/doc2.md",
            raw_text=DOC_TWO_TEXT,
            source_metadata={"file_name": "doc2.md"},
        ),
    ]


def build_store(path, documents=None, chunk_size=20, chunk_overlap=5, algorithm="linear"):
    """Ingest documents into a store at ``path`` with the fake embedder."""
    pipeline = IngestionPipeline(make_embedder(), algorithm=algorithm)
    return pipeline.run(
        documents if documents is not None else sample_documents(),
        chunk_size,
        chunk_overlap,
        path,
    )


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a test client for an application whose store is not loaded.

    The lifespan is not entered, so the query service stays in LOADING.
    """
    return TestClient(create_app(make_settings()))


@pytest.fixture
def embedder() -> Embedder:
    return make_embedder()


@pytest.fixture
def store_path(tmp_path):
    """A store built from the two sample documents."""
    path = tmp_path / "vector_store"
    build_store(path)
    return path


@pytest.fixture
def ready_service(store_path) -> QueryService:
    """Query service that has loaded the sample store."""
    service = QueryService(make_embedder())
    asyncio.run(service.initialize(store_path))
    return service


@pytest.fixture
def ready_client(ready_service) -> TestClient:
    """Test client serving the sample store."""
    return TestClient(create_app(make_settings(), ready_service))


@pytest.fixture
def mock_openai_env():
    """Mock OPENAI_API_KEY environment variable for tests."""
    with patch.dict(os.environ, {"OPENAI_API_KEY": "test-key-123"}):
        yield


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration between tests to avoid interference."""
    request_logger = logging.getLogger("api.request")

    # Store original state
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level
    original_request_handlers = request_logger.handlers[:]

    yield

    # Restore original state
    logging.root.handlers = original_handlers
    logging.root.level = original_level
    request_logger.handlers = original_request_handlers


@contextlib.contextmanager
def capture_logger(
    caplog: pytest.LogCaptureFixture, logger_name: str, level: int = logging.INFO
):
    logger = logging.getLogger(logger_name)
    with caplog.at_level(level, logger=logger_name):
        logger.addHandler(caplog.handler)
        try:
            yield
        finally:
            logger.removeHandler(caplog.handler)
