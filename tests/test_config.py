"""Tests for application configuration."""

import os
from unittest.mock import patch

from docsearch.core.config import Settings


class TestSettings:
    """Test cases for Settings configuration."""

    def test_default_settings(self):
        """Test that default settings are loaded correctly."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.api_title == "docsearch"
        assert settings.api_version == "0.1.0"
        assert settings.api_prefix == "/api/v1"
        assert settings.host == "0.0.0.0"
        assert settings.port == 3000
        assert settings.reload is False
        assert settings.log_level == "INFO"
        assert settings.store_path == "vector_store"
        assert settings.data_path == "data/books"
        assert settings.chunk_size == 300
        assert settings.chunk_overlap == 100
        assert settings.default_k == 5
        assert settings.embedding_timeout_ms == 5000

    def test_environment_variable_override(self):
        """Test that environment variables override default settings."""
        with patch.dict(
            os.environ,
            {
                "API_TITLE": "Test Search",
                "PORT": "9000",
                "LOG_LEVEL": "DEBUG",
                "CHUNK_SIZE": "500",
                "STORE_PATH": "/tmp/store",
                "OPENAI_API_KEY": "test-key-123",
            },
        ):
            settings = Settings(_env_file=None)

            assert settings.api_title == "Test Search"
            assert settings.port == 9000
            assert settings.log_level == "DEBUG"
            assert settings.chunk_size == 500
            assert settings.store_path == "/tmp/store"
            assert settings.openai_api_key == "test-key-123"

    def test_openai_api_key_with_value(self, mock_openai_env):
        """Test that openai_api_key can be set via environment variable."""
        settings = Settings(_env_file=None)
        assert settings.openai_api_key == "test-key-123"

    def test_openai_api_key_optional_defaults_to_none(self):
        """Test that openai_api_key is optional and defaults to None."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

            assert settings.openai_api_key is None

    def test_embedding_client_selection_based_on_api_key(self):
        """Test that embedding client selection works correctly based on API key presence."""
        from docsearch.clients import (
            FakeEmbeddingClient,
            OpenAIEmbeddingClient,
            create_embedding_client,
        )

        client = create_embedding_client(api_key="")
        assert isinstance(client, FakeEmbeddingClient)

        client = create_embedding_client(api_key=None)
        assert isinstance(client, FakeEmbeddingClient)

        client = create_embedding_client(api_key="test-api-key-123")
        assert isinstance(client, OpenAIEmbeddingClient)

    def test_logging_formats(self):
        """Test that logging formats are configured correctly."""
        settings = Settings(_env_file=None)

        assert "%(asctime)s" in settings.log_format_general
        assert "%(name)s" in settings.log_format_general
        assert "%(levelname)s" in settings.log_format_general
        assert "%(message)s" in settings.log_format_general

        # Request format should include additional fields
        assert "method=%(method)s" in settings.log_format_request
        assert "path=%(path)s" in settings.log_format_request
        assert "status=%(status_code)s" in settings.log_format_request
        assert "duration_ms=%(duration_ms)s" in settings.log_format_request
        assert "request_id=%(request_id)s" in settings.log_format_request

    def test_cors_configuration(self):
        """Test CORS configuration defaults."""
        settings = Settings(_env_file=None)

        assert settings.cors_origins == ["*"]
        assert settings.cors_allow_credentials is True
        assert settings.cors_allow_methods == ["*"]
        assert settings.cors_allow_headers == ["*"]

    def test_index_configuration(self):
        """Test index configuration defaults."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.index_algorithm == "hnsw"
        assert settings.hnsw_params() == {
            "m": 16,
            "ef_construction": 200,
            "ef_search": 64,
            "exact_threshold": 1000,
        }

    def test_openai_configuration(self):
        """Test OpenAI API configuration defaults."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "test-key"}):
            settings = Settings(_env_file=None)

            assert settings.openai_model == "text-embedding-3-small"
            assert settings.openai_base_url == "https://api.openai.com/v1"
            assert settings.embedding_dim == 1536
