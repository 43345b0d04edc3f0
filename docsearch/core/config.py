"""Application configuration using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_title: str = "docsearch"
    api_description: str = (
        "Similarity search over chunked documents stored in a vector index"
    )
    api_version: str = "0.1.0"
    api_prefix: str = "/api/v1"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False

    # CORS Configuration
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])

    # Embedding provider
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key for embeddings (fake client is used when unset)",
    )
    openai_model: str = "text-embedding-3-small"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_request_timeout: float = 30.0
    embedding_dim: int = 1536
    embedding_timeout_ms: int = 5000
    embedding_batch_size: int = 64

    # Storage
    store_path: str = "vector_store"
    data_path: str = "data/books"

    # Chunking
    chunk_size: int = 300
    chunk_overlap: int = 100

    # Query
    default_k: int = 5
    max_k: int = 100

    # Index Configuration
    index_algorithm: str = "hnsw"  # linear, hnsw
    hnsw_m: int = 16
    hnsw_ef_construction: int = 200
    hnsw_ef_search: int = 64
    hnsw_exact_threshold: int = 1000

    # Logging Configuration
    log_level: str = "INFO"
    log_format_general: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_format_request: str = (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s | method=%(method)s path=%(path)s status=%(status_code)s duration_ms=%(duration_ms)s request_id=%(request_id)s"
    )

    def hnsw_params(self) -> dict[str, int]:
        """Keyword arguments for building an HNSW index."""
        return {
            "m": self.hnsw_m,
            "ef_construction": self.hnsw_ef_construction,
            "ef_search": self.hnsw_ef_search,
            "exact_threshold": self.hnsw_exact_threshold,
        }


# Global settings instance
settings = Settings()  # type: ignore[call-arg]
