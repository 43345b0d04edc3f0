"""Health check schemas."""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health check response schema."""

    model_config = ConfigDict(strict=True, extra="forbid")

    status: str = Field(..., description="'ok' when queries are served, else 'unavailable'")
    state: str = Field(..., description="Query service state: loading, ready or failed")
    size: int | None = Field(None, ge=0, description="Number of indexed chunks")
    embedding_dim: int | None = Field(None, ge=1, description="Vector dimensionality")
    algorithm: str | None = Field(None, description="Neighbour search algorithm")
    error: str | None = Field(None, description="Load failure, when state is failed")
