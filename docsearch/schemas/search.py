"""Search schemas for API responses."""

from pydantic import BaseModel, ConfigDict, Field

from docsearch.services import SearchMatch


class SearchHit(BaseModel):
    """Schema for individual search result hits."""

    model_config = ConfigDict(strict=True, extra="forbid")

    content: str = Field(..., description="Text of the matching chunk")
    metadata: dict[str, str] = Field(
        default_factory=dict, description="Source document and position metadata"
    )
    score: float = Field(
        ..., ge=-1.0, le=1.0, description="Cosine similarity (higher = more similar)"
    )

    @classmethod
    def from_match(cls, match: SearchMatch) -> "SearchHit":
        # Float rounding can push a cosine a hair outside [-1, 1]
        score = min(1.0, max(-1.0, match.score))
        return cls(content=match.content, metadata=dict(match.metadata), score=score)
