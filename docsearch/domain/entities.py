"""Domain entities for the search pipeline.

This module contains the core entities flowing through ingestion and query
serving: the source Document, the Chunk derived from it, and the
IndexedEntry pairing a chunk with its embedding vector.
"""

from dataclasses import dataclass, field

from docsearch.utils import validate_finite_vector


@dataclass(frozen=True)
class Document:
    """Loaded source document.

    Attributes:
        id: Stable identifier (derived from the relative source path by loaders)
        source_path: Where the document was loaded from
        raw_text: Full text content
        source_metadata: Flat string metadata supplied by the loader
    """

    id: str
    source_path: str
    raw_text: str
    source_metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Chunk:
    """Bounded-length segment of a document.

    Attributes:
        text: Exact substring of the source document
        metadata: Copy of the document metadata plus the chunk's own position
        ordinal_index: Position of the chunk within its source document
    """

    text: str
    metadata: dict[str, str] = field(default_factory=dict)
    ordinal_index: int = 0

    def __post_init__(self) -> None:
        """Validate chunk invariants."""
        if self.ordinal_index < 0:
            raise ValueError("Chunk ordinal_index cannot be negative")

    @property
    def document_id(self) -> str | None:
        """Id of the source document, if recorded in metadata."""
        return self.metadata.get("document_id")

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible mapping."""
        return {
            "text": self.text,
            "metadata": dict(self.metadata),
            "ordinal_index": self.ordinal_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Chunk":
        """Rebuild a chunk from ``to_dict`` output."""
        return cls(
            text=data["text"],
            metadata={str(k): str(v) for k, v in data.get("metadata", {}).items()},
            ordinal_index=int(data.get("ordinal_index", 0)),
        )


@dataclass(frozen=True)
class IndexedEntry:
    """A chunk paired with its embedding vector; immutable once created."""

    vector: tuple[float, ...]
    chunk: Chunk

    def __post_init__(self) -> None:
        """Freeze the vector and reject malformed values."""
        vector = tuple(float(v) for v in self.vector)
        validate_finite_vector(vector, "Entry vector")
        object.__setattr__(self, "vector", vector)

    @property
    def dim(self) -> int:
        """Dimensionality of the embedding vector."""
        return len(self.vector)
