"""Common validation utilities."""

import math
import numbers
from collections.abc import Sequence


def validate_non_empty_text(
    text: str, error_message: str = "Cannot process empty text"
) -> str:
    """Validate that text is not empty or whitespace-only."""
    if not text or not text.strip():
        raise ValueError(error_message)
    return text.strip()


def validate_positive(value: int, field_name: str) -> int:
    """Validate that an integer value is strictly positive."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{field_name} must be a positive integer, got {value!r}")
    return value


def validate_non_negative(value: int, field_name: str) -> int:
    """Validate that integer value is non-negative."""
    if value < 0:
        raise ValueError(f"{field_name} cannot be negative")
    return value


def validate_chunk_params(chunk_size: int, chunk_overlap: int) -> tuple[int, int]:
    """Validate chunk size / overlap pair (0 <= overlap < size)."""
    validate_positive(chunk_size, "chunk_size")
    validate_non_negative(chunk_overlap, "chunk_overlap")
    if chunk_overlap >= chunk_size:
        raise ValueError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )
    return chunk_size, chunk_overlap


def validate_finite_vector(vector: Sequence[float], field_name: str = "vector") -> None:
    """Validate that a vector is non-empty and holds only finite numbers."""
    if len(vector) == 0:
        raise ValueError(f"{field_name} cannot be empty")
    for i, value in enumerate(vector):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValueError(f"{field_name} value at index {i} must be a number")
        if not math.isfinite(value):
            raise ValueError(f"{field_name} value at index {i} is not finite")
