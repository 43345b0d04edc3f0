"""Utility modules and helper functions.

This package contains reusable utility modules used across the application.
"""

from .validation import (
    validate_chunk_params,
    validate_finite_vector,
    validate_non_empty_text,
    validate_non_negative,
    validate_positive,
)

__all__ = [
    "validate_chunk_params",
    "validate_finite_vector",
    "validate_non_empty_text",
    "validate_non_negative",
    "validate_positive",
]
