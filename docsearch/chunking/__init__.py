"""Text chunking."""

from .splitter import (
    DEFAULT_SEPARATORS,
    create_splitter,
    split_document,
    split_documents,
    split_text,
)

__all__ = [
    "DEFAULT_SEPARATORS",
    "create_splitter",
    "split_document",
    "split_documents",
    "split_text",
]
