"""Document loaders for files on disk.

Thin wrapper around LangChain's ``DirectoryLoader``: every registered file
extension becomes a recursive glob handled by its own loader class, and the
resulting LangChain documents are mapped to ``Document`` objects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import partial
from pathlib import Path
from typing import Any

from langchain_community.document_loaders import DirectoryLoader, TextLoader

from docsearch.domain import Document

logger = logging.getLogger(__name__)

# Called as ``loader_cls(file_path)``; must return a LangChain document loader
LoaderFactory = Callable[[str], Any]

load_text_file: LoaderFactory = partial(TextLoader, encoding="utf-8")

DEFAULT_LOADERS: dict[str, LoaderFactory] = {
    ".md": load_text_file,
    ".txt": load_text_file,
}


def extension_glob(extension: str) -> str:
    """Recursive glob matching *extension* regardless of letter case."""
    pattern = "".join(
        f"[{char.lower()}{char.upper()}]" if char.isalpha() else char
        for char in extension
    )
    return f"**/*{pattern}"


def to_document(page_content: str, metadata: Mapping[str, Any], root: Path) -> Document:
    """Map one loaded file to a Document whose id is its path relative to root."""
    path = Path(metadata["source"])
    return Document(
        id=path.relative_to(root).as_posix(),
        source_path=str(path),
        raw_text=page_content,
        source_metadata={
            **{key: str(value) for key, value in metadata.items()},
            "file_name": path.name,
            "extension": path.suffix.lower(),
        },
    )


def load_directory(
    root: str | Path,
    loaders: Mapping[str, LoaderFactory] | None = None,
) -> list[Document]:
    """Recursively load all supported documents under *root*.

    Parameters
    ----------
    root:
        Directory containing source documents.
    loaders:
        Mapping of file extension (with dot, any case) to the ``loader_cls``
        handed to ``DirectoryLoader``. Files with other extensions and
        hidden files are skipped.

    Returns
    -------
    list[Document]
        Documents in sorted path order.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Document directory not found: {root}")

    loaders = {ext.lower(): cls for ext, cls in (loaders or DEFAULT_LOADERS).items()}

    documents: list[Document] = []
    for extension, loader_cls in loaders.items():
        loader = DirectoryLoader(
            str(root),
            glob=extension_glob(extension),
            loader_cls=loader_cls,  # type: ignore[arg-type]
            silent_errors=False,
        )
        documents.extend(
            to_document(loaded.page_content, loaded.metadata, root)
            for loaded in loader.load()
        )

    documents.sort(key=lambda document: document.id)
    logger.info(f"Loaded {len(documents)} documents from {root}")
    return documents
