"""Recursive character text splitting with overlap.

Splitting is delegated to LangChain's ``RecursiveCharacterTextSplitter``:
text is cut on the largest semantic boundary available (paragraph, line,
sentence, word) and only falls back to single characters when a piece
still exceeds the chunk size. Separators stay attached to the end of the
preceding piece and whitespace is not stripped, so every chunk is an exact
substring of the source and the chunks, read in order, cover every
character of it.
"""

import logging
from collections.abc import Iterable, Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from docsearch.domain import Chunk, Document, ValidationError
from docsearch.utils import validate_chunk_params

logger = logging.getLogger(__name__)

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")


def create_splitter(
    chunk_size: int,
    chunk_overlap: int,
    separators: Sequence[str] | None = None,
) -> RecursiveCharacterTextSplitter:
    """Build a character-length splitter that records each chunk's offset.

    Raises:
        ValidationError: If ``chunk_size <= 0`` or the overlap is not in
            ``[0, chunk_size)``
    """
    try:
        validate_chunk_params(chunk_size, chunk_overlap)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    separators = list(separators) if separators else list(DEFAULT_SEPARATORS)
    if separators[-1] != "":
        # Always end with the single-character cut
        separators.append("")

    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=separators,
        keep_separator="end",
        strip_whitespace=False,
        add_start_index=True,
    )


def split_text(
    text: str,
    chunk_size: int,
    chunk_overlap: int,
    separators: Sequence[str] | None = None,
) -> list[str]:
    """Split raw text into chunk strings."""
    return create_splitter(chunk_size, chunk_overlap, separators).split_text(text)


def split_document(
    document: Document,
    chunk_size: int,
    chunk_overlap: int,
    separators: Sequence[str] | None = None,
) -> list[Chunk]:
    """Split one document into ordered chunks carrying source metadata.

    Each chunk gets a shallow copy of the document metadata plus its own
    position: ``source``, ``document_id``, ``chunk_index``, ``start_index``,
    ``line_from`` and ``line_to``. Whitespace-only segments are dropped.
    """
    splitter = create_splitter(chunk_size, chunk_overlap, separators)
    text = document.raw_text

    chunks: list[Chunk] = []
    for piece in splitter.create_documents([text]):
        segment = piece.page_content
        if not segment.strip():
            continue
        start = piece.metadata["start_index"]
        line_from = text.count("\n", 0, start) + 1
        line_to = line_from + segment.rstrip("\n").count("\n")
        metadata = {
            **document.source_metadata,
            "source": document.source_path,
            "document_id": document.id,
            "chunk_index": str(len(chunks)),
            "start_index": str(start),
            "line_from": str(line_from),
            "line_to": str(line_to),
        }
        chunks.append(Chunk(text=segment, metadata=metadata, ordinal_index=len(chunks)))

    logger.debug(
        f"Split document {document.id} ({len(text)} chars) into {len(chunks)} chunks"
    )
    return chunks


def split_documents(
    documents: Iterable[Document],
    chunk_size: int,
    chunk_overlap: int,
    separators: Sequence[str] | None = None,
) -> list[Chunk]:
    """Split many documents, preserving document order then chunk order."""
    chunks: list[Chunk] = []
    for document in documents:
        chunks.extend(split_document(document, chunk_size, chunk_overlap, separators))
    return chunks
