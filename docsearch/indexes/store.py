"""Directory-backed persistence for vector indexes.

Store layout::

    <store>/
        args.json       format version, algorithm, params, dim, count
        vectors.npy     float64 matrix, one row per entry, in insertion order
        docstore.json   list of serialized chunks, same order as the rows

A store is always written into a sibling staging directory first and then
renamed into place, so a reader finds either the complete previous store or
the complete new one. During the swap the destination may briefly be absent;
it is never half-written.
"""

import json
import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Any

import numpy as np

from docsearch.domain import CorruptStore, StoreNotFound

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
ARGS_FILE = "args.json"
VECTORS_FILE = "vectors.npy"
DOCSTORE_FILE = "docstore.json"
REQUIRED_FILES = (ARGS_FILE, VECTORS_FILE, DOCSTORE_FILE)


def write_store(
    destination: str | Path,
    args: dict[str, Any],
    vectors: np.ndarray,
    chunks: list[dict[str, Any]],
) -> Path:
    """Write a complete store and atomically swap it into ``destination``."""
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    staging = Path(
        tempfile.mkdtemp(prefix=f".{destination.name}.tmp-", dir=destination.parent)
    )
    try:
        _write_json(staging / ARGS_FILE, {"format_version": FORMAT_VERSION, **args})
        with open(staging / VECTORS_FILE, "wb") as fh:
            np.save(fh, np.asarray(vectors, dtype=np.float64), allow_pickle=False)
            fh.flush()
            os.fsync(fh.fileno())
        _write_json(staging / DOCSTORE_FILE, chunks)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    _swap_into_place(staging, destination)
    logger.info(f"Saved vector store with {args.get('count', 0)} entries to {destination}")
    return destination


def read_store(
    source: str | Path,
) -> tuple[dict[str, Any], np.ndarray, list[dict[str, Any]]]:
    """Read and validate a store written by ``write_store``.

    Raises:
        StoreNotFound: If ``source`` does not exist
        CorruptStore: If a required file is missing or unparsable, or the
            files disagree with each other
    """
    source = Path(source)
    location = str(source)
    if not source.exists():
        raise StoreNotFound(location)
    if not source.is_dir():
        raise CorruptStore(location, "store location is not a directory")

    for name in REQUIRED_FILES:
        if not (source / name).is_file():
            raise CorruptStore(location, f"missing required file '{name}'")

    args = _read_json(source / ARGS_FILE, location)
    if not isinstance(args, dict):
        raise CorruptStore(location, f"'{ARGS_FILE}' must hold an object")
    if args.get("format_version") != FORMAT_VERSION:
        raise CorruptStore(
            location, f"unsupported format version {args.get('format_version')!r}"
        )

    dim = args.get("dim")
    count = args.get("count")
    if isinstance(dim, bool) or not isinstance(dim, int) or dim <= 0:
        raise CorruptStore(location, f"cannot parse dimensionality {dim!r}")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise CorruptStore(location, f"cannot parse entry count {count!r}")

    try:
        vectors = np.load(source / VECTORS_FILE, allow_pickle=False)
    except (OSError, ValueError) as e:
        raise CorruptStore(location, f"unreadable '{VECTORS_FILE}': {e}") from e

    if vectors.ndim != 2 or vectors.shape != (count, dim):
        raise CorruptStore(
            location,
            f"vector matrix shape {vectors.shape} does not match ({count}, {dim})",
        )

    chunks = _read_json(source / DOCSTORE_FILE, location)
    if not isinstance(chunks, list) or len(chunks) != count:
        raise CorruptStore(
            location, f"'{DOCSTORE_FILE}' must hold a list of {count} chunks"
        )

    return args, vectors.astype(np.float64, copy=False), chunks


def remove_store(location: str | Path) -> None:
    """Delete a store directory (or stray file) if present."""
    _remove_path(Path(location))


def _swap_into_place(staging: Path, destination: Path) -> None:
    """Rename staging over destination, keeping the old copy until it succeeds."""
    backup: Path | None = None
    if destination.exists() or destination.is_symlink():
        backup = destination.with_name(f".{destination.name}.old-{uuid.uuid4().hex}")
        os.replace(destination, backup)

    try:
        os.replace(staging, destination)
    except BaseException:
        if backup is not None:
            os.replace(backup, destination)
        shutil.rmtree(staging, ignore_errors=True)
        raise

    if backup is not None:
        _remove_path(backup)


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def _write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, ensure_ascii=False)
        fh.flush()
        os.fsync(fh.fileno())


def _read_json(path: Path, location: str) -> Any:
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptStore(location, f"unreadable '{path.name}': {e}") from e
