"""Command line entry points: ingest documents, query a store, serve the API."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from docsearch.core.config import settings
from docsearch.core.logging import setup_logging
from docsearch.domain import DomainError
from docsearch.indexes import IndexAlgo
from docsearch.loaders import load_directory
from docsearch.main import create_embedder
from docsearch.services import IngestionPipeline, QueryService, ServiceState

app = typer.Typer(add_completion=False, help="Document similarity search CLI")

logger = logging.getLogger("docsearch.cli")


def _index_params(algorithm: IndexAlgo) -> dict:
    return settings.hnsw_params() if algorithm is IndexAlgo.HNSW else {}


@app.command()
def ingest(
    data_path: Optional[Path] = typer.Option(
        None, "--data-path", help="Directory of .md/.txt documents (default: DATA_PATH)"
    ),
    store_path: Optional[Path] = typer.Option(
        None, "--store-path", help="Store directory to (re)write (default: STORE_PATH)"
    ),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Max characters per chunk"),
    chunk_overlap: Optional[int] = typer.Option(
        None, "--chunk-overlap", help="Characters shared by consecutive chunks"
    ),
    algorithm: IndexAlgo = typer.Option(
        IndexAlgo(settings.index_algorithm), "--algorithm", help="Neighbour search algorithm"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Load documents, chunk and embed them, and write a fresh vector store.
    """
    setup_logging("DEBUG" if verbose else settings.log_level)

    data_path = data_path or Path(settings.data_path)
    store_path = store_path or Path(settings.store_path)
    chunk_size = chunk_size if chunk_size is not None else settings.chunk_size
    chunk_overlap = chunk_overlap if chunk_overlap is not None else settings.chunk_overlap

    try:
        documents = load_directory(data_path)
    except FileNotFoundError as e:
        typer.secho(f"FAILED: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    pipeline = IngestionPipeline(
        create_embedder(settings),
        algorithm=algorithm,
        index_params=_index_params(algorithm),
        batch_size=settings.embedding_batch_size,
    )
    try:
        report = pipeline.run(documents, chunk_size, chunk_overlap, store_path)
    except DomainError as e:
        logger.error(f"Ingestion failed: {e}")
        typer.secho(f"FAILED [{e.code}] {e.message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.secho("OK", fg=typer.colors.GREEN)
    typer.echo(f"Documents: {report.documents_processed}")
    typer.echo(f"Chunks:    {report.chunks_indexed}")
    typer.echo(f"Store:     {report.destination}")
    typer.echo(f"Duration:  {report.duration_s}s")


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query (natural language)"),
    k: int = typer.Option(settings.default_k, "--k", "-k", min=1, help="Number of results"),
    store_path: Optional[Path] = typer.Option(
        None, "--store-path", help="Store directory to query (default: STORE_PATH)"
    ),
    timeout_ms: int = typer.Option(
        settings.embedding_timeout_ms, "--timeout-ms", min=1, help="Query embedding deadline"
    ),
) -> None:
    """
    Run one similarity search against a persisted store.
    """
    setup_logging(settings.log_level)

    service = QueryService(create_embedder(settings))

    async def _run():
        state = await service.initialize(store_path or Path(settings.store_path))
        if state is not ServiceState.READY:
            return None
        return await service.search(query, k, timeout_ms)

    try:
        results = asyncio.run(_run())
    except DomainError as e:
        typer.secho(f"FAILED [{e.code}] {e.message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if results is None:
        typer.secho(f"FAILED to load store: {service.error}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if not results:
        typer.echo("No results found.")
        return

    for rank, match in enumerate(results, start=1):
        typer.echo("=" * 80)
        typer.echo(f"Rank: {rank} | Score: {match.score:.4f}")
        typer.echo(f"Source: {match.metadata.get('source')}")
        typer.echo()
        typer.echo(match.content)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HOST)"),
    port: Optional[int] = typer.Option(None, help="Port (default: PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """
    Serve the HTTP search API.
    """
    uvicorn.run(
        "docsearch.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload or settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
