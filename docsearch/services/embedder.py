"""Embedder wrapping an embedding client with output validation and deadlines."""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from docsearch.clients import EmbeddingClient
from docsearch.domain import EmbeddingError, EmbeddingTimeout, ValidationError
from docsearch.utils import validate_finite_vector

logger = logging.getLogger(__name__)


class Embedder:
    """Maps text to fixed-dimension vectors through a pluggable client.

    Every vector leaving the embedder has been checked for the expected
    dimensionality and for finite values, so downstream index code never sees
    malformed provider output.
    """

    def __init__(self, client: EmbeddingClient, expected_dim: int | None = None) -> None:
        self._client = client
        self._dim = expected_dim or client.embedding_dim

    @property
    def dim(self) -> int:
        return self._dim

    def embed(self, text: str) -> list[float]:
        """Embed one text.

        Raises:
            EmbeddingError: If the client fails or returns a malformed vector
        """
        try:
            result = self._client.embed_text(text)
            vector = result.single_embedding
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding capability failed: {e}", e) from e

        return self._validate(vector)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts in one provider call.

        Raises:
            EmbeddingError: If the client fails, returns the wrong number of
                vectors, or any vector is malformed
        """
        if not texts:
            return []

        try:
            result = self._client.embed_texts(texts)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding capability failed: {e}", e) from e

        if len(result.embeddings) != len(texts):
            raise EmbeddingError(
                f"Expected {len(texts)} embeddings, got {len(result.embeddings)}"
            )
        return [self._validate(vector) for vector in result.embeddings]

    async def embed_with_timeout(self, text: str, timeout_ms: int) -> list[float]:
        """Embed one text, failing fast if the deadline passes first.

        The provider call runs in a daemon thread and races a timer. When the
        timer wins, the call is abandoned (not cancelled) and its eventual
        result is discarded; neither the event loop nor interpreter exit waits
        for it.

        Raises:
            EmbeddingTimeout: If ``timeout_ms`` elapses before the call returns
            EmbeddingError: If the call itself fails first
        """
        if timeout_ms <= 0:
            raise ValidationError(f"timeout_ms must be positive, got {timeout_ms}")

        start = time.perf_counter()
        try:
            vector = await asyncio.wait_for(
                run_in_daemon_thread(self.embed, text), timeout=timeout_ms / 1000
            )
        except asyncio.TimeoutError:
            logger.warning(f"Embedding call abandoned after {timeout_ms}ms")
            raise EmbeddingTimeout(timeout_ms) from None

        logger.debug(f"embed_query took {(time.perf_counter() - start) * 1000:.2f}ms")
        return vector

    def _validate(self, vector: list[float]) -> list[float]:
        """Check dimensionality and finiteness of a provider vector."""
        if not isinstance(vector, (list, tuple)):
            raise EmbeddingError(
                f"Malformed embedding: expected a list of floats, got {type(vector).__name__}"
            )
        if len(vector) != self._dim:
            raise EmbeddingError(
                f"Malformed embedding: expected dimension {self._dim}, got {len(vector)}"
            )
        try:
            validate_finite_vector(vector, "Embedding")
        except ValueError as e:
            raise EmbeddingError(f"Malformed embedding: {e}") from e
        return [float(x) for x in vector]


def run_in_daemon_thread(func: Callable[..., Any], *args: Any) -> asyncio.Future:
    """Run a blocking call on a daemon thread and expose it as a future.

    Unlike ``asyncio.to_thread``, the thread is not owned by the loop's
    default executor, so an abandoned call does not hold up
    ``asyncio.run`` shutdown or process exit.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def _settle(setter: Callable[[Any], None], value: Any) -> None:
        if not future.done():
            setter(value)

    def _worker() -> None:
        try:
            outcome = (future.set_result, func(*args))
        except Exception as e:
            outcome = (future.set_exception, e)

        try:
            loop.call_soon_threadsafe(_settle, *outcome)
        except RuntimeError:
            logger.debug("Event loop closed before an abandoned call finished")

    threading.Thread(target=_worker, name="embedder-call", daemon=True).start()
    return future
