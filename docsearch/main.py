"""FastAPI application factory and main entry point."""

import asyncio
import logging
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from time import perf_counter

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from docsearch.api.v1.errors import ERROR_HANDLERS
from docsearch.api.v1.routers import health_router, search_router
from docsearch.clients import create_embedding_client
from docsearch.core.config import Settings, settings
from docsearch.core.logging import log_request_info, setup_logging
from docsearch.services import Embedder, QueryService, ServiceState

logger = logging.getLogger(__name__)


def create_embedder(app_settings: Settings) -> Embedder:
    """Build the embedder configured by ``app_settings``."""
    client = create_embedding_client(
        api_key=app_settings.openai_api_key,
        model=app_settings.openai_model,
        base_url=app_settings.openai_base_url,
        embedding_dim=app_settings.embedding_dim,
        timeout=app_settings.openai_request_timeout,
    )
    return Embedder(client, expected_dim=app_settings.embedding_dim)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager."""
    # Startup
    setup_logging()
    query_service: QueryService = app.state.query_service
    load_task = None
    if query_service.state is ServiceState.LOADING and not query_service.load_started:
        # Requests are accepted while the store loads; they get 500 until READY
        load_task = asyncio.create_task(
            query_service.initialize(app.state.settings.store_path)
        )
    yield
    # Shutdown
    if load_task is not None and not load_task.done():
        load_task.cancel()


def create_app(
    app_settings: Settings | None = None,
    query_service: QueryService | None = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    app_settings = app_settings or settings
    app = FastAPI(
        title=app_settings.api_title,
        description=app_settings.api_description,
        version=app_settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.query_service = query_service or QueryService(create_embedder(app_settings))

    # Add request logging middleware
    @app.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Log all HTTP requests with timing and unique request ID."""

        req_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        start_time = perf_counter()

        response: Response = await call_next(request)

        duration_ms = (perf_counter() - start_time) * 1000
        response.headers["x-request-id"] = req_id

        log_request_info(
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            request_id=req_id,
        )

        return response

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
    )

    # Register error handlers
    for exception_class, handler in ERROR_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)

    # Include routers
    app.include_router(health_router, prefix=app_settings.api_prefix)
    app.include_router(search_router, prefix=app_settings.api_prefix)

    return app


# Create app instance
app = create_app()


def main() -> None:
    """Main entry point for running the application."""

    uvicorn.run(
        "docsearch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
