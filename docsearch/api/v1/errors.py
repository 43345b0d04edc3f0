"""Error handlers for mapping domain errors to HTTP responses.

This module contains exception handlers that translate domain-specific
exceptions into appropriate HTTP responses with consistent error formatting.
Server-side failures never leak stack traces; they are logged instead.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docsearch.domain import (
    DomainError,
    EmbeddingError,
    EmbeddingTimeout,
    IndexUnavailable,
)
from docsearch.domain import (
    ValidationError as DomainValidationError,
)
from docsearch.schemas import ErrorResponse

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def _create_error_response(
    status_code: int,
    error_code: str,
    message: str,
    field: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Helper to create consistent error responses.

    Args:
        status_code: HTTP status code
        error_code: Error code string
        message: Error message
        field: Field name if error is field-specific
        headers: Extra response headers

    Returns:
        JSONResponse with consistent error format
    """
    error_response = ErrorResponse(
        error={
            "code": error_code,
            "message": message,
            "field": field,
        }
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(exclude_none=True),
        headers=headers,
    )


def _create_validation_response(message: str, field: str | None = None) -> JSONResponse:
    """Helper to create 400 validation error responses."""
    return _create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        error_code="VALIDATION_ERROR",
        message=message,
        field=field,
    )


async def domain_validation_error_handler(
    request: Request, exc: DomainValidationError
) -> JSONResponse:
    """Handle domain ValidationError exceptions."""
    return _create_validation_response(str(exc))


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI query/body validation errors."""
    # Extract the first error for simplicity
    first_error = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(loc) for loc in first_error.get("loc", []))
    message = first_error.get("msg", "Validation error")

    return _create_validation_response(message, field if field else None)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle routing errors (unknown path, wrong verb) in the common format."""
    return _create_error_response(
        status_code=exc.status_code,
        error_code=_HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        message=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def index_unavailable_handler(
    request: Request, exc: IndexUnavailable
) -> JSONResponse:
    """Handle queries arriving before the store is loaded (or after it failed)."""
    logger.warning(f"Rejected {request.url.path}: {exc.message}")
    return _create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code=exc.code,
        message="Vector store not loaded",
    )


async def embedding_timeout_handler(
    request: Request, exc: EmbeddingTimeout
) -> JSONResponse:
    """Handle EmbeddingTimeout exceptions."""
    logger.error(f"Embedding timed out after {exc.timeout_ms}ms")
    return _create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code=exc.code,
        message="Embedding query timed out",
    )


async def embedding_error_handler(
    request: Request, exc: EmbeddingError
) -> JSONResponse:
    """Handle EmbeddingError exceptions."""
    logger.error(f"Embedding failed: {exc.message}")
    return _create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code=exc.code,
        message="Failed to embed query",
    )


async def generic_domain_error_handler(
    request: Request, exc: DomainError
) -> JSONResponse:
    """Handle generic domain errors."""
    logger.error(f"Domain error on {request.url.path}: {exc}")
    return _create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code=exc.code,
        message=str(exc),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return _create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
    )


# Error handler registry for easy registration
ERROR_HANDLERS = {
    DomainValidationError: domain_validation_error_handler,
    RequestValidationError: request_validation_error_handler,
    StarletteHTTPException: http_exception_handler,
    IndexUnavailable: index_unavailable_handler,
    EmbeddingTimeout: embedding_timeout_handler,
    EmbeddingError: embedding_error_handler,
    DomainError: generic_domain_error_handler,
    Exception: generic_exception_handler,
}
