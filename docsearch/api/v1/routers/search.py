"""Similarity search endpoint."""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.exceptions import RequestValidationError

from docsearch.api.v1.deps import get_query_service, get_settings
from docsearch.core.config import Settings
from docsearch.domain import ValidationError
from docsearch.schemas import ErrorResponse, SearchHit
from docsearch.services import QueryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.get(
    "/search",
    response_model=list[SearchHit],
    status_code=status.HTTP_200_OK,
    summary="Search by text query",
    description="Embed the query text and return the most similar chunks, best first.",
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Missing or blank query, or invalid k",
        },
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "Store not loaded, embedding failure or timeout",
        },
    },
)
async def search(
    q: str | None = Query(None, description="Query text"),
    k: int | None = Query(
        None, description="Number of results to return (default and upper bound from settings)"
    ),
    query_service: QueryService = Depends(get_query_service),
    app_settings: Settings = Depends(get_settings),
) -> list[SearchHit]:
    """Search for chunks similar to the query text."""
    if q is None or not q.strip():
        raise ValidationError("Query parameter 'q' is required")

    if k is None:
        k = app_settings.default_k
    elif not 1 <= k <= app_settings.max_k:
        raise RequestValidationError(
            [
                {
                    "type": "value_error",
                    "loc": ("query", "k"),
                    "msg": f"k must be between 1 and {app_settings.max_k}",
                    "input": k,
                }
            ]
        )

    matches = await query_service.search(q, k, app_settings.embedding_timeout_ms)
    logger.info(f"Search returned {len(matches)} results (k={k})")
    return [SearchHit.from_match(match) for match in matches]
