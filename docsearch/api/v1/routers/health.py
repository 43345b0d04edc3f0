"""Health check endpoints."""

from fastapi import APIRouter, Depends, status

from docsearch.api.v1.deps import get_query_service
from docsearch.schemas.health import HealthResponse
from docsearch.services import QueryService, ServiceState

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Report whether the vector store is loaded and queries are served",
)
async def health_check(
    query_service: QueryService = Depends(get_query_service),
) -> HealthResponse:
    """Health check endpoint."""
    service_status = query_service.status()
    return HealthResponse(
        status="ok" if service_status.state is ServiceState.READY else "unavailable",
        state=service_status.state.value,
        size=service_status.size,
        embedding_dim=service_status.embedding_dim,
        algorithm=service_status.algorithm,
        error=service_status.error,
    )
