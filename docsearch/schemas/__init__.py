"""API schemas for the search service.

This package contains Pydantic models for API responses. These schemas serve
as the contract between the API and its clients.
"""

from .errors import ErrorDetail, ErrorResponse
from .health import HealthResponse
from .search import SearchHit

__all__ = [
    # Errors
    "ErrorDetail",
    "ErrorResponse",
    # Health
    "HealthResponse",
    # Search
    "SearchHit",
]
