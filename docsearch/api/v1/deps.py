"""Dependency injection providers for API endpoints.

The query service and settings are created once by the application factory
and stored on ``app.state``; these providers hand them to endpoints so tests
can build an app around their own instances.
"""

from fastapi import Request

from docsearch.core.config import Settings
from docsearch.services import QueryService


def get_query_service(request: Request) -> QueryService:
    """Get the query service owned by the running application."""
    return request.app.state.query_service


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings
