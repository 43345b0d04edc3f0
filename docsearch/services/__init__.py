"""Service layer for ingestion and query serving.

Services orchestrate the domain pieces (chunking, embedding, indexing and
persistence) and are the only objects the API and CLI talk to.
"""

from .embedder import Embedder
from .ingestion_service import IngestionPipeline, IngestionReport
from .query_service import QueryService, SearchMatch, ServiceState, ServiceStatus

__all__ = [
    "Embedder",
    "IngestionPipeline",
    "IngestionReport",
    "QueryService",
    "SearchMatch",
    "ServiceState",
    "ServiceStatus",
]
