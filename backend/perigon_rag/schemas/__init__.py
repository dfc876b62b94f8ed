from perigon_rag.schemas.rag import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
    RetrievedDocumentSchema,
    SearchResponse,
)

__all__ = [
    "GenerateRequest", "GenerateResponse",
    "RetrievedDocumentSchema", "SearchResponse",
    "HealthResponse", "ErrorResponse",
]
