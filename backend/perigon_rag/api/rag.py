"""Code generation and search API backed by the documentation index."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from perigon_rag.core.dependencies import get_code_generator, get_search_service
from perigon_rag.schemas.rag import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    RetrievedDocumentSchema,
    SearchResponse,
)
from perigon_rag.services.generation import CodeGenerator, DEFAULT_CONTEXT_RESULTS
from perigon_rag.services.vector_search import DEFAULT_MAX_RESULTS, VectorSearchService

router = APIRouter()


def parse_limit(value: Optional[str], default: int) -> int:
    """Parse a result cap from a query string, falling back to the default."""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    return limit if limit > 0 else default


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_code(
    request: GenerateRequest,
    generator: CodeGenerator = Depends(get_code_generator),
):
    """Generate Perigon code for a prompt using retrieved documentation as context."""
    if not request.prompt:
        raise HTTPException(status_code=400, detail="Prompt is required")

    result = generator.generate(
        request.prompt,
        request.context,
        request.max_results or DEFAULT_CONTEXT_RESULTS,
    )
    return GenerateResponse(**result)


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}},
)
def search_documents(
    q: Optional[str] = None,
    max_results: Optional[str] = Query(default=None, alias="max"),
    search_service: VectorSearchService = Depends(get_search_service),
):
    """Semantic search over the documentation index."""
    if not q:
        raise HTTPException(status_code=400, detail='Query parameter "q" is required')

    results = search_service.search(q, parse_limit(max_results, DEFAULT_MAX_RESULTS))
    return SearchResponse(
        results=[RetrievedDocumentSchema(**doc.to_dict()) for doc in results]
    )
