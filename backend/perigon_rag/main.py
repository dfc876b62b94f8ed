import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from perigon_rag.api import rag
from perigon_rag.core.config import settings
from perigon_rag.core.cors import CORSHeadersMiddleware, cors_headers
from perigon_rag.core.dependencies import build_services, get_index_handle
from perigon_rag.core.pinecone_client import check_index_health
from perigon_rag.schemas.rag import HealthResponse
from perigon_rag.services.generation import GenerationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing API keys abort startup
    app.state.services = build_services(settings)
    logger.info(f"RAG Server running on http://localhost:{settings.PORT}")
    logger.info(f"Vector search endpoint: http://localhost:{settings.PORT}/api/search")
    logger.info(f"Code generation endpoint: http://localhost:{settings.PORT}/api/generate")
    logger.info(f"Health check: http://localhost:{settings.PORT}/health")
    yield


app = FastAPI(
    title="Perigon RAG API",
    description="Retrieval-augmented React/TypeScript code generation from Perigon documentation",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(CORSHeadersMiddleware, allow_origins=settings.CORS_ORIGINS)

# Include routers
app.include_router(rag.router, prefix="/api", tags=["RAG"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(GenerationError)
async def generation_exception_handler(request: Request, exc: GenerationError):
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Runs outside the CORS middleware, so the headers are added here
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
        headers=cors_headers(settings.CORS_ORIGINS, request.headers.get("origin")),
    )


@app.get("/health", response_model=HealthResponse)
def health_check(index=Depends(get_index_handle)):
    return check_index_health(index)


def run():
    logging.basicConfig(level=settings.LOG_LEVEL)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
