"""Request-scoped access to the clients built at application startup."""
from dataclasses import dataclass

from fastapi import Request

from perigon_rag.core.config import Settings
from perigon_rag.core.pinecone_client import create_pinecone_client, get_index
from perigon_rag.services.embeddings import create_openai_client
from perigon_rag.services.generation import CodeGenerator, create_anthropic_client
from perigon_rag.services.vector_search import VectorSearchService


@dataclass
class RAGServices:
    index: object
    search_service: VectorSearchService
    code_generator: CodeGenerator


def build_services(settings: Settings) -> RAGServices:
    """Validate configuration and construct every upstream client once."""
    settings.require("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "PINECONE_API_KEY")

    openai_client = create_openai_client(settings.OPENAI_API_KEY)
    index = get_index(create_pinecone_client(settings.PINECONE_API_KEY), settings.PINECONE_INDEX)
    search_service = VectorSearchService(openai_client, index, settings.EMBEDDING_MODEL)
    code_generator = CodeGenerator(
        create_anthropic_client(settings.ANTHROPIC_API_KEY),
        search_service,
        model=settings.ANTHROPIC_MODEL,
        max_tokens=settings.GENERATION_MAX_TOKENS,
        temperature=settings.GENERATION_TEMPERATURE,
    )
    return RAGServices(index=index, search_service=search_service, code_generator=code_generator)


def get_services(request: Request) -> RAGServices:
    return request.app.state.services


def get_index_handle(request: Request):
    return get_services(request).index


def get_search_service(request: Request) -> VectorSearchService:
    return get_services(request).search_service


def get_code_generator(request: Request) -> CodeGenerator:
    return get_services(request).code_generator
