"""OpenAI embeddings service, shared by indexing and retrieval."""
from typing import List, Optional

from openai import OpenAI

from perigon_rag.core.config import settings


def create_openai_client(api_key: Optional[str] = None) -> OpenAI:
    return OpenAI(api_key=api_key or settings.OPENAI_API_KEY)


def generate_embedding(client: OpenAI, text: str, model: Optional[str] = None) -> List[float]:
    """Generate embedding for a single text."""
    response = client.embeddings.create(
        model=model or settings.EMBEDDING_MODEL,
        input=text,
    )
    if not response.data or not response.data[0].embedding:
        raise ValueError("Failed to create embedding - no embedding data received")
    return response.data[0].embedding


def generate_embeddings(
    client: OpenAI,
    texts: List[str],
    model: Optional[str] = None,
) -> List[List[float]]:
    """Generate embeddings for multiple texts in one call, in input order."""
    response = client.embeddings.create(
        model=model or settings.EMBEDDING_MODEL,
        input=texts,
    )
    data = sorted(response.data, key=lambda item: item.index)
    if len(data) != len(texts):
        raise ValueError(f"Expected {len(texts)} embeddings, received {len(data)}")
    return [item.embedding for item in data]
