import logging
from typing import Any, Dict, List, Optional

from pinecone import Pinecone, ServerlessSpec

from perigon_rag.core.config import settings

logger = logging.getLogger(__name__)


def create_pinecone_client(api_key: Optional[str] = None) -> Pinecone:
    """Build a Pinecone client from an explicit key or the configured one."""
    return Pinecone(api_key=api_key or settings.PINECONE_API_KEY)


def get_index(client: Pinecone, index_name: Optional[str] = None):
    """Get a handle on the named index (defaults to the configured index)."""
    return client.Index(index_name or settings.PINECONE_INDEX)


def describe_index_stats(index) -> Dict[str, Any]:
    """Return index stats as a JSON-serializable dict."""
    stats = index.describe_index_stats()
    namespaces = getattr(stats, "namespaces", None) or {}
    return {
        "dimension": getattr(stats, "dimension", None),
        "indexFullness": getattr(stats, "index_fullness", None),
        "totalRecordCount": getattr(stats, "total_vector_count", 0) or 0,
        "namespaces": {
            name: {"recordCount": getattr(summary, "vector_count", 0)}
            for name, summary in namespaces.items()
        },
    }


def check_index_health(index) -> dict:
    """Check index connectivity; failures are reported, never raised."""
    try:
        return {
            "status": "healthy",
            "indexStats": describe_index_stats(index),
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "indexStats": None,
        }


def clear_index(index) -> int:
    """Delete every vector in the index. Returns the count found beforehand."""
    stats = describe_index_stats(index)
    total = stats["totalRecordCount"]
    logger.info(f"Index stats: {total} vectors")

    if total > 0:
        logger.info("Clearing existing vectors from index...")
        index.delete(delete_all=True)
        logger.info("Cleared existing vectors from index")
    else:
        logger.info("Index is empty, no need to clear")
    return total


def upsert_vectors(
    index,
    ids: List[str],
    vectors: List[List[float]],
    metadatas: List[dict],
) -> int:
    """Upsert vectors with metadata. Errors propagate to the caller."""
    records = [
        {"id": id_, "values": values, "metadata": metadata}
        for id_, values, metadata in zip(ids, vectors, metadatas)
    ]
    index.upsert(vectors=records)
    return len(records)


def query_vectors(index, query_vector: List[float], top_k: int = 8) -> List[dict]:
    """Nearest-neighbour query returning metadata but not vector values."""
    results = index.query(
        vector=query_vector,
        top_k=top_k,
        include_metadata=True,
        include_values=False,
    )
    return [
        {
            "id": match.id,
            "score": match.score,
            "metadata": match.metadata or {},
        }
        for match in (results.matches or [])
    ]


def ensure_index(
    client: Pinecone,
    index_name: Optional[str] = None,
    dimension: Optional[int] = None,
    metric: str = "cosine",
) -> bool:
    """Create the index if it does not exist. Returns True when it was created."""
    index_name = index_name or settings.PINECONE_INDEX
    existing = client.list_indexes().names()
    logger.info(f"Existing indexes: {list(existing)}")

    if index_name in existing:
        return False

    client.create_index(
        name=index_name,
        dimension=dimension or settings.EMBEDDING_DIMENSION,
        metric=metric,
        spec=ServerlessSpec(
            cloud=settings.PINECONE_CLOUD,
            region=settings.PINECONE_REGION,
        ),
    )
    logger.info(f"Created Pinecone index: {index_name}")
    return True
