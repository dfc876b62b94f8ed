"""
Vector Search Service

Embeds a query with the index-time embedding model and runs a cosine
similarity search against the Pinecone index.
"""
import logging
from typing import List, Optional

from perigon_rag.core.config import settings
from perigon_rag.core.pinecone_client import query_vectors
from perigon_rag.models.document import DocumentType, RetrievedDocument
from perigon_rag.services.embeddings import generate_embedding

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 8

METADATA_FIELDS = [
    "filename", "component", "category", "subcategory",
    "section", "type", "source", "path",
]


def to_retrieved_document(match: dict) -> RetrievedDocument:
    """Map a raw index match onto a RetrievedDocument with defaulted metadata."""
    raw = match.get("metadata") or {}
    metadata = {name: str(raw.get(name) or "") for name in METADATA_FIELDS}
    metadata["type"] = metadata["type"] or DocumentType.GENERAL_DOCS.value

    return RetrievedDocument(
        content=str(raw.get("content") or ""),
        metadata=metadata,
        score=float(match.get("score") or 0.0),
    )


class VectorSearchService:
    """
    Similarity search over the documentation index.

    The embedding model must match the one used at index time, otherwise the
    scores are meaningless.
    """

    def __init__(self, openai_client, index, embedding_model: Optional[str] = None):
        self.openai_client = openai_client
        self.index = index
        self.embedding_model = embedding_model or settings.EMBEDDING_MODEL

    def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> List[RetrievedDocument]:
        """
        Search for documents relevant to a query.

        Args:
            query: Free-text search query
            max_results: Maximum number of results

        Returns:
            Documents sorted by descending score. Any failure yields an empty
            list so callers can continue without context.
        """
        try:
            logger.info(f"Searching for: {query[:80]!r} (max: {max_results})")
            query_embedding = generate_embedding(
                self.openai_client, query, model=self.embedding_model
            )
            logger.debug(f"Embedding created ({len(query_embedding)} dimensions)")

            matches = query_vectors(self.index, query_embedding, top_k=max_results)
            logger.info(f"Index query successful ({len(matches)} matches)")

            documents = [to_retrieved_document(match) for match in matches]
        except Exception as e:
            logger.exception(f"Error searching documents: {e}")
            return []

        documents.sort(key=lambda doc: doc.score, reverse=True)
        return documents
