"""Full vectorization run: clear the index, walk the docs, embed and upsert."""
import logging
from collections import Counter
from pathlib import Path
from typing import Optional, Union

from perigon_rag.core.config import settings
from perigon_rag.core.pinecone_client import clear_index, describe_index_stats
from perigon_rag.services.document_ingestion import read_all_documents
from perigon_rag.services.indexing import EmbeddingBatcher, IndexingReport

logger = logging.getLogger(__name__)


class IndexInitializationError(RuntimeError):
    """Raised when the index cannot be inspected or cleared before a run."""


class DocumentVectorizer:
    """Destructive re-index of the documentation tree into the vector index."""

    def __init__(
        self,
        openai_client,
        index,
        docs_dir: Optional[Union[str, Path]] = None,
        batcher: Optional[EmbeddingBatcher] = None,
    ):
        self.index = index
        self.docs_dir = Path(docs_dir) if docs_dir else Path.cwd() / settings.DOCS_DIR
        self.batcher = batcher or EmbeddingBatcher(openai_client, index)

    def initialize(self) -> None:
        try:
            clear_index(self.index)
        except Exception as e:
            logger.error(f"Error initializing index: {e}")
            raise IndexInitializationError(
                "Failed to initialize Pinecone index. "
                "Make sure the index exists and is properly configured."
            ) from e
        logger.info(f"Initialized index: {settings.PINECONE_INDEX}")

    def vectorize_documentation(self) -> Optional[IndexingReport]:
        """Run the whole pipeline. Returns None when there was nothing to index."""
        self.initialize()

        logger.info(f"Reading all documents from: {self.docs_dir}")
        chunks, _ = read_all_documents(self.docs_dir)

        if not chunks:
            logger.warning("No documents found to vectorize!")
            return None

        type_counts = Counter(chunk.metadata.type.value for chunk in chunks)
        logger.info("Document categories found:")
        for doc_type, count in sorted(type_counts.items()):
            logger.info(f"  {doc_type}: {count} chunks")

        report = self.batcher.index_chunks(chunks)

        try:
            total = describe_index_stats(self.index)["totalRecordCount"]
            logger.info(f"Total vectors in index: {total}")
        except Exception as e:
            logger.warning(f"Could not read final index stats: {e}")

        logger.info(
            f"Upserted {report.vectors_upserted} of {len(chunks)} chunks "
            f"({len(report.failed_chunk_ids)} failed)"
        )
        return report
