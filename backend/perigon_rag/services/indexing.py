"""Batch embedding and upsert of document chunks into the vector index."""
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from perigon_rag.core.config import settings
from perigon_rag.core.pinecone_client import upsert_vectors
from perigon_rag.models.document import DocumentChunk
from perigon_rag.services.chunking import (
    MAX_TOKENS,
    MIN_CHUNK_LENGTH,
    estimate_token_count,
    truncate_text,
)
from perigon_rag.services.embeddings import generate_embeddings

logger = logging.getLogger(__name__)

BATCH_SIZE = 25
# Pinecone metadata size limit
MAX_METADATA_CONTENT_LENGTH = 40000
BATCH_DELAY_SECONDS = 1.0
INDIVIDUAL_DELAY_SECONDS = 0.2


@dataclass
class IndexingReport:
    total_batches: int = 0
    vectors_upserted: int = 0
    failed_chunk_ids: List[str] = field(default_factory=list)


def vector_metadata(chunk: DocumentChunk) -> dict:
    metadata = chunk.metadata.to_dict()
    metadata["content"] = chunk.content[:MAX_METADATA_CONTENT_LENGTH]
    return metadata


def prepare_chunks(chunks: List[DocumentChunk], max_tokens: int = MAX_TOKENS) -> List[DocumentChunk]:
    """Truncate chunks over the token budget and drop ones under the size floor."""
    valid_chunks = []
    for chunk in chunks:
        token_count = estimate_token_count(chunk.content)
        if token_count > max_tokens:
            logger.warning(
                f"Chunk {chunk.id} has {token_count} tokens (max: {max_tokens}), truncating..."
            )
            chunk.content = truncate_text(chunk.content, max_tokens * 3)

        if len(chunk.content.strip()) >= MIN_CHUNK_LENGTH:
            valid_chunks.append(chunk)

    logger.info(f"Processing {len(valid_chunks)} valid chunks (filtered from {len(chunks)})")
    return valid_chunks


class EmbeddingBatcher:
    """
    Embeds chunks in fixed-size batches and writes them to the index.

    A failing batch is retried one chunk at a time so that a single bad
    input only costs that chunk. Batches run serially with a fixed delay
    between them, which is the only rate limiting applied.
    """

    def __init__(
        self,
        openai_client,
        index,
        embedding_model: Optional[str] = None,
        batch_size: int = BATCH_SIZE,
        max_tokens: int = MAX_TOKENS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.openai_client = openai_client
        self.index = index
        self.embedding_model = embedding_model or settings.EMBEDDING_MODEL
        self.batch_size = batch_size
        self.max_tokens = max_tokens
        self.sleep = sleep

    def index_chunks(self, chunks: List[DocumentChunk]) -> IndexingReport:
        valid_chunks = prepare_chunks(chunks, self.max_tokens)
        report = IndexingReport(total_batches=math.ceil(len(valid_chunks) / self.batch_size))

        logger.info(
            f"Starting embedding generation for {len(valid_chunks)} chunks "
            f"in {report.total_batches} batches..."
        )

        for start in range(0, len(valid_chunks), self.batch_size):
            batch = valid_chunks[start:start + self.batch_size]
            batch_number = start // self.batch_size + 1

            token_counts = [estimate_token_count(chunk.content) for chunk in batch]
            logger.info(
                f"Processing batch {batch_number}/{report.total_batches} ({len(batch)} chunks)"
            )
            logger.debug(f"Token counts: {token_counts} (total: {sum(token_counts)})")

            try:
                report.vectors_upserted += self._upsert_batch(batch)
                logger.info(f"Batch {batch_number} completed - added {len(batch)} vectors")
            except Exception as e:
                logger.error(f"Error processing batch {batch_number}: {e}")
                logger.info(f"Attempting individual processing for batch {batch_number}...")
                self._process_individually(batch, report)
                continue

            if batch_number < report.total_batches:
                self.sleep(BATCH_DELAY_SECONDS)

        return report

    def _upsert_batch(self, batch: List[DocumentChunk]) -> int:
        embeddings = generate_embeddings(
            self.openai_client,
            [chunk.content for chunk in batch],
            model=self.embedding_model,
        )
        return upsert_vectors(
            self.index,
            ids=[chunk.id for chunk in batch],
            vectors=embeddings,
            metadatas=[vector_metadata(chunk) for chunk in batch],
        )

    def _process_individually(self, batch: List[DocumentChunk], report: IndexingReport) -> None:
        for position, chunk in enumerate(batch, 1):
            token_count = estimate_token_count(chunk.content)
            if token_count > self.max_tokens:
                logger.warning(f"Skipping chunk {chunk.id} - too large ({token_count} tokens)")
                report.failed_chunk_ids.append(chunk.id)
                continue

            try:
                report.vectors_upserted += self._upsert_batch([chunk])
            except Exception as e:
                logger.error(f"Failed to process individual chunk {chunk.id}: {e}")
                report.failed_chunk_ids.append(chunk.id)
                continue

            logger.info(f"Individual chunk {position}/{len(batch)} processed")
            self.sleep(INDIVIDUAL_DELAY_SECONDS)
