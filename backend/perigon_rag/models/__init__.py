from perigon_rag.models.document import (
    ChunkMetadata,
    DocumentChunk,
    DocumentType,
    RetrievedDocument,
)

__all__ = ["ChunkMetadata", "DocumentChunk", "DocumentType", "RetrievedDocument"]
