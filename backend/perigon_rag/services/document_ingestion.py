"""Walk the documentation tree and turn markdown files into chunks."""
import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from perigon_rag.models.document import ChunkMetadata, DocumentChunk, DocumentType
from perigon_rag.services.chunking import MIN_CHUNK_LENGTH, split_document_into_chunks

logger = logging.getLogger(__name__)

# Directory names that determine the document type
TYPE_DIRECTORIES = {
    "components": DocumentType.COMPONENT,
    "design-system": DocumentType.DESIGN_SYSTEM,
    "coding-patterns": DocumentType.CODING_PATTERNS,
    "app-architecture": DocumentType.APP_ARCHITECTURE,
    "services": DocumentType.SERVICES,
    "query-hooks": DocumentType.QUERY_HOOKS,
    "types": DocumentType.TYPES,
}


@dataclass
class WalkStats:
    files_processed: int = 0
    files_skipped: int = 0
    chunks_created: int = 0


def _path_parts(file_path: str) -> List[str]:
    return [
        part for part in file_path.replace("\\", "/").split("/")
        if part not in ("", ".", "..")
    ]


def get_document_type(file_path: str) -> DocumentType:
    """Determine document type from a path relative to the docs root."""
    parts = _path_parts(file_path)
    filename = parts[-1].lower() if parts else ""

    # README files win regardless of where they live
    if filename.startswith("readme"):
        return DocumentType.README

    for part in parts:
        doc_type = TYPE_DIRECTORIES.get(part.lower())
        if doc_type is not None:
            return doc_type

    return DocumentType.GENERAL_DOCS


def get_category_from_path(file_path: str) -> Tuple[str, Optional[str]]:
    """Return (category, subcategory) for a path relative to the docs root."""
    parts = _path_parts(file_path)

    if not parts:
        return "unknown", None
    if len(parts) == 1:
        return "root", None

    subcategory = "/".join(parts[1:-1]) or None
    return parts[0], subcategory


def is_document_file(filename: str) -> bool:
    lower = filename.lower()
    return lower.endswith(".md") or lower.startswith("readme")


def document_stem(filename: str) -> str:
    return re.sub(r"\.(md|txt)$", "", filename, flags=re.IGNORECASE)


def _unique_id(chunk_id: str, seen: Set[str]) -> str:
    candidate = chunk_id
    suffix = 1
    while candidate in seen:
        candidate = f"{chunk_id}-{suffix}"
        suffix += 1
    seen.add(candidate)
    return candidate


def read_all_documents(directory: Union[str, Path]) -> Tuple[List[DocumentChunk], WalkStats]:
    """
    Recursively read every markdown and README file under a directory.

    Files that cannot be read, and files too short to carry retrieval signal,
    are logged and counted as skipped; the walk never aborts on one bad file.

    Returns:
        - List[DocumentChunk]: chunks in walk order, ids unique within the run
        - WalkStats: processed/skipped/chunk counts
    """
    root = Path(directory)
    chunks: List[DocumentChunk] = []
    stats = WalkStats()
    seen_ids: Set[str] = set()

    def process_path(current: Path) -> None:
        try:
            mode = current.stat().st_mode
            if stat.S_ISDIR(mode):
                logger.info(f"Processing directory: {current.relative_to(root).as_posix()}")
                for entry in sorted(current.iterdir()):
                    process_path(entry)
                return

            if not stat.S_ISREG(mode) or not is_document_file(current.name):
                return

            relative_path = current.relative_to(root).as_posix()
            content = current.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error accessing {current}: {e}")
            stats.files_skipped += 1
            return

        if len(content.strip()) < MIN_CHUNK_LENGTH:
            logger.warning(f"Skipping {relative_path} - too short")
            stats.files_skipped += 1
            return

        document_type = get_document_type(relative_path)
        category, subcategory = get_category_from_path(relative_path)

        document_chunks = split_document_into_chunks(
            content,
            ChunkMetadata(
                source=os.path.abspath(current),
                filename=document_stem(current.name),
                category=category,
                subcategory=subcategory,
                type=document_type,
                path=relative_path,
            ),
        )
        for chunk in document_chunks:
            chunk.id = _unique_id(chunk.id, seen_ids)

        chunks.extend(document_chunks)
        stats.files_processed += 1
        logger.info(
            f"Processed: {relative_path} "
            f"({len(document_chunks)} chunks, type: {document_type.value})"
        )

    process_path(root)
    stats.chunks_created = len(chunks)

    logger.info("Processing Summary:")
    logger.info(f"  Files processed: {stats.files_processed}")
    logger.info(f"  Files skipped: {stats.files_skipped}")
    logger.info(f"  Total chunks created: {stats.chunks_created}")

    return chunks, stats
