"""Header-aware, token-bounded chunking for markdown documents."""
import math
import re
from dataclasses import replace
from typing import List

from perigon_rag.models.document import ChunkMetadata, DocumentChunk

# Conservative limit below the 8192-token ceiling of the embedding model
MAX_TOKENS = 7000
# Ceiling for a single sentence that has to be hard-truncated
MAX_CHUNK_LENGTH = 20000
MIN_CHUNK_LENGTH = 50
MIN_SECTION_LENGTH = 100

HEADER_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
SENTENCE_PATTERN = re.compile(r"[.!?]+")
PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")


def estimate_token_count(text: str) -> int:
    """Rough estimate: ~4 characters per token for English text."""
    return math.ceil(len(text) / 4)


def truncate_text(text: str, limit: int) -> str:
    return text[:limit] + "..."


def slugify_section(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "section"


def chunk_id_prefix(metadata: ChunkMetadata) -> str:
    parts = [metadata.category]
    if metadata.subcategory:
        parts.append(metadata.subcategory.replace("/", "-"))
    parts.append(metadata.filename)
    return "-".join(parts)


def _split_sentences(paragraph: str, max_tokens: int, chunks: List[str]) -> str:
    """Greedily pack sentences into chunks; returns the unflushed remainder."""
    hard_limit = min(max_tokens * 3, MAX_CHUNK_LENGTH)
    buffer = ""

    for sentence in SENTENCE_PATTERN.split(paragraph):
        sentence = sentence.strip()
        if not sentence:
            continue

        candidate = f"{buffer}. {sentence}" if buffer else sentence
        if estimate_token_count(candidate + ".") <= max_tokens:
            buffer = candidate
            continue

        if buffer:
            chunks.append(buffer + ".")
            buffer = ""

        if estimate_token_count(sentence + ".") <= max_tokens:
            buffer = sentence
        else:
            # No boundary left to split on (e.g. minified code)
            chunks.append(truncate_text(sentence, hard_limit))

    return buffer + "." if buffer else ""


def split_large_content(content: str, max_tokens: int = MAX_TOKENS) -> List[str]:
    """
    Split a block of text so that every piece fits the token budget.

    Paragraphs are packed greedily; a paragraph that is too large on its own
    is packed sentence by sentence, and a sentence that is still too large is
    truncated. Fragments shorter than MIN_CHUNK_LENGTH are dropped.
    """
    if estimate_token_count(content) <= max_tokens:
        content = content.strip()
        return [content] if content else []

    chunks: List[str] = []
    current = ""

    for paragraph in PARAGRAPH_BREAK.split(content):
        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if estimate_token_count(candidate) <= max_tokens:
            current = candidate
            continue

        if current.strip():
            chunks.append(current.strip())
        current = ""

        if estimate_token_count(paragraph) <= max_tokens:
            current = paragraph
        else:
            current = _split_sentences(paragraph, max_tokens, chunks)

    if current.strip():
        chunks.append(current.strip())

    return [chunk for chunk in chunks if len(chunk) >= MIN_CHUNK_LENGTH]


def split_document_into_chunks(
    content: str,
    base_metadata: ChunkMetadata,
) -> List[DocumentChunk]:
    """Split one document into header-bounded, token-bounded chunks."""
    clean_content = content.replace("\r\n", "\n").strip()
    prefix = chunk_id_prefix(base_metadata)

    # [preamble, level, title, body, level, title, body, ...]
    sections = HEADER_PATTERN.split(clean_content)

    if len(sections) <= 3:
        # No header structure, split by token limit only
        return [
            DocumentChunk(
                id=f"{prefix}-part-{index}",
                content=piece,
                metadata=replace(base_metadata, section="full-document"),
            )
            for index, piece in enumerate(split_large_content(clean_content))
        ]

    chunks: List[DocumentChunk] = []
    chunk_index = 0

    def flush(title: str, text: str) -> None:
        nonlocal chunk_index
        slug = slugify_section(title)
        for sub_index, piece in enumerate(split_large_content(text.strip())):
            chunks.append(DocumentChunk(
                id=f"{prefix}-{slug}-{chunk_index}-{sub_index}",
                content=piece,
                metadata=replace(base_metadata, section=slug),
            ))
        chunk_index += 1

    current_title = "introduction"
    current_content = sections[0]

    for i in range(1, len(sections), 3):
        level, title, body = sections[i], sections[i + 1], sections[i + 2]

        if len(current_content.strip()) > MIN_SECTION_LENGTH:
            flush(current_title, current_content)

        current_title = title.strip()
        current_content = f"{level} {current_title}\n\n{body.strip()}"

    # A short single-section document still yields one chunk
    if len(current_content.strip()) > MIN_SECTION_LENGTH or not chunks:
        flush(current_title, current_content)

    return chunks
