from conftest import FakeIndex, FakeOpenAI

from perigon_rag.models.document import ChunkMetadata, DocumentChunk, DocumentType
from perigon_rag.services.indexing import (
    BATCH_DELAY_SECONDS,
    INDIVIDUAL_DELAY_SECONDS,
    EmbeddingBatcher,
    prepare_chunks,
    vector_metadata,
)


def _chunk(i: int, content: str = None) -> DocumentChunk:
    return DocumentChunk(
        id=f"guides-layout-part-{i}",
        content=content or f"Chunk {i}: " + "guidance on Perigon layout primitives. " * 3,
        metadata=ChunkMetadata(
            source="/srv/docs/guides/layout.md",
            filename="layout",
            category="guides",
            type=DocumentType.GENERAL_DOCS,
            path="guides/layout.md",
        ),
    )


def test_oversized_chunk_is_truncated_before_batch_call(no_sleep):
    sleep, _ = no_sleep
    openai_client, index = FakeOpenAI(), FakeIndex()
    chunks = [_chunk(i) for i in range(25)]
    chunks[12] = _chunk(12, "a" * 36000)  # 9000 estimated tokens

    report = EmbeddingBatcher(openai_client, index, sleep=sleep).index_chunks(chunks)

    calls = openai_client.embeddings.calls
    assert len(calls) == 1
    assert len(calls[0]["input"]) == 25
    assert calls[0]["input"][12] == "a" * 21000 + "..."
    assert calls[0]["model"] == "text-embedding-3-small"
    assert report.vectors_upserted == 25
    assert len(index.upsert_calls) == 1


def test_failed_batch_falls_back_to_individual_chunks(no_sleep):
    sleep, delays = no_sleep
    openai_client = FakeOpenAI(fail_when=lambda texts: any("POISON" in t for t in texts))
    index = FakeIndex()
    chunks = [_chunk(i) for i in range(5)]
    chunks[2] = _chunk(2, "POISON " * 20)

    report = EmbeddingBatcher(openai_client, index, sleep=sleep).index_chunks(chunks)

    assert report.vectors_upserted == 4
    assert report.failed_chunk_ids == ["guides-layout-part-2"]
    assert set(index.vectors) == {f"guides-layout-part-{i}" for i in (0, 1, 3, 4)}
    # One batch call, then one call per chunk
    assert len(openai_client.embeddings.calls) == 6
    assert delays == [INDIVIDUAL_DELAY_SECONDS] * 4


def test_upsert_failure_isolates_single_chunk(no_sleep):
    sleep, _ = no_sleep
    index = FakeIndex(fail_upsert_ids={"guides-layout-part-1"})
    chunks = [_chunk(i) for i in range(3)]

    report = EmbeddingBatcher(FakeOpenAI(), index, sleep=sleep).index_chunks(chunks)

    assert report.failed_chunk_ids == ["guides-layout-part-1"]
    assert set(index.vectors) == {"guides-layout-part-0", "guides-layout-part-2"}


def test_blank_chunk_is_dropped_and_rest_indexed(no_sleep):
    sleep, _ = no_sleep
    index = FakeIndex()
    chunks = [_chunk(i) for i in range(4)]
    chunks[1] = _chunk(1, " " * 80)

    report = EmbeddingBatcher(FakeOpenAI(), index, sleep=sleep).index_chunks(chunks)

    assert report.vectors_upserted == 3
    assert "guides-layout-part-1" not in index.vectors


def test_batches_are_serial_with_delay_between(no_sleep):
    sleep, delays = no_sleep
    openai_client, index = FakeOpenAI(), FakeIndex()

    report = EmbeddingBatcher(openai_client, index, sleep=sleep).index_chunks(
        [_chunk(i) for i in range(60)]
    )

    assert report.total_batches == 3
    assert [len(call["input"]) for call in openai_client.embeddings.calls] == [25, 25, 10]
    assert delays == [BATCH_DELAY_SECONDS] * 2
    assert len(index.vectors) == 60


def test_vector_metadata_carries_content_without_nulls():
    chunk = _chunk(0)

    metadata = vector_metadata(chunk)

    assert metadata["content"] == chunk.content
    assert metadata["type"] == "general-docs"
    assert metadata["section"] == "full-document"
    assert "subcategory" not in metadata
    assert None not in metadata.values()


def test_prepare_chunks_filters_short_content():
    chunks = [_chunk(0), _chunk(1, "tiny")]

    assert [c.id for c in prepare_chunks(chunks)] == ["guides-layout-part-0"]
