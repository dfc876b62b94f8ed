import pytest
from conftest import FakeIndex, FakeOpenAI

from perigon_rag.services.indexing import EmbeddingBatcher
from perigon_rag.services.vectorizer import DocumentVectorizer, IndexInitializationError

BODY = "Query hooks wrap the API services and expose loading and error state. " * 3


def _vectorizer(tmp_path, index, openai_client=None):
    openai_client = openai_client or FakeOpenAI()
    batcher = EmbeddingBatcher(openai_client, index, sleep=lambda seconds: None)
    return DocumentVectorizer(openai_client, index, docs_dir=tmp_path, batcher=batcher)


def test_vectorize_replaces_index_contents(tmp_path):
    (tmp_path / "query-hooks").mkdir()
    (tmp_path / "query-hooks" / "useUser.md").write_text(f"# useUser\n\n{BODY}", encoding="utf-8")
    (tmp_path / "README.md").write_text(f"# Docs\n\n{BODY}", encoding="utf-8")

    index = FakeIndex()
    index.upsert([{"id": "stale", "values": [0.0], "metadata": {}}])

    report = _vectorizer(tmp_path, index).vectorize_documentation()

    assert index.deleted_all is True
    assert "stale" not in index.vectors
    assert report.vectors_upserted == 2
    stored = index.vectors["query-hooks-useUser-useuser-0-0"]
    assert stored["metadata"]["type"] == "query-hooks"
    assert stored["metadata"]["content"].startswith("# useUser")


def test_vectorize_with_no_documents(tmp_path):
    index = FakeIndex()

    assert _vectorizer(tmp_path, index).vectorize_documentation() is None
    assert index.upsert_calls == []


def test_vectorize_aborts_when_index_unavailable(tmp_path):
    openai_client = FakeOpenAI()

    with pytest.raises(IndexInitializationError):
        _vectorizer(tmp_path, FakeIndex(fail_stats=True), openai_client).vectorize_documentation()

    assert openai_client.embeddings.calls == []
