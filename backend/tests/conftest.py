from types import SimpleNamespace
from typing import Callable, List, Optional

import pytest


class FakeEmbeddings:
    """Stands in for ``OpenAI().embeddings``; records every call."""

    def __init__(self, fail_when: Optional[Callable[[List[str]], bool]] = None, dimension: int = 4):
        self.fail_when = fail_when
        self.dimension = dimension
        self.calls = []

    def create(self, model, input):
        texts = [input] if isinstance(input, str) else list(input)
        self.calls.append({"model": model, "input": texts})
        if self.fail_when and self.fail_when(texts):
            raise RuntimeError("invalid input")
        return SimpleNamespace(data=[
            SimpleNamespace(index=i, embedding=[float(len(text))] * self.dimension)
            for i, text in enumerate(texts)
        ])


class FakeOpenAI:
    def __init__(self, **kwargs):
        self.embeddings = FakeEmbeddings(**kwargs)


class FakeIndex:
    """In-memory stand-in for a Pinecone index handle."""

    def __init__(self, matches=None, fail_stats=False, fail_query=False, fail_upsert_ids=()):
        self.vectors = {}
        self.upsert_calls = []
        self.deleted_all = False
        self.matches = matches or []
        self.fail_stats = fail_stats
        self.fail_query = fail_query
        self.fail_upsert_ids = set(fail_upsert_ids)
        self.query_kwargs = None

    def describe_index_stats(self):
        if self.fail_stats:
            raise ConnectionError("index unreachable")
        count = len(self.vectors)
        return SimpleNamespace(
            dimension=1536,
            index_fullness=0.0,
            total_vector_count=count,
            namespaces={"": SimpleNamespace(vector_count=count)} if count else {},
        )

    def delete(self, delete_all=False):
        if delete_all:
            self.vectors.clear()
            self.deleted_all = True

    def upsert(self, vectors):
        if any(record["id"] in self.fail_upsert_ids for record in vectors):
            raise RuntimeError("upsert rejected")
        self.upsert_calls.append(vectors)
        for record in vectors:
            self.vectors[record["id"]] = record

    def query(self, vector, top_k, include_metadata, include_values):
        if self.fail_query:
            raise ConnectionError("index unreachable")
        self.query_kwargs = {
            "vector": vector,
            "top_k": top_k,
            "include_metadata": include_metadata,
            "include_values": include_values,
        }
        return SimpleNamespace(matches=[
            SimpleNamespace(id=m["id"], score=m["score"], metadata=m.get("metadata"))
            for m in self.matches[:top_k]
        ])


class FakeMessages:
    def __init__(self, reply: str = "", error: Optional[Exception] = None, block_type: str = "text"):
        self.reply = reply
        self.error = error
        self.block_type = block_type
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type=self.block_type, text=self.reply)])


class FakeAnthropic:
    def __init__(self, **kwargs):
        self.messages = FakeMessages(**kwargs)


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def fake_index():
    return FakeIndex()


@pytest.fixture
def no_sleep():
    delays = []
    return delays.append, delays


def make_match(id_, score, content, **metadata):
    return {"id": id_, "score": score, "metadata": {"content": content, **metadata}}
