"""Tests for embedding preparation and batching."""

import numpy as np
import pytest

from novascan.models.embedding_client import (
    EmbeddingError,
    MockEmbeddingClient,
    attach_embeddings,
    generate_batch_embeddings,
    prepare_text_for_embedding,
)


class RecordingClient:
    def __init__(self, fail_on_batch=None, short=False):
        self.batches = []
        self.fail_on_batch = fail_on_batch
        self.short = short

    async def embed(self, texts):
        self.batches.append(list(texts))
        if self.fail_on_batch == len(self.batches):
            raise RuntimeError("rate limited")
        vectors = [np.full(3, float(len(t)), dtype=np.float32) for t in texts]
        return vectors[:-1] if self.short else vectors


def test_prepare_text(make_post):
    post = make_post(title="Invoice tools", content="x" * 800, tags=["saas", "problem"])

    text = prepare_text_for_embedding(post)

    assert text.startswith("Title: Invoice tools | Title: Invoice tools | Content: ")
    assert "x" * 500 in text and "x" * 501 not in text
    assert "Tags: saas, problem" in text
    assert text.endswith("Platform: reddit")


def test_prepare_text_without_content_or_tags(make_post):
    post = make_post(title="Hi", content="", tags=[])

    assert prepare_text_for_embedding(post) == "Title: Hi | Title: Hi | Platform: reddit"


@pytest.mark.asyncio
async def test_batches_preserve_order():
    client = RecordingClient()
    texts = [str(i) * (i + 1) for i in range(12)]

    vectors = await generate_batch_embeddings(client, texts, batch_size=5, pause_seconds=0)

    assert [len(b) for b in client.batches] == [5, 5, 2]
    assert [v[0] for v in vectors] == [float(len(t)) for t in texts]


@pytest.mark.asyncio
async def test_pause_between_batches_only(monkeypatch):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    monkeypatch.setattr("novascan.models.embedding_client.asyncio.sleep", fake_sleep)

    await generate_batch_embeddings(RecordingClient(), ["a"] * 11, batch_size=5, pause_seconds=2.0)

    assert sleeps == [2.0, 2.0]


@pytest.mark.asyncio
async def test_batch_failure_is_fatal():
    client = RecordingClient(fail_on_batch=2)

    with pytest.raises(EmbeddingError, match="batch 2/3"):
        await generate_batch_embeddings(client, ["a"] * 11, batch_size=5, pause_seconds=0)

    assert len(client.batches) == 2


@pytest.mark.asyncio
async def test_count_mismatch_is_fatal():
    with pytest.raises(EmbeddingError):
        await generate_batch_embeddings(RecordingClient(short=True), ["a", "b"], pause_seconds=0)


@pytest.mark.asyncio
async def test_attach_embeddings(make_post):
    posts = [make_post(), make_post()]

    await attach_embeddings(posts, MockEmbeddingClient(dimensions=6), pause_seconds=0)

    assert all(isinstance(p.embedding, list) and len(p.embedding) == 6 for p in posts)


@pytest.mark.asyncio
async def test_attach_embeddings_leaves_posts_untouched_on_failure(make_post):
    posts = [make_post() for _ in range(6)]

    with pytest.raises(EmbeddingError):
        await attach_embeddings(posts, RecordingClient(fail_on_batch=2), batch_size=5, pause_seconds=0)

    assert all(p.embedding is None for p in posts)
