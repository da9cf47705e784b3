"""Embedding generation for processed posts.

Embeddings are produced by an external model after the pipeline has
finished. Batches are sent sequentially with a pause between them to
respect rate limits; any failure aborts the whole cycle.
"""

import asyncio
import hashlib
from typing import Protocol

import numpy as np
from google import genai

from ..config import Settings, get_settings
from ..logging import get_logger
from ..utils import chunk_list
from .post import Post

logger = get_logger(__name__)

EMBEDDING_CONTENT_LIMIT = 500


class EmbeddingError(Exception):
    """Raised when embeddings cannot be generated for a batch."""


class EmbeddingClient(Protocol):
    """Anything that turns a list of texts into one vector per text."""

    async def embed(self, texts: list[str]) -> list[np.ndarray]:
        ...


class GeminiEmbeddingClient:
    """Client for generating embeddings using Google Gemini API."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        if not self.settings.google_ai_api_key:
            raise EmbeddingError("Google AI API key not configured")
        self._client = genai.Client(api_key=self.settings.google_ai_api_key)
        logger.info("Google AI embedding client initialized", model=self.settings.embedding_model)

    async def embed(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for a batch of texts.

        Args:
            texts: Texts to embed

        Returns:
            One float32 vector per text, in input order

        Raises:
            EmbeddingError: If the API call fails or returns no vectors
        """
        try:
            # Run in thread pool to avoid blocking the event loop
            result = await asyncio.to_thread(
                self._client.models.embed_content,
                model=self.settings.embedding_model,
                contents=texts,
                config={"output_dimensionality": self.settings.embedding_dimensions},
            )
        except Exception as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        if not getattr(result, "embeddings", None):
            raise EmbeddingError("No embeddings found in response")

        return [np.array(e.values, dtype=np.float32) for e in result.embeddings]


class MockEmbeddingClient:
    """Deterministic hash-based embeddings for mock mode and tests."""

    def __init__(self, dimensions: int = 8):
        self.dimensions = dimensions

    async def embed(self, texts: list[str]) -> list[np.ndarray]:
        vectors = []
        for text in texts:
            digest = hashlib.sha256(text.encode("utf-8")).digest()
            raw = np.frombuffer(digest[:self.dimensions], dtype=np.uint8)
            vectors.append(raw.astype(np.float32) / 255.0)
        return vectors


def create_embedding_client(settings: Settings | None = None) -> EmbeddingClient:
    """Factory function to create an embedding client."""
    settings = settings or get_settings()
    if settings.mock:
        return MockEmbeddingClient()
    return GeminiEmbeddingClient(settings)


def prepare_text_for_embedding(post: Post) -> str:
    """Build the text sent to the embedding model for a post.

    The title is repeated to weight it above the body.
    """
    parts = [f"Title: {post.title}", f"Title: {post.title}"]

    if post.content:
        parts.append(f"Content: {post.content[:EMBEDDING_CONTENT_LIMIT]}")

    if post.tags:
        parts.append(f"Tags: {', '.join(post.tags)}")

    parts.append(f"Platform: {post.platform.value}")

    return " | ".join(parts)


async def generate_batch_embeddings(
    client: EmbeddingClient,
    texts: list[str],
    batch_size: int = 5,
    pause_seconds: float = 2.0,
) -> list[np.ndarray]:
    """Embed texts in fixed-size batches.

    Args:
        client: Embedding client
        texts: Texts to embed
        batch_size: Texts per request
        pause_seconds: Pause between batches (not after the last one)

    Returns:
        One vector per text, in input order

    Raises:
        EmbeddingError: On any batch failure or count mismatch
    """
    embeddings: list[np.ndarray] = []
    batches = chunk_list(texts, batch_size)

    for i, batch in enumerate(batches):
        try:
            vectors = await client.embed(batch)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding batch {i + 1}/{len(batches)} failed: {e}") from e

        if len(vectors) != len(batch):
            raise EmbeddingError(
                f"Embedding batch {i + 1} returned {len(vectors)} vectors for {len(batch)} texts"
            )
        embeddings.extend(vectors)

        if i + 1 < len(batches) and pause_seconds > 0:
            await asyncio.sleep(pause_seconds)

    logger.info("Generated embeddings", count=len(embeddings), batches=len(batches))
    return embeddings


async def attach_embeddings(
    posts: list[Post],
    client: EmbeddingClient,
    batch_size: int = 5,
    pause_seconds: float = 2.0,
) -> list[Post]:
    """Embed every post and store the vectors on the posts.

    Vectors are only written once every batch has succeeded.
    """
    texts = [prepare_text_for_embedding(p) for p in posts]
    vectors = await generate_batch_embeddings(client, texts, batch_size, pause_seconds)
    for post, vector in zip(posts, vectors, strict=True):
        post.embedding = vector.tolist()
    return posts
