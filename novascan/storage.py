"""Post storage backends.

Upserts are keyed by post id, so writing the same post twice overwrites
the earlier document.
"""

from pathlib import Path
from typing import Protocol

import orjson

from .logging import get_logger
from .models.post import Post

logger = get_logger(__name__)


class StorageError(Exception):
    """Raised when a batch cannot be persisted."""


class PostStore(Protocol):
    """Document store interface used by the collector."""

    async def bulk_upsert(self, posts: list[Post]) -> int:
        ...


class InMemoryPostStore:
    """Dictionary-backed store, mostly for tests and mock runs."""

    def __init__(self):
        self.documents: dict[str, Post] = {}

    async def bulk_upsert(self, posts: list[Post]) -> int:
        for post in posts:
            self.documents[post.id] = post
        return len(posts)

    def get(self, post_id: str) -> Post | None:
        return self.documents.get(post_id)

    def all(self) -> list[Post]:
        return list(self.documents.values())


class JsonlPostStore:
    """Stores posts as one JSON document per line, rewritten on upsert."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, Post]:
        if not self.path.exists():
            return {}
        documents: dict[str, Post] = {}
        with open(self.path, "rb") as f:
            for line in f:
                line = line.strip()
                if line:
                    post = Post.model_validate(orjson.loads(line))
                    documents[post.id] = post
        return documents

    async def bulk_upsert(self, posts: list[Post]) -> int:
        """Merge posts into the file by id.

        Raises:
            StorageError: If the file cannot be read or written
        """
        try:
            documents = self._load()
            for post in posts:
                documents[post.id] = post

            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "wb") as f:
                for post in documents.values():
                    f.write(orjson.dumps(post.model_dump(mode="json")))
                    f.write(b"\n")
            tmp_path.replace(self.path)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to upsert {len(posts)} posts: {e}") from e

        logger.info("Upserted posts", count=len(posts), total=len(documents), path=str(self.path))
        return len(posts)

    def get(self, post_id: str) -> Post | None:
        return self._load().get(post_id)

    def all(self) -> list[Post]:
        return list(self._load().values())
