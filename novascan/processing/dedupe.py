"""
Cross-source deduplication for social posts.

Each post has two identity keys: a normalized URL and a normalized title.
Posts are processed in arrival order. When either key already belongs to a
surviving post, the one with higher engagement (score + comments) wins and
the loser is dropped; equal engagement keeps the earlier post.

Known limitation: only the first matching representative is reconciled.
When a post's URL matches one survivor and its title matches a different
one, the URL match is compared and the title match is left in place.
"""

from dataclasses import dataclass

from ..logging import get_logger, log_processing_stage
from ..models.post import Post
from ..utils import normalize_url
from .text_utils import normalize_title

logger = get_logger(__name__)


@dataclass
class DuplicateMatch:
    """Record of one dedup decision."""
    kept: Post
    dropped: Post
    method: str  # 'url' or 'title'


class PostDeduplicator:
    """Collapses posts that represent the same item across sources."""

    def __init__(self):
        self.matches: list[DuplicateMatch] = []

    @staticmethod
    def url_key(post: Post) -> str:
        return normalize_url(post.url)

    @staticmethod
    def title_key(post: Post) -> str:
        return normalize_title(post.title)

    def deduplicate(self, posts: list[Post]) -> list[Post]:
        """Remove duplicates, returning survivors sorted by engagement."""
        self.matches = []
        seen_urls: dict[str, Post] = {}
        seen_titles: dict[str, Post] = {}
        final_posts: dict[str, Post] = {}

        for post in posts:
            url_key = self.url_key(post)
            title_key = self.title_key(post)

            existing_by_url = seen_urls.get(url_key)
            existing_by_title = seen_titles.get(title_key)

            if existing_by_url is None and existing_by_title is None:
                seen_urls[url_key] = post
                seen_titles[title_key] = post
                final_posts[post.id] = post
                continue

            existing = existing_by_url if existing_by_url is not None else existing_by_title
            method = 'url' if existing_by_url is not None else 'title'

            if post.engagement > existing.engagement:
                final_posts.pop(existing.id, None)
                seen_urls[url_key] = post
                seen_titles[title_key] = post
                final_posts[post.id] = post
                self.matches.append(DuplicateMatch(kept=post, dropped=existing, method=method))
            else:
                self.matches.append(DuplicateMatch(kept=existing, dropped=post, method=method))

        result = sorted(final_posts.values(), key=lambda p: p.engagement, reverse=True)

        logger.info(**log_processing_stage(
            "deduplicate",
            len(posts),
            len(result),
            url_matches=sum(1 for m in self.matches if m.method == 'url'),
            title_matches=sum(1 for m in self.matches if m.method == 'title'),
        ))

        return result


def deduplicate_posts(posts: list[Post]) -> list[Post]:
    """Convenience function for post deduplication."""
    return PostDeduplicator().deduplicate(posts)
