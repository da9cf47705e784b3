"""Source adapter framework.

Adapters for the real platforms live outside this package; each one only
has to turn a query into a list of normalized posts. Sources are fetched
concurrently and a failing source contributes zero posts without
aborting the others.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta

from ..logging import PerformanceLogger, get_logger, log_error, log_processing_stage
from ..models.post import Platform, Post

logger = get_logger(__name__)


class SourceFetchError(Exception):
    """Raised by an adapter when its source cannot be queried."""


class SourceAdapter(ABC):
    """Abstract base class for platform adapters."""

    platform: Platform

    @abstractmethod
    async def fetch_posts(self, query: str, limit: int | None = None) -> list[Post]:
        """Fetch posts matching a query.

        Args:
            query: Free-text query
            limit: Maximum number of posts to fetch

        Returns:
            List of normalized posts
        """

    @property
    def name(self) -> str:
        return self.platform.value


class StaticSourceAdapter(SourceAdapter):
    """Serves a fixed list of posts, filtered by a naive query match."""

    def __init__(self, platform: Platform, posts: list[Post]):
        self.platform = platform
        self.posts = posts

    async def fetch_posts(self, query: str, limit: int | None = None) -> list[Post]:
        words = query.lower().split()
        matched = [
            p.model_copy(deep=True) for p in self.posts
            if not words or any(w in p.full_text.lower() for w in words)
        ]
        return matched[:limit] if limit is not None else matched


async def gather_posts(
    adapters: list[SourceAdapter],
    query: str,
    limit_per_source: int | None = None,
) -> list[Post]:
    """Fetch posts from all adapters concurrently.

    Failures are logged per source and never propagate.
    """
    if not adapters:
        logger.warning("No sources configured")
        return []

    async def fetch_source(adapter: SourceAdapter) -> list[Post]:
        with PerformanceLogger(f"fetch_{adapter.name}", logger):
            posts = await adapter.fetch_posts(query, limit_per_source)
        logger.info(**log_processing_stage(
            stage=f"fetch_{adapter.name}", input_count=1, output_count=len(posts)
        ))
        return posts

    results = await asyncio.gather(
        *(fetch_source(a) for a in adapters), return_exceptions=True
    )

    all_posts: list[Post] = []
    for adapter, result in zip(adapters, results, strict=True):
        if isinstance(result, BaseException):
            logger.error(**log_error(result, context="source_fetch", source=adapter.name))
        else:
            all_posts.extend(result)

    logger.info(**log_processing_stage(
        stage="fetch_all_sources",
        input_count=len(adapters),
        output_count=len(all_posts),
    ))
    return all_posts


def generate_mock_adapters(now: datetime | None = None) -> list[SourceAdapter]:
    """Build static adapters with sample posts for mock runs."""
    now = now or datetime.now(UTC)

    reddit_posts = [
        Post(
            id="reddit_1",
            platform=Platform.REDDIT,
            title="Struggling to find good invoice software for freelancers",
            content=(
                "I have been using Wave for a year but the invoicing flow is really slow "
                "and the reports are confusing. Is there a better alternative to Wave for "
                "a small remote team? Ideally something with an API and decent automation."
            ),
            author="freelance_dev",
            url="https://www.reddit.com/r/freelance/comments/abc123/invoice_software",
            created_at=now - timedelta(hours=5),
            score=42,
            num_comments=17,
            tags=["freelance"],
        ),
    ]
    hackernews_posts = [
        Post(
            id="hn_1",
            platform=Platform.HACKERNEWS,
            title="Show HN: Open source invoice software built with Django",
            content=(
                "We built an invoicing tool instead of paying for another SaaS subscription. "
                "It has recurring invoices, payment reminders and a simple REST API. "
                "Feedback on the onboarding flow is very welcome."
            ),
            author="pg_fan",
            url="https://github.com/example/invoicer",
            created_at=now - timedelta(days=3),
            score=120,
            num_comments=48,
            tags=["show-hn"],
        ),
    ]
    youtube_posts = [
        Post(
            id="yt_1",
            platform=Platform.YOUTUBE,
            title="Best invoice software for freelancers in 2025",
            content=(
                "A walkthrough comparing five invoicing apps on pricing, time tracking, "
                "multi-currency support and how easy it is to get paid on time."
            ),
            author="SaaS Reviews",
            url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            created_at=now - timedelta(days=20),
            score=850,
            num_comments=64,
            tags=["review"],
        ),
    ]

    return [
        StaticSourceAdapter(Platform.REDDIT, reddit_posts),
        StaticSourceAdapter(Platform.HACKERNEWS, hackernews_posts),
        StaticSourceAdapter(Platform.YOUTUBE, youtube_posts),
        StaticSourceAdapter(Platform.PRODUCTHUNT, []),
    ]
