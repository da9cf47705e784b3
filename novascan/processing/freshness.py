"""Recency multiplier for query relevance scores."""

from datetime import datetime

from ..models.post import Post
from ..utils import age_in_days

# (exclusive upper bound in days, multiplier), checked in order
FRESHNESS_TIERS = (
    (1, 1.5),
    (7, 1.3),
    (30, 1.1),
)
STALE_AGE_DAYS = 365
STALE_MULTIPLIER = 0.7


def freshness_multiplier(age_days: float) -> float:
    """Multiplier for a post of the given age."""
    for max_age, multiplier in FRESHNESS_TIERS:
        if age_days < max_age:
            return multiplier
    if age_days > STALE_AGE_DAYS:
        return STALE_MULTIPLIER
    return 1.0


def apply_freshness_boost(posts: list[Post], now: datetime | None = None) -> list[Post]:
    """Scale each post's relevance score by its freshness multiplier in place.

    The boosted value is intentionally not clipped, so it can exceed 100
    and keeps its ranking signal.
    """
    for post in posts:
        multiplier = freshness_multiplier(age_in_days(post.created_at, now))
        post.relevance_score = (post.relevance_score or 0.0) * multiplier
    return posts
