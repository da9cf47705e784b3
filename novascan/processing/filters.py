"""
Noise removal, composite quality filtering and search filters.

``remove_noise`` is the cheap coarse pass that runs before dedup;
``filter_by_quality`` runs after dedup so a post is never penalized for
being the lesser copy of itself.
"""

from datetime import datetime

from ..config import Heuristics, get_heuristics
from ..logging import get_logger, log_processing_stage
from ..models.post import Post, SearchFilters
from ..utils import age_in_days, ensure_aware

logger = get_logger(__name__)

DEFAULT_MIN_QUALITY_SCORE = 40
SPAM_THRESHOLD = 0.7
STALE_AGE_DAYS = 30
SHORT_TITLE_LENGTH = 20
SHORT_CONTENT_LENGTH = 50


def is_noise(post: Post, heuristics: Heuristics | None = None,
             now: datetime | None = None) -> bool:
    """Return True for posts that are clearly unusable."""
    rules = (heuristics or get_heuristics()).noise

    if any(marker in post.content for marker in rules.redaction_markers):
        return True

    if len(post.content) < SHORT_CONTENT_LENGTH and len(post.title) < SHORT_TITLE_LENGTH:
        return True

    if post.quality is not None and post.quality.spamScore > SPAM_THRESHOLD:
        return True

    # Stale and dead: old with no engagement at all
    if (age_in_days(post.created_at, now) > STALE_AGE_DAYS
            and post.score == 0 and post.num_comments == 0):
        return True

    return False


def remove_noise(posts: list[Post], heuristics: Heuristics | None = None,
                 now: datetime | None = None) -> list[Post]:
    """Drop redacted, spammy, trivially short and stale-and-dead posts."""
    heuristics = heuristics or get_heuristics()
    kept = [p for p in posts if not is_noise(p, heuristics, now)]
    logger.debug(**log_processing_stage("remove_noise", len(posts), len(kept)))
    return kept


def calculate_quality_score(post: Post, heuristics: Heuristics | None = None,
                            now: datetime | None = None) -> float:
    """Composite 0-100 quality score used by the quality filter."""
    rules = (heuristics or get_heuristics()).noise
    score = 50.0

    score += min(30.0, (post.score + post.num_comments * 2) / 10)

    if post.quality is not None:
        score += (1 - post.quality.spamScore) * 10
        score += 10 if post.quality.wordCount > 50 else 5

    age = age_in_days(post.created_at, now)
    if age < 7:
        score += 10
    elif age < 30:
        score += 5

    if post.author and post.author not in rules.deleted_authors:
        score += 5

    return min(100.0, score)


def filter_by_quality(posts: list[Post], min_score: float = DEFAULT_MIN_QUALITY_SCORE,
                      heuristics: Heuristics | None = None,
                      now: datetime | None = None) -> list[Post]:
    """Drop posts whose composite quality score is below ``min_score``."""
    heuristics = heuristics or get_heuristics()
    kept = [
        p for p in posts
        if calculate_quality_score(p, heuristics, now) >= min_score
    ]
    logger.debug(**log_processing_stage(
        "filter_by_quality", len(posts), len(kept), min_score=min_score
    ))
    return kept


def matches_filters(post: Post, filters: SearchFilters) -> bool:
    """Check a stored post against caller-supplied search filters."""
    if filters.platforms and post.platform not in filters.platforms:
        return False

    if filters.date_range is not None:
        created = ensure_aware(post.created_at)
        if not ensure_aware(filters.date_range.start) <= created <= ensure_aware(filters.date_range.end):
            return False

    if filters.min_score is not None and post.score < filters.min_score:
        return False

    if filters.tags:
        wanted = {t.lower() for t in filters.tags}
        if not wanted.intersection(t.lower() for t in post.tags):
            return False

    if filters.keywords:
        text = post.full_text.lower()
        if not any(k.lower() in text for k in filters.keywords):
            return False

    if filters.sentiment and (post.sentiment is None or post.sentiment.label != filters.sentiment):
        return False

    if filters.domains and post.domain_context not in filters.domains:
        return False

    if filters.min_quality is not None:
        if post.quality is None or post.quality.spamScore >= 1 - filters.min_quality:
            return False

    if filters.problems_only and "problem" not in post.tags:
        return False

    return True


def apply_search_filters(posts: list[Post], filters: SearchFilters | None) -> list[Post]:
    """Keep posts matching every supplied filter."""
    if filters is None:
        return list(posts)
    return [p for p in posts if matches_filters(p, filters)]
