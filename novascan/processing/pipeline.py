"""
Batch cleanup and ranking pipeline.

Ingestion analysis (sentiment, quality, domain) runs once per raw post.
The batch pipeline then runs, in fixed order:

    remove_noise -> deduplicate -> filter_by_quality -> enrich_tags
    -> [score_relevance -> sort -> apply_freshness_boost]   (query only)

Every stage is synchronous over an in-memory list.
"""

import time
from datetime import datetime

from ..config import Heuristics, get_heuristics
from ..logging import get_logger, log_processing_stage
from ..models.post import Post
from .dedupe import PostDeduplicator
from .filters import DEFAULT_MIN_QUALITY_SCORE, filter_by_quality, remove_noise
from .freshness import apply_freshness_boost
from .quality import QualityAnalyzer
from .relevance import RelevanceScorer
from .sentiment import SentimentAnalyzer
from .tagging import DEFAULT_MAX_PRODUCT_MENTIONS, DEFAULT_MAX_TAGS, TagEnricher

logger = get_logger(__name__)


class PostPipeline:
    """Runs the analyzers and the ordered cleanup stages over a batch."""

    def __init__(
        self,
        heuristics: Heuristics | None = None,
        min_quality_score: float = DEFAULT_MIN_QUALITY_SCORE,
        max_tags: int = DEFAULT_MAX_TAGS,
        max_product_mentions: int = DEFAULT_MAX_PRODUCT_MENTIONS,
    ):
        self.heuristics = heuristics or get_heuristics()
        self.min_quality_score = min_quality_score
        self.sentiment_analyzer = SentimentAnalyzer(self.heuristics)
        self.quality_analyzer = QualityAnalyzer(self.heuristics)
        self.tag_enricher = TagEnricher(self.heuristics, max_tags, max_product_mentions)

    def annotate(self, posts: list[Post]) -> list[Post]:
        """Attach sentiment, quality and domain context to raw posts."""
        for post in posts:
            text = post.full_text
            post.sentiment = self.sentiment_analyzer.analyze(text)
            post.quality = self.quality_analyzer.analyze(text)
            post.domain_context = self.quality_analyzer.classify_domain(text, post.tags)
        return posts

    def run(self, posts: list[Post], query: str | None = None,
            now: datetime | None = None) -> list[Post]:
        """Clean, enrich and optionally rank a batch of annotated posts.

        Args:
            posts: Annotated posts from every source for one cycle
            query: Optional query; enables relevance scoring and boosting
            now: Reference time for age-based rules (defaults to now)

        Returns:
            Surviving posts, ranked by boosted relevance when a query is
            given, otherwise by engagement
        """
        start = time.time()
        input_count = len(posts)

        result = remove_noise(posts, self.heuristics, now)
        result = PostDeduplicator().deduplicate(result)
        result = filter_by_quality(result, self.min_quality_score, self.heuristics, now)
        result = self.tag_enricher.enrich_posts(result)

        if query and query.strip() and result:
            result = RelevanceScorer(query).score_posts(result)
            result = apply_freshness_boost(result, now)

        logger.info(**log_processing_stage(
            "pipeline",
            input_count,
            len(result),
            duration=time.time() - start,
            query=query,
        ))
        return result


def filter_and_process_posts(posts: list[Post], query: str | None = None,
                             heuristics: Heuristics | None = None,
                             now: datetime | None = None) -> list[Post]:
    """Convenience function for running the batch pipeline."""
    return PostPipeline(heuristics).run(posts, query, now)
