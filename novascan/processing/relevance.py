"""
Query relevance scoring for social posts.

Scores are 0-100 before freshness boosting:

- title: +50 for the full query as a substring, otherwise up to 30 from
  the fraction of query words (longer than 3 chars) found in the title
- body: +30 for the full query, otherwise up to 20 the same way
- tags: +5 per tag that contains, or is contained in, the query
- engagement: up to +10 from (score + comments) / 100
"""

from ..logging import get_logger, log_processing_stage
from ..models.post import Post

logger = get_logger(__name__)

MAX_RELEVANCE = 100.0
MIN_QUERY_WORD_LENGTH = 3


class RelevanceScorer:
    """Scores posts against a free-text query."""

    TITLE_EXACT = 50.0
    TITLE_PARTIAL = 30.0
    BODY_EXACT = 30.0
    BODY_PARTIAL = 20.0
    TAG_MATCH = 5.0
    ENGAGEMENT_CAP = 10.0

    def __init__(self, query: str):
        self.query = query.lower().strip()
        self.query_words = self.query.split()

    def _field_score(self, text: str, exact: float, partial: float) -> float:
        if self.query and self.query in text:
            return exact
        if not self.query_words:
            return 0.0
        matching = [
            w for w in self.query_words
            if len(w) > MIN_QUERY_WORD_LENGTH and w in text
        ]
        return len(matching) / len(self.query_words) * partial

    def score(self, post: Post) -> float:
        """Compute the clipped 0-100 relevance of a post."""
        relevance = self._field_score(post.title.lower(), self.TITLE_EXACT, self.TITLE_PARTIAL)
        relevance += self._field_score(post.content.lower(), self.BODY_EXACT, self.BODY_PARTIAL)

        matching_tags = [
            tag for tag in post.tags
            if self.query and (tag.lower() in self.query or self.query in tag.lower())
        ]
        relevance += len(matching_tags) * self.TAG_MATCH

        relevance += min(self.ENGAGEMENT_CAP, post.engagement / 100)

        return max(0.0, min(MAX_RELEVANCE, relevance))

    def score_posts(self, posts: list[Post]) -> list[Post]:
        """Overwrite ``relevance_score`` and sort descending by it."""
        for post in posts:
            post.relevance_score = self.score(post)

        ranked = sorted(posts, key=lambda p: p.relevance_score, reverse=True)

        logger.debug(**log_processing_stage(
            "score_relevance", len(posts), len(ranked), query=self.query
        ))
        return ranked


def calculate_relevance_score(post: Post, query: str) -> float:
    """Convenience function for scoring one post against a query."""
    return RelevanceScorer(query).score(post)
