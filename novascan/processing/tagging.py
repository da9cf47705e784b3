"""Keyword and pattern based tag enrichment."""

import re

from ..config import Heuristics, get_heuristics
from ..models.post import Post

DEFAULT_MAX_TAGS = 20
DEFAULT_MAX_PRODUCT_MENTIONS = 5
MIN_PRODUCT_LENGTH = 3
PROBLEM_TAG = "problem"
SOLUTION_TAG = "solution"


class TagEnricher:
    """Derives topical, problem and solution tags for posts."""

    def __init__(self, heuristics: Heuristics | None = None,
                 max_tags: int = DEFAULT_MAX_TAGS,
                 max_product_mentions: int = DEFAULT_MAX_PRODUCT_MENTIONS):
        self.rules = (heuristics or get_heuristics()).tags
        self.max_tags = max_tags
        self.max_product_mentions = max_product_mentions
        self._product_res = [re.compile(p) for p in self.rules.product_patterns]

    def extract_product_mentions(self, text: str) -> list[str]:
        """Pull short product names out of phrases like ``using X``."""
        products = []
        for pattern in self._product_res:
            for match in pattern.finditer(text):
                name = match.group(1)
                if name and len(name) > MIN_PRODUCT_LENGTH:
                    products.append(name)
        return products[:self.max_product_mentions]

    def enrich(self, post: Post) -> list[str]:
        """Return the enriched tag list for a post.

        Existing tags come first (lowercased), followed by problem,
        solution, technology and product tags in detection order. The
        result is deduplicated case-insensitively and capped.
        """
        text = post.full_text.lower()
        tags = [t.lower() for t in post.tags]

        if any(k in text for k in self.rules.problem_keywords):
            tags.append(PROBLEM_TAG)

        if any(k in text for k in self.rules.solution_keywords):
            tags.append(SOLUTION_TAG)

        for keyword in self.rules.tech_keywords:
            if keyword in text:
                tags.append(re.sub(r'\s+', '-', keyword))

        tags.extend(self.extract_product_mentions(text))

        unique = list(dict.fromkeys(t.lower() for t in tags if t))
        return unique[:self.max_tags]

    def enrich_posts(self, posts: list[Post]) -> list[Post]:
        """Write enriched tags onto each post in place."""
        for post in posts:
            post.tags = self.enrich(post)
        return posts


def enrich_tags(post: Post, heuristics: Heuristics | None = None) -> list[str]:
    """Convenience function for tag enrichment of a single post."""
    return TagEnricher(heuristics).enrich(post)


def extract_product_mentions(text: str, heuristics: Heuristics | None = None) -> list[str]:
    """Convenience function for product mention extraction."""
    return TagEnricher(heuristics).extract_product_mentions(text.lower())
