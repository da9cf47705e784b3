"""Content processing module."""

from .dedupe import DuplicateMatch, PostDeduplicator, deduplicate_posts
from .filters import (
    apply_search_filters,
    calculate_quality_score,
    filter_by_quality,
    remove_noise,
)
from .freshness import apply_freshness_boost, freshness_multiplier
from .pipeline import PostPipeline, filter_and_process_posts
from .quality import QualityAnalyzer, analyze_quality, classify_domain
from .relevance import RelevanceScorer, calculate_relevance_score
from .sentiment import SentimentAnalyzer, analyze_sentiment
from .tagging import TagEnricher, enrich_tags, extract_product_mentions
from .text_utils import normalize_title

__all__ = [
    'analyze_sentiment',
    'SentimentAnalyzer',
    'analyze_quality',
    'classify_domain',
    'QualityAnalyzer',
    'remove_noise',
    'filter_by_quality',
    'calculate_quality_score',
    'apply_search_filters',
    'deduplicate_posts',
    'PostDeduplicator',
    'DuplicateMatch',
    'enrich_tags',
    'extract_product_mentions',
    'TagEnricher',
    'calculate_relevance_score',
    'RelevanceScorer',
    'apply_freshness_boost',
    'freshness_multiplier',
    'filter_and_process_posts',
    'PostPipeline',
    'normalize_title',
]
