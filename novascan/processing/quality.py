"""
Text quality, spam likelihood and topic-domain classification.

Spam scoring counts independent indicator hits (promotional phrases,
exclamation runs, repeated characters, link and emoji excess, length
outliers) and divides by a fixed divisor. Domain classification picks the
keyword bucket with the most hits.
"""

import re

from ..config import Heuristics, get_heuristics
from ..models.post import QualityMetrics
from .text_utils import count_sentences, tokenize

DEFAULT_DOMAIN = "general"

_URL_RE = re.compile(r'https?://')
_EMOJI_RE = re.compile('[\U0001F600-\U0001F64F]')


class QualityAnalyzer:
    """Computes QualityMetrics and a coarse domain label for text."""

    def __init__(self, heuristics: Heuristics | None = None):
        heuristics = heuristics or get_heuristics()
        self.rules = heuristics.quality
        self.domains = heuristics.domains
        self._code_re = re.compile(self.rules.code_pattern)
        self._link_re = re.compile(self.rules.link_pattern)
        self._spam_res = [re.compile(p) for p in self.rules.spam_patterns]

    def analyze(self, text: str) -> QualityMetrics:
        """Compute quality metrics for a piece of text."""
        text = text or ""
        words = tokenize(text)
        if not words:
            return QualityMetrics(textLength=len(text))

        return QualityMetrics(
            textLength=len(text),
            wordCount=len(words),
            readabilityScore=self._readability(text, words),
            hasCode=bool(self._code_re.search(text)),
            hasLinks=bool(self._link_re.search(text)),
            spamScore=self._spam_score(text, words),
        )

    def _readability(self, text: str, words: list[str]) -> float:
        if not words:
            return 0.0

        sentence_count = max(count_sentences(text), 1)
        avg_word_length = sum(len(w) for w in words) / len(words)
        avg_sentence_length = len(words) / sentence_count

        word_length_score = max(0.0, min(1.0, 1 - (avg_word_length - 4) / 10))
        sentence_length_score = max(0.0, min(1.0, 1 - (avg_sentence_length - 15) / 30))

        return (word_length_score + sentence_length_score) / 2

    def _spam_score(self, text: str, words: list[str]) -> float:
        rules = self.rules
        indicators = sum(1 for pattern in self._spam_res if pattern.search(text))

        link_count = len(_URL_RE.findall(text))
        if link_count > rules.max_links:
            indicators += min(link_count - rules.max_links, rules.max_link_penalty)

        if len(_EMOJI_RE.findall(text)) > rules.max_emoji:
            indicators += 1

        word_count = len(words)
        if word_count < rules.min_words or (
            word_count > rules.max_words_without_breaks and '\n' not in text
        ):
            indicators += 1

        return min(indicators / rules.spam_divisor, 1.0)

    def classify_domain(self, text: str, tags: list[str] | None = None) -> str:
        """Return the domain bucket with the most keyword hits.

        A keyword counts once if it appears in the text or in the joined
        tags. The first declared bucket wins ties; no hits gives
        ``"general"``.
        """
        lower_text = (text or "").lower()
        all_tags = " ".join(t.lower() for t in tags or [])

        best_domain = DEFAULT_DOMAIN
        max_matches = 0

        for domain, keywords in self.domains.items():
            matches = sum(1 for k in keywords if k in lower_text or k in all_tags)
            if matches > max_matches:
                max_matches = matches
                best_domain = domain

        return best_domain


def analyze_quality(text: str, heuristics: Heuristics | None = None) -> QualityMetrics:
    """Convenience function for quality analysis."""
    return QualityAnalyzer(heuristics).analyze(text)


def classify_domain(text: str, tags: list[str] | None = None,
                    heuristics: Heuristics | None = None) -> str:
    """Convenience function for domain classification."""
    return QualityAnalyzer(heuristics).classify_domain(text, tags)
