"""
Lexicon-based sentiment scoring for social posts.

Each whitespace token is looked up in fixed positive and negative word
lists. A preceding negation flips the token's polarity and a preceding
intensifier doubles its weight. This is a bounded-cost heuristic, not a
linguistic model; it never raises and degrades to a neutral result.
"""

from ..config import Heuristics, get_heuristics
from ..models.post import SentimentScore
from .text_utils import strip_token, tokenize

POSITIVE_THRESHOLD = 0.5
NEGATIVE_THRESHOLD = -0.5
INTENSIFIER_MULTIPLIER = 2


class SentimentAnalyzer:
    """Scores emotional polarity of text against a swappable lexicon."""

    def __init__(self, heuristics: Heuristics | None = None):
        lexicon = (heuristics or get_heuristics()).sentiment
        self.positive_words = frozenset(w.lower() for w in lexicon.positive_words)
        self.negative_words = frozenset(w.lower() for w in lexicon.negative_words)
        self.intensifiers = frozenset(w.lower() for w in lexicon.intensifiers)
        self.negations = frozenset(strip_token(w) for w in lexicon.negations)

    def analyze(self, text: str) -> SentimentScore:
        """Score the polarity of a piece of text."""
        tokens = [strip_token(t) for t in tokenize(text)]
        if not tokens:
            return SentimentScore()

        score = 0.0
        positive_count = 0
        negative_count = 0

        for i, word in enumerate(tokens):
            if word in self.positive_words:
                polarity = 1
            elif word in self.negative_words:
                polarity = -1
            else:
                continue

            previous = tokens[i - 1] if i > 0 else None
            if previous in self.negations:
                polarity = -polarity
            multiplier = INTENSIFIER_MULTIPLIER if previous in self.intensifiers else 1

            score += polarity * multiplier
            if polarity > 0:
                positive_count += 1
            else:
                negative_count += 1

        comparative = score / len(tokens)

        if score > POSITIVE_THRESHOLD:
            label = "positive"
        elif score < NEGATIVE_THRESHOLD:
            label = "negative"
        else:
            label = "neutral"

        sentiment_words = positive_count + negative_count
        confidence = min(1.0, sentiment_words / max(len(tokens) / 10, 1))

        return SentimentScore(
            score=score,
            comparative=comparative,
            label=label,
            confidence=confidence,
        )


def analyze_sentiment(text: str, heuristics: Heuristics | None = None) -> SentimentScore:
    """Convenience function for sentiment scoring."""
    return SentimentAnalyzer(heuristics).analyze(text)
