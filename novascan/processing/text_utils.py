"""Text processing utilities for NovaScan."""

import re

_NON_WORD_RE = re.compile(r'[^\w]')
_PUNCTUATION_RE = re.compile(r'[^\w\s]')
_WHITESPACE_RE = re.compile(r'\s+')
_SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')

TITLE_KEY_LENGTH = 100


def tokenize(text: str) -> list[str]:
    """Split text on whitespace, dropping empty tokens.

    Args:
        text: Input text

    Returns:
        Whitespace-delimited tokens
    """
    if not text:
        return []
    return text.split()


def strip_token(token: str) -> str:
    """Lowercase a token and remove every non-word character."""
    return _NON_WORD_RE.sub('', token.lower())


def normalize_title(title: str) -> str:
    """Convert title to its cross-source identity key.

    Args:
        title: Post title

    Returns:
        Lowercase title without punctuation, single-spaced, at most
        100 characters
    """
    if not title:
        return ""

    title = _PUNCTUATION_RE.sub('', title.lower())
    title = _WHITESPACE_RE.sub(' ', title).strip()
    return title[:TITLE_KEY_LENGTH]


def count_sentences(text: str) -> int:
    """Count non-empty sentences delimited by terminal punctuation."""
    if not text:
        return 0
    return sum(1 for s in _SENTENCE_SPLIT_RE.split(text) if s.strip())
