"""Utility functions for NovaScan."""

import re
from datetime import UTC, datetime
from typing import TypeVar

T = TypeVar('T')

SECONDS_PER_DAY = 86400

_PROTOCOL_RE = re.compile(r'^https?://(www\.)?')
_QUERY_FRAGMENT_RE = re.compile(r'[?#].*$')


def normalize_url(url: str) -> str:
    """Normalize URL into a cross-source identity key.

    Lowercases, strips the protocol and a leading ``www.``, and drops the
    query string and fragment. YouTube watch URLs keep their query string
    because the video id lives there.

    Args:
        url: Raw URL string

    Returns:
        Normalized URL key
    """
    normalized = _PROTOCOL_RE.sub('', (url or '').lower()).strip()

    if 'youtube.com/watch' in normalized:
        return normalized

    return _QUERY_FRAGMENT_RE.sub('', normalized)


def ensure_aware(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def age_in_days(created_at: datetime, reference_date: datetime | None = None) -> float:
    """Fractional age of a timestamp in days.

    Args:
        created_at: When the post was created
        reference_date: Reference date (defaults to now)

    Returns:
        Age in days; negative for future timestamps
    """
    if reference_date is None:
        reference_date = datetime.now(UTC)

    delta = ensure_aware(reference_date) - ensure_aware(created_at)
    return delta.total_seconds() / SECONDS_PER_DAY


def chunk_list(items: list[T], chunk_size: int) -> list[list[T]]:
    """Split list into chunks of specified size.

    Args:
        items: List to chunk
        chunk_size: Size of each chunk

    Returns:
        List of chunks
    """
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]
