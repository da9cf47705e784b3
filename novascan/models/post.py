"""Post data structures shared by every pipeline stage."""

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class Platform(str, Enum):
    """Source platforms a post can originate from."""
    REDDIT = "reddit"
    HACKERNEWS = "hackernews"
    PRODUCTHUNT = "producthunt"
    QUORA = "quora"
    YOUTUBE = "youtube"


SentimentLabel = Literal["positive", "negative", "neutral"]


class SentimentScore(BaseModel):
    """Emotional polarity of a post."""
    score: float = 0.0
    comparative: float = 0.0
    label: SentimentLabel = "neutral"
    confidence: float = 0.0  # 0-1


class QualityMetrics(BaseModel):
    """Text quality indicators for a post."""
    textLength: int = 0
    wordCount: int = 0
    readabilityScore: float = 0.0  # 0-1
    hasCode: bool = False
    hasLinks: bool = False
    spamScore: float = 0.0  # 0-1, higher is more likely spam


class Post(BaseModel):
    """Normalized content unit produced by a source adapter.

    Identity and content fields are set by the adapter. The annotation
    fields are written by the pipeline stages; ``embedding`` is filled by
    the embedding collaborator after the pipeline finishes.
    """
    id: str
    platform: Platform
    title: str
    content: str = ""
    author: str = ""
    url: str
    created_at: datetime
    score: int = 0
    num_comments: int = 0
    tags: list[str] = Field(default_factory=list)
    indexed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    sentiment: SentimentScore | None = None
    quality: QualityMetrics | None = None
    domain_context: str | None = None
    relevance_score: float | None = None
    embedding: list[float] | None = None

    @property
    def engagement(self) -> int:
        """Popularity proxy used for tie-breaking."""
        return self.score + self.num_comments

    @property
    def full_text(self) -> str:
        return f"{self.title} {self.content}"


class DateRange(BaseModel):
    """Inclusive creation-time window."""
    start: datetime = Field(alias="from")
    end: datetime = Field(alias="to")

    model_config = {"populate_by_name": True}


class SearchFilters(BaseModel):
    """Caller-supplied filters for downstream search over stored posts."""
    platforms: list[Platform] | None = None
    date_range: DateRange | None = None
    min_score: int | None = None
    tags: list[str] | None = None
    keywords: list[str] | None = None
    sentiment: SentimentLabel | None = None
    domains: list[str] | None = None
    min_quality: float | None = None  # 0-1, keeps posts with spamScore < 1 - min_quality
    problems_only: bool = False
