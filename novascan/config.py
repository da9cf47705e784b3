"""Configuration management for NovaScan."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.post import Platform

DEFAULT_HEURISTICS_PATH = Path(__file__).parent / "heuristics.yaml"


class SentimentLexicon(BaseModel):
    """Word lists used by the sentiment analyzer."""
    positive_words: list[str] = Field(default_factory=list)
    negative_words: list[str] = Field(default_factory=list)
    intensifiers: list[str] = Field(default_factory=list)
    negations: list[str] = Field(default_factory=list)


class QualityRules(BaseModel):
    """Patterns and thresholds used by the quality analyzer."""
    code_pattern: str = r"```|`[^`]+`|function |class |import |const |let |var "
    link_pattern: str = r"(?i)https?://|www\."
    spam_patterns: list[str] = Field(default_factory=list)
    max_links: int = 3
    max_link_penalty: int = 3
    max_emoji: int = 5
    min_words: int = 10
    max_words_without_breaks: int = 500
    spam_divisor: float = 5.0


class TagRules(BaseModel):
    """Keyword lists and patterns used by the tag enricher."""
    problem_keywords: list[str] = Field(default_factory=list)
    solution_keywords: list[str] = Field(default_factory=list)
    tech_keywords: list[str] = Field(default_factory=list)
    product_patterns: list[str] = Field(default_factory=list)


class NoiseRules(BaseModel):
    """Markers for moderated content and deleted authors."""
    redaction_markers: list[str] = Field(default_factory=lambda: ["[deleted]", "[removed]"])
    deleted_authors: list[str] = Field(default_factory=lambda: ["deleted", "[deleted]"])


class Heuristics(BaseModel):
    """All heuristic tables, swappable independently of control flow."""
    sentiment: SentimentLexicon = Field(default_factory=SentimentLexicon)
    quality: QualityRules = Field(default_factory=QualityRules)
    # Declaration order matters: the first bucket wins ties.
    domains: dict[str, list[str]] = Field(default_factory=dict)
    tags: TagRules = Field(default_factory=TagRules)
    noise: NoiseRules = Field(default_factory=NoiseRules)


class Settings(BaseSettings):
    """Main application settings."""

    # ── Operational Mode ───────────────────────────────────────────────────
    mock: bool = Field(False, description="Use mock sources and embeddings")
    enabled_platforms: list[Platform] = Field(
        default_factory=lambda: [
            Platform.YOUTUBE, Platform.REDDIT, Platform.HACKERNEWS, Platform.PRODUCTHUNT
        ],
        description="Source platforms queried per collection cycle",
    )

    # ── Pipeline Settings ──────────────────────────────────────────────────
    min_quality_score: float = Field(40, description="Composite quality threshold")
    max_tags: int = Field(20, description="Maximum tags per post")
    max_product_mentions: int = Field(5, description="Maximum product mention tags per post")
    heuristics_path: Path | None = Field(None, description="Override path for heuristic tables")

    # ── Embeddings ─────────────────────────────────────────────────────────
    google_ai_api_key: str | None = Field(None, description="Google AI (Gemini) API key for embeddings")
    embedding_model: str = Field("models/text-embedding-004", description="Embedding model name")
    embedding_dimensions: int = Field(768, description="Embedding output dimensionality")
    embedding_batch_size: int = Field(5, description="Texts per embedding batch")
    embedding_batch_pause_seconds: float = Field(2.0, description="Pause between embedding batches")

    # ── Collection ─────────────────────────────────────────────────────────
    queue_threshold: int = Field(10, description="Pending query threshold reported in status")

    # ── Storage ────────────────────────────────────────────────────────────
    data_dir: Path = Field(Path("./data"), description="Data directory for the JSONL store")

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = Field("INFO", description="Log level")
    json_logging: bool = Field(True, description="Enable JSON logging")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("min_quality_score")
    @classmethod
    def validate_quality_threshold(cls, v: float) -> float:
        """Validate the quality threshold is a 0-100 score."""
        if not 0 <= v <= 100:
            raise ValueError("Quality threshold must be between 0 and 100")
        return v

    @field_validator("max_tags", "max_product_mentions", "embedding_batch_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate count settings are positive."""
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("data_dir")
    @classmethod
    def ensure_data_dir(cls, v: Path) -> Path:
        """Create the data directory if it does not exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("embedding_batch_pause_seconds")
    @classmethod
    def validate_pause(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Batch pause cannot be negative")
        return v


def load_heuristics(path: str | Path | None = None) -> Heuristics:
    """Load heuristic tables from a YAML file.

    Args:
        path: YAML file to read (defaults to the packaged tables)

    Returns:
        Parsed heuristics
    """
    config_path = Path(path) if path else DEFAULT_HEURISTICS_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Heuristics file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    return Heuristics(**data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


@lru_cache(maxsize=1)
def get_heuristics() -> Heuristics:
    """Get heuristic tables, honouring the configured override path."""
    return load_heuristics(get_settings().heuristics_path)


def validate_config(settings: Settings) -> bool:
    """Validate configuration completeness."""
    try:
        if not settings.mock and not settings.google_ai_api_key:
            raise ValueError("GOOGLE_AI_API_KEY is required when not in mock mode")

        load_heuristics(settings.heuristics_path)
        return True

    except Exception as e:
        print(f"Configuration validation failed: {e}")
        return False
