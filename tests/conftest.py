"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["JSON_LOGGING"] = "false"
os.environ["MOCK"] = "true"
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="novascan-test-")

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time so age-based rules are deterministic."""
    return NOW


@pytest.fixture
def heuristics():
    """Packaged heuristic tables."""
    from novascan.config import load_heuristics
    return load_heuristics()


@pytest.fixture
def make_post(now):
    """Factory for posts with sensible defaults."""
    from novascan.models.post import Platform, Post

    counter = {"n": 0}

    def _make(**overrides) -> Post:
        counter["n"] += 1
        age_days = overrides.pop("age_days", 2)
        fields = {
            "id": f"post_{counter['n']}",
            "platform": Platform.REDDIT,
            "title": f"Looking for a reliable invoicing tool number {counter['n']}",
            "content": (
                "Our small agency keeps losing track of unpaid invoices and the current "
                "spreadsheet workflow is painful. What are people using these days?"
            ),
            "author": "someone",
            "url": f"https://example.com/posts/{counter['n']}",
            "created_at": now - timedelta(days=age_days),
            "score": 10,
            "num_comments": 5,
            "tags": [],
        }
        fields.update(overrides)
        return Post(**fields)

    return _make
