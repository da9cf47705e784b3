"""Tests for the freshness boost."""

from datetime import timedelta

import pytest

from novascan.processing.freshness import apply_freshness_boost, freshness_multiplier


@pytest.mark.parametrize("age,expected", [
    (0.5, 1.5),
    (3, 1.3),
    (10, 1.1),
    (100, 1.0),
    (365, 1.0),
    (400, 0.7),
])
def test_multiplier_bands(age, expected):
    assert freshness_multiplier(age) == expected


def test_boost_ratio(make_post, now):
    fresh = make_post(created_at=now - timedelta(hours=12), relevance_score=60)
    old = make_post(created_at=now - timedelta(days=400), relevance_score=60)

    apply_freshness_boost([fresh, old], now=now)

    assert fresh.relevance_score == pytest.approx(90)
    assert old.relevance_score == pytest.approx(42)
    assert fresh.relevance_score / old.relevance_score == pytest.approx(1.5 / 0.7)


def test_boost_not_clipped(make_post, now):
    post = make_post(created_at=now - timedelta(hours=1), relevance_score=100)

    apply_freshness_boost([post], now=now)

    assert post.relevance_score == pytest.approx(150)


def test_missing_score_treated_as_zero(make_post, now):
    post = make_post(age_days=2)

    apply_freshness_boost([post], now=now)

    assert post.relevance_score == 0
