"""Tests for quality metrics and domain classification."""

import pytest

from novascan.processing.quality import analyze_quality, classify_domain

LONG_TEXT = (
    "We moved our support team to a new helpdesk last month. The setup took a "
    "few days and the migration of old tickets was smooth. Most agents found the "
    "interface clear and the reporting is much better than before."
)


def test_basic_counts():
    metrics = analyze_quality("hello world")

    assert metrics.textLength == 11
    assert metrics.wordCount == 2


def test_empty_text_defaults():
    metrics = analyze_quality("")

    assert metrics.wordCount == 0
    assert metrics.readabilityScore == 0
    assert metrics.spamScore == 0
    assert metrics.hasCode is False
    assert metrics.hasLinks is False


def test_readability_in_range():
    metrics = analyze_quality(LONG_TEXT)

    assert 0 <= metrics.readabilityScore <= 1
    assert metrics.readabilityScore > 0.5


def test_readability_penalizes_long_words_and_sentences():
    dense = " ".join(["internationalization"] * 80)

    assert analyze_quality(dense).readabilityScore < analyze_quality(LONG_TEXT).readabilityScore


def test_code_and_link_detection():
    metrics = analyze_quality("Try `pip install foo` and see https://example.com for docs")

    assert metrics.hasCode is True
    assert metrics.hasLinks is True


def test_clean_text_has_no_spam():
    assert analyze_quality(LONG_TEXT).spamScore == 0


def test_short_text_counts_as_length_outlier():
    assert analyze_quality("buy this").spamScore == pytest.approx(0.2)


def test_promotional_text_scores_high():
    text = (
        "BUY NOW!!! Limited time offer, you are a WINNER of our casino prize "
        "sooooo click the link " + " ".join(f"https://spam{i}.example" for i in range(7))
    )
    metrics = analyze_quality(text)

    # phrases, scam words, exclamations, repeated chars, 3 capped link hits
    assert metrics.spamScore == 1.0


def test_link_excess_is_capped():
    base = " ".join(["word"] * 20)
    four_links = base + " " + " ".join(f"http://a{i}.com" for i in range(4))
    many_links = base + " " + " ".join(f"http://a{i}.com" for i in range(20))

    assert analyze_quality(four_links).spamScore == pytest.approx(0.2)
    assert analyze_quality(many_links).spamScore == pytest.approx(0.6)


def test_emoji_excess():
    text = " ".join(["word"] * 20) + " " + "".join(chr(0x1F600 + i) for i in range(6))

    assert analyze_quality(text).spamScore == pytest.approx(0.2)


def test_wall_of_text_without_breaks():
    wall = " ".join(["word"] * 501)
    with_breaks = "\n".join(["word"] * 501)

    assert analyze_quality(wall).spamScore == pytest.approx(0.2)
    assert analyze_quality(with_breaks).spamScore == 0


def test_classify_domain_picks_most_hits():
    text = "Looking for a fintech payment app with good banking integrations"

    assert classify_domain(text, []) == "fintech"


def test_classify_domain_uses_tags():
    assert classify_domain("need recommendations", ["shopify", "marketplace"]) == "ecommerce"


def test_classify_domain_default():
    assert classify_domain("the weather was nice yesterday", []) == "general"


def test_classify_domain_first_bucket_wins_ties():
    # one hit each for remote_work ("remote") and saas ("saas")
    assert classify_domain("remote saas", []) == "remote_work"
