"""Tests for the batch pipeline."""

from datetime import timedelta

import pytest

from novascan.processing.pipeline import PostPipeline, filter_and_process_posts


def _annotated(pipeline, posts):
    return pipeline.annotate(posts)


def test_annotate_sets_analysis_fields(make_post):
    post = make_post(title="Really great remote tool", content="Our remote team loves it, very helpful.")

    PostPipeline().annotate([post])

    assert post.sentiment is not None
    assert post.sentiment.label == "positive"
    assert post.quality is not None
    assert post.quality.wordCount > 0
    assert post.domain_context == "remote_work"


def test_pipeline_drops_noise_duplicates_and_low_quality(make_post, now):
    pipeline = PostPipeline()
    keep = make_post(url="https://x.com/a", score=30, num_comments=4)
    dup = make_post(url="https://www.x.com/a", score=2, num_comments=0)
    redacted = make_post(content="[removed]" + " padding" * 10)
    posts = _annotated(pipeline, [keep, dup, redacted])

    result = pipeline.run(posts, now=now)

    assert [p.id for p in result] == [keep.id]


def test_pipeline_without_query_leaves_relevance_untouched(make_post, now):
    pipeline = PostPipeline()
    post = make_post()
    pipeline.annotate([post])

    result = pipeline.run([post], now=now)

    assert result[0].relevance_score is None
    assert result[0].tags


def test_pipeline_with_query_ranks_and_boosts(make_post, now):
    pipeline = PostPipeline()
    on_topic = make_post(
        title="Invoice software for freelancers",
        content="Which invoice software handles recurring billing well?",
        created_at=now - timedelta(hours=6),
    )
    off_topic = make_post(
        title="Favourite mechanical keyboards this year",
        content="Looking for quiet switches that still feel tactile for long sessions.",
        created_at=now - timedelta(days=3),
    )
    posts = _annotated(pipeline, [off_topic, on_topic])

    result = pipeline.run(posts, query="invoice software", now=now)

    assert [p.id for p in result] == [on_topic.id, off_topic.id]
    # 50 title + 30 body + engagement, boosted by 1.5 and not clipped
    assert on_topic.relevance_score > 100


def test_blank_query_skips_relevance(make_post, now):
    post = make_post()
    pipeline = PostPipeline()
    pipeline.annotate([post])

    result = pipeline.run([post], query="   ", now=now)

    assert result[0].relevance_score is None


def test_empty_batch(now):
    assert filter_and_process_posts([], query="anything", now=now) == []


def test_min_quality_threshold(make_post, now):
    pipeline = PostPipeline(min_quality_score=95)
    post = make_post(score=0, num_comments=1, author="")
    pipeline.annotate([post])

    assert pipeline.run([post], now=now) == []


def test_rerun_reaches_fixed_point(make_post, now):
    pipeline = PostPipeline()
    posts = _annotated(pipeline, [
        make_post(title="Invoice software for freelancers", url="https://a.com/1"),
        make_post(title="Invoice software for freelancers!", url="https://b.com/2", score=1),
        make_post(title="Time tracking apps that sync with invoices", url="https://c.com/3"),
    ])

    once = pipeline.run(posts, now=now)
    twice = pipeline.run(once, now=now)
    thrice = pipeline.run(twice, now=now)

    assert [p.id for p in twice] == [p.id for p in once]
    assert [p.tags for p in thrice] == [p.tags for p in twice]


@pytest.mark.parametrize("count", [25])
def test_tags_never_exceed_cap(make_post, now, count):
    pipeline = PostPipeline()
    post = make_post(
        tags=[f"tag{i}" for i in range(count)],
        content="ai ml saas api sdk cloud mobile web desktop automation analytics data "
                "remote virtual distributed async realtime using someproduct",
    )
    pipeline.annotate([post])

    result = pipeline.run([post], now=now)

    assert len(result[0].tags) <= 20
