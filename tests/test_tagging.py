"""Tests for tag enrichment."""

from novascan.config import Heuristics, TagRules
from novascan.processing.tagging import TagEnricher, enrich_tags, extract_product_mentions


def test_existing_tags_first_and_lowercased(make_post):
    post = make_post(tags=["Freelance", "SaaS"], title="Quarterly report", content="nothing here")

    tags = enrich_tags(post)

    assert tags[:2] == ["freelance", "saas"]


def test_problem_and_solution_tags(make_post):
    post = make_post(title="Expensive and slow", content="Looking for a better tool")

    tags = enrich_tags(post)

    assert "problem" in tags
    assert "solution" in tags
    assert tags.index("problem") < tags.index("solution")


def test_tech_keywords_hyphenated(make_post):
    post = make_post(title="Machine learning dashboards", content="cloud analytics")

    tags = enrich_tags(post)

    assert "machine-learning" in tags
    assert "cloud" in tags
    assert "analytics" in tags


def test_product_mentions():
    mentions = extract_product_mentions("we switched to notion instead of trello, using airtable too")

    assert "airtable" in mentions
    assert "trello" in mentions
    # "to" is too short to count
    assert "to" not in mentions


def test_product_mentions_capped_at_five():
    text = " ".join(f"using product{i}" for i in range(10))

    assert len(extract_product_mentions(text)) == 5


def test_case_insensitive_dedup(make_post):
    post = make_post(tags=["Problem", "problem", "API"], title="api problem", content="an api issue")

    tags = enrich_tags(post)

    assert tags.count("problem") == 1
    assert tags.count("api") == 1


def test_tag_cap(make_post):
    post = make_post(
        tags=[f"existing{i}" for i in range(15)],
        title="AI ML SaaS API SDK cloud mobile web desktop automation",
        content="analytics data remote virtual distributed async realtime problem solution "
                "using alphatool with betatool gammatool is deltatool has",
    )

    tags = enrich_tags(post)

    assert len(tags) == 20
    assert tags[:15] == [f"existing{i}" for i in range(15)]


def test_custom_rules(make_post):
    heuristics = Heuristics(tags=TagRules(tech_keywords=["rust lang"]))
    post = make_post(title="Rust lang tips", content="nothing else")

    assert TagEnricher(heuristics).enrich(post) == ["rust-lang"]


def test_enrich_posts_in_place(make_post):
    post = make_post(title="A slow api", content="needs fixing")

    TagEnricher().enrich_posts([post])

    assert "api" in post.tags
