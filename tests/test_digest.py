"""Tests for digest selection."""

import pytest

from reading_tracker.digest import (
    CURATED_SECTION,
    ScoredItem,
    is_professional_network,
    section_title,
    select_for_digest,
)


@pytest.fixture
def items():
    return [
        ScoredItem("https://arxiv.org/abs/1", "Attention", 91, "technology"),
        ScoredItem("https://example.com/b", "Caching", 60, "technology"),
        ScoredItem("https://example.com/c", "Telescopes", 70, "science"),
        ScoredItem("https://example.com/d", "Weak", 40, "technology"),
        ScoredItem("https://www.linkedin.com/pulse/e", "Hiring", 88, "business"),
        ScoredItem("https://www.linkedin.com/posts/f", "Queued post", 75, "newsletter_queue"),
        ScoredItem("https://example.com/g", "Old queue item", 10, "newsletter_queue"),
    ]


def titles(section):
    return [item.title for item in section]


def test_default_selection(items):
    sections = select_for_digest(items)

    assert list(sections) == [CURATED_SECTION, "technology", "science"]
    assert titles(sections[CURATED_SECTION]) == ["Queued post", "Old queue item"]
    assert titles(sections["technology"]) == ["Attention", "Caching"]
    assert titles(sections["science"]) == ["Telescopes"]


def test_curated_items_ignore_threshold_and_filters(items):
    sections = select_for_digest(items, min_score=100, categories=["science"])

    assert list(sections) == [CURATED_SECTION]
    assert len(sections[CURATED_SECTION]) == 2


def test_professional_network_included_on_request(items):
    sections = select_for_digest(items, include_professional=True)

    assert titles(sections["business"]) == ["Hiring"]


def test_category_filter(items):
    sections = select_for_digest(items, categories=["science"])

    assert list(sections) == [CURATED_SECTION, "science"]


def test_min_score(items):
    sections = select_for_digest(items, min_score=0)

    assert titles(sections["technology"]) == ["Attention", "Caching", "Weak"]


def test_sections_sorted_by_score():
    items = [
        ScoredItem("https://example.com/1", "Low", 55, "science"),
        ScoredItem("https://example.com/2", "High", 95, "science"),
        ScoredItem("https://example.com/3", "Mid", 70, "science"),
    ]

    assert titles(select_for_digest(items)["science"]) == ["High", "Mid", "Low"]


def test_empty_input():
    assert select_for_digest([]) == {}


def test_custom_professional_domains(items):
    sections = select_for_digest(items, professional_domains=["arxiv.org"])

    assert titles(sections["technology"]) == ["Caching"]
    assert titles(sections["business"]) == ["Hiring"]


@pytest.mark.parametrize("url,expected", [
    ("https://www.linkedin.com/posts/abc", True),
    ("https://linkedin.com/in/someone", True),
    ("https://notlinkedin.com/post", False),
    ("https://example.com/linkedin.com", False),
])
def test_is_professional_network(url, expected):
    assert is_professional_network(url) is expected


@pytest.mark.parametrize("category,title", [
    (CURATED_SECTION, "Curated Articles"),
    ("technology", "Technology & Development"),
    ("other", "Other Insights"),
    ("deep_learning", "Deep learning"),
])
def test_section_title(category, title):
    assert section_title(category) == title


def test_scored_item_from_dict():
    item = ScoredItem.from_dict({"url": "https://example.com", "learning_score": "75", "title": None})

    assert item.learning_score == 75
    assert item.title == ""
    assert item.category == "other"
    assert not item.is_curated
