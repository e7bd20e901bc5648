"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["JSON_LOGGING"] = "false"

from reading_tracker.analysis import ContentAnalyzer
from reading_tracker.config import AnalyzerConfig, load_reference_tables

TECH_PARAGRAPH = (
    "The implementation of the attention algorithm depends on a clear software "
    "architecture. Each layer exposes a small API that the optimizer calls, and a "
    "database of checkpoints stores every intermediate tensor. We implement the "
    "encoder in Python and check it against the reference documentation for each "
    "module. The algorithm computes scaled dot products, normalizes them, and mixes "
    "the value vectors. When the sequence grows, the cost of the algorithm grows "
    "quadratically, so the framework splits long inputs into windows. How does the "
    "decoder reuse cached keys? It stores them per step and reads them back during "
    "generation."
)
"""97 words of technical prose."""

GENERIC_PARAGRAPH = (
    "The morning walk along the river was quiet and pleasant. A few people sat on "
    "the benches near the old bridge, reading newspapers and drinking coffee. The "
    "weather stayed mild all day long, and the light over the water changed slowly "
    "from grey to gold as the afternoon went on."
)
"""Exactly 50 words with no learning, topic or negative vocabulary."""

TELUGU_PHRASE = "తెలుగు భాష చాలా అందమైనది మరియు ప్రాచీనమైనది"
"""Six Telugu words."""

CODE_SAMPLE = (
    "\n## Example code\n"
    "```python\n"
    "def attention(query, key, value):\n"
    "    weights = softmax(query @ key.T)\n"
    "    return weights @ value\n"
    "```\n"
)


def generic_text(paragraphs: int) -> str:
    """Generic prose of exactly 50 * paragraphs words."""
    return " ".join([GENERIC_PARAGRAPH] * paragraphs)


@pytest.fixture
def tables():
    """Packaged reference tables."""
    return load_reference_tables()


@pytest.fixture
def config() -> AnalyzerConfig:
    """Default analyzer configuration."""
    return AnalyzerConfig()


@pytest.fixture
def analyzer(config) -> ContentAnalyzer:
    """Analyzer with default configuration."""
    return ContentAnalyzer(config)


@pytest.fixture
def technical_article() -> str:
    """Roughly 900 words of technical prose with headings and a code fence."""
    body = "\n\n".join([TECH_PARAGRAPH] * 9)
    return f"Notes from the model team.\n## Overview\n{body}\n{CODE_SAMPLE}"


@pytest.fixture
def weak_article() -> str:
    """350 words of plain prose."""
    return generic_text(7)


@pytest.fixture
def short_article() -> str:
    """250 words of plain prose."""
    return generic_text(5)


@pytest.fixture
def telugu_article() -> str:
    """360 words in Telugu script."""
    return " ".join([TELUGU_PHRASE] * 60)


@pytest.fixture
def sessions_file(tmp_path: Path, technical_article: str, short_article: str) -> Generator[Path, None, None]:
    """JSON-lines export with one strong, one weak and one queued session."""
    import orjson

    sessions = [
        {"id": 1, "url": "https://arxiv.org/abs/1234", "title": "A tutorial on transformer architecture",
         "content": technical_article, "learning_score": 0, "category": "other"},
        {"id": 2, "url": "https://example.com/walk", "title": "A walk", "excerpt": short_article,
         "learning_score": 40, "category": "other"},
        {"id": 3, "url": "https://www.linkedin.com/posts/abc", "title": "Queued post",
         "learning_score": 75, "category": "newsletter_queue"},
    ]
    path = tmp_path / "sessions.jsonl"
    path.write_bytes(b"\n".join(orjson.dumps(s) for s in sessions) + b"\n")
    yield path
