"""
Independent signal extractors for the content relevance analyzer.

Each extractor is a pure function of the page text and the reference
tables, producing one frozen measurement record:
- Content quality (length, structure, code, references)
- Learning indicators (educational and analytical phrasing)
- Language relevance (target script share)
- Topical relevance (best matching topic)
- Source credibility (publisher allow-lists)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from ..config import ReferenceTables
from .text_utils import (
    count_group_matches,
    count_matches,
    count_words,
    extract_domain,
    has_match,
    reading_time_minutes,
    word_pattern,
)

CODE_PATTERN: Final[str] = r"<code[^>]*>|```|\bclass\s+\w+|\bfunction\s+\w+|\bdef\s+\w+|\bconst\s+\w+"
"""Inline code markup, fences and common declaration keywords."""

STRUCTURE_PATTERN: Final[str] = r"<h[1-6]>|<li>|<ol>|<ul>|\n#{1,6}\s|\n\*\s|\n\d+\."
"""HTML headings and lists, Markdown headings, bullets and numbered items."""

LINK_PATTERN: Final[str] = r"<a\s+href|https?://[^\s<>]+"

INTERROGATIVE_PATTERN: Final[str] = r"\b(what|why|how|when|where)\b"
"""Interrogative word; counts only when a question mark follows on the same line."""

# Quality score tiers: (minimum, points), checked top-down
WORD_COUNT_TIERS: Final[tuple[tuple[int, int], ...]] = ((1000, 30), (500, 20), (300, 10))
READING_TIME_TIERS: Final[tuple[tuple[int, int], ...]] = ((10, 20), (5, 15), (3, 10))

CODE_POINTS: Final[int] = 15
STRUCTURE_POINTS: Final[int] = 10
REFERENCE_POINTS: Final[int] = 15

PATTERN_MATCH_POINTS: Final[int] = 8
MAX_PATTERN_POINTS: Final[int] = 40
QUESTION_POINTS: Final[int] = 15
STEP_POINTS: Final[int] = 10
TECHNICAL_TERM_POINTS: Final[int] = 3
MAX_TECHNICAL_POINTS: Final[int] = 20
ACTIONABLE_POINTS: Final[int] = 15

TOPIC_SATURATION: Final[int] = 5
"""Topic score at which topical relevance reaches 100."""

HIGH_CREDIBILITY_SCORE: Final[int] = 100
EDUCATIONAL_SCORE: Final[int] = 80
NEUTRAL_CREDIBILITY_SCORE: Final[int] = 50

MAX_SCORE: Final[int] = 100


@dataclass(frozen=True)
class ContentQuality:
    """Structural quality of the page body."""
    word_count: int
    reading_time_minutes: int
    has_code_examples: bool
    has_structure: bool
    has_references: bool
    has_links: bool
    quality_score: int


@dataclass(frozen=True)
class LearningIndicators:
    """Educational and analytical phrasing found in title and body."""
    matched_pattern_count: int
    has_question_answer_format: bool
    has_step_by_step: bool
    technical_term_count: int
    has_actionable_verbs: bool
    learning_score: int
    matches_by_group: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), hash=False)


@dataclass(frozen=True)
class LanguageRelevance:
    """Share of the body written in the target script."""
    is_target_language: bool
    target_language_char_percent: float
    other_script_char_percent: float
    language_score: int


@dataclass(frozen=True)
class TopicalRelevance:
    """Per-topic keyword strength and the winning topic."""
    score_per_topic: Mapping[str, int] = field(hash=False)
    primary_topic: str | None
    topical_relevance_score: int


@dataclass(frozen=True)
class SourceCredibility:
    """Publisher trust derived from the URL's hostname."""
    domain: str
    is_high_credibility: bool
    is_educational: bool
    credibility_score: int


def _tier_points(value: int, tiers: tuple[tuple[int, int], ...]) -> int:
    for minimum, points in tiers:
        if value >= minimum:
            return points
    return 0


def has_question_format(text: str) -> bool:
    """Check for an interrogative word followed by '?' on the same line.

    Only the part of each line before its last '?' is searched, which
    keeps the check linear on long single-line text.
    """
    for line in text.split("\n"):
        end = line.rfind("?")
        if end > 0 and has_match(INTERROGATIVE_PATTERN, line[:end]):
            return True
    return False


def analyze_content_quality(content: str, tables: ReferenceTables) -> ContentQuality:
    """Measure length, reading time and structural markers of the body.

    Args:
        content: Extracted page text
        tables: Reference tables

    Returns:
        Content quality record with a 0-100 score
    """
    word_count = count_words(content)
    reading_time = reading_time_minutes(word_count)

    has_code = has_match(CODE_PATTERN, content)
    has_structure = has_match(STRUCTURE_PATTERN, content)
    has_references = has_match(word_pattern(tables.reference_terms), content)
    has_links = has_match(LINK_PATTERN, content)

    score = _tier_points(word_count, WORD_COUNT_TIERS)
    score += _tier_points(reading_time, READING_TIME_TIERS)
    if has_code:
        score += CODE_POINTS
    if has_structure:
        score += STRUCTURE_POINTS
    if has_references:
        score += REFERENCE_POINTS

    return ContentQuality(
        word_count=word_count,
        reading_time_minutes=reading_time,
        has_code_examples=has_code,
        has_structure=has_structure,
        has_references=has_references,
        has_links=has_links,
        quality_score=min(score, MAX_SCORE),
    )


def detect_learning_indicators(title: str, content: str, tables: ReferenceTables) -> LearningIndicators:
    """Detect language that signals educational or analytical intent.

    Args:
        title: Page title
        content: Extracted page text
        tables: Reference tables

    Returns:
        Learning indicator record with a 0-100 score
    """
    text = f"{title} {content}"

    matches_by_group = count_group_matches(tables.learning_patterns, text)
    matched = sum(matches_by_group.values())

    has_question = has_question_format(text)
    has_steps = has_match(word_pattern(tables.step_words), text)
    technical_terms = count_matches(word_pattern(tables.technical_terms), text)
    has_actionable = has_match(word_pattern(tables.actionable_verbs), text)

    score = min(matched * PATTERN_MATCH_POINTS, MAX_PATTERN_POINTS)
    if has_question:
        score += QUESTION_POINTS
    if has_steps:
        score += STEP_POINTS
    score += min(technical_terms * TECHNICAL_TERM_POINTS, MAX_TECHNICAL_POINTS)
    if has_actionable:
        score += ACTIONABLE_POINTS

    return LearningIndicators(
        matched_pattern_count=matched,
        has_question_answer_format=has_question,
        has_step_by_step=has_steps,
        technical_term_count=technical_terms,
        has_actionable_verbs=has_actionable,
        learning_score=min(score, MAX_SCORE),
        matches_by_group=MappingProxyType(matches_by_group),
    )


def analyze_language(
    content: str,
    tables: ReferenceTables,
    min_target_percent: float = 70.0,
    max_foreign_percent: float = 5.0,
) -> LanguageRelevance:
    """Compute target and foreign script shares of the body.

    Percentages are taken over every character, whitespace included.
    Empty content counts as 0% of both.
    """
    total = len(content) if content else 0
    if total:
        target_percent = count_matches(tables.target_script, content) / total * 100
        foreign_percent = count_matches(tables.foreign_script, content) / total * 100
    else:
        target_percent = foreign_percent = 0.0

    is_target = target_percent > min_target_percent and foreign_percent < max_foreign_percent

    return LanguageRelevance(
        is_target_language=is_target,
        target_language_char_percent=target_percent,
        other_script_char_percent=foreign_percent,
        language_score=MAX_SCORE if is_target else 0,
    )


def analyze_topics(title: str, content: str, tables: ReferenceTables) -> TopicalRelevance:
    """Score each configured topic and pick the strongest.

    Every keyword match in the body adds 1 and every match in the title
    adds 2. Ties go to the topic listed first in the reference tables.
    """
    scores: dict[str, int] = {}
    for topic, keywords in tables.topics.items():
        score = 0
        for keyword in keywords:
            pattern = word_pattern((keyword,))
            score += count_matches(pattern, content)
            score += 2 * count_matches(pattern, title)
        scores[topic] = score

    max_score = max(scores.values())
    primary_topic = None
    if max_score > 0:
        # dicts keep insertion order, so this is the first topic at max_score
        primary_topic = next(topic for topic, score in scores.items() if score == max_score)

    return TopicalRelevance(
        score_per_topic=MappingProxyType(scores),
        primary_topic=primary_topic,
        topical_relevance_score=min(MAX_SCORE, round(max_score / TOPIC_SATURATION * 100)),
    )


def analyze_source_credibility(url: str, tables: ReferenceTables) -> SourceCredibility:
    """Weight the publisher using static allow-lists."""
    domain = extract_domain(url)

    is_high = any(d in domain for d in tables.high_credibility_domains)
    is_educational = any(d in domain for d in tables.educational_domains)

    if is_high:
        score = HIGH_CREDIBILITY_SCORE
    elif is_educational:
        score = EDUCATIONAL_SCORE
    else:
        score = NEUTRAL_CREDIBILITY_SCORE

    return SourceCredibility(
        domain=domain,
        is_high_credibility=is_high,
        is_educational=is_educational,
        credibility_score=score,
    )
