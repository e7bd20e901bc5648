"""Negative-signal gate run before the weighted blend."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..config import AnalyzerConfig
from .signals import LanguageRelevance, analyze_language
from .text_utils import count_group_matches, count_words

BLOCKED_KEYWORDS_REASON = "Contains blocked keywords"
NEGATIVE_SIGNALS_REASON = "Too many negative signals"
TOO_SHORT_REASON = "Content too short"
WRONG_LANGUAGE_REASON = "Content not in target language"


@dataclass(frozen=True)
class GateResult:
    """Outcome of the negative-signal checks."""
    should_block: bool
    reason: str
    has_blocked_keywords: bool
    negative_score: int
    is_too_short: bool
    is_wrong_language: bool
    word_count: int
    matched_blocked_keywords: tuple[str, ...] = ()
    negative_matches: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), hash=False)


def check_negative_signals(
    title: str,
    content: str,
    config: AnalyzerConfig,
    language: LanguageRelevance | None = None,
) -> GateResult:
    """Decide whether content is rejected before scoring.

    All four checks are always evaluated. The reason reports the first
    failing check in this order: blocked keyword, negative pattern
    density, length floor, language.

    Args:
        title: Page title
        content: Extracted page text
        config: Analyzer configuration
        language: Precomputed language analysis of content, if available

    Returns:
        Gate result
    """
    tables = config.tables
    text = f"{title} {content}"
    text_lower = text.lower()

    matched_blocked = tuple(
        keyword for keyword in tables.blocked_keywords
        if keyword.lower() in text_lower
    )
    has_blocked = bool(matched_blocked)

    negative_matches = count_group_matches(tables.negative_patterns, text)
    negative_score = sum(negative_matches.values())
    too_negative = negative_score > config.negative_signal_limit

    word_count = count_words(content)
    is_too_short = word_count < config.minimum_word_count

    if language is None:
        language = analyze_language(
            content,
            tables,
            min_target_percent=config.target_language_min_percent,
            max_foreign_percent=config.foreign_script_max_percent,
        )
    is_wrong_language = not language.is_target_language

    if has_blocked:
        reason = BLOCKED_KEYWORDS_REASON
    elif too_negative:
        reason = NEGATIVE_SIGNALS_REASON
    elif is_too_short:
        reason = TOO_SHORT_REASON
    elif is_wrong_language:
        reason = WRONG_LANGUAGE_REASON
    else:
        reason = ""

    return GateResult(
        should_block=bool(reason),
        reason=reason,
        has_blocked_keywords=has_blocked,
        negative_score=negative_score,
        is_too_short=is_too_short,
        is_wrong_language=is_wrong_language,
        word_count=word_count,
        matched_blocked_keywords=matched_blocked,
        negative_matches=MappingProxyType(negative_matches),
    )
