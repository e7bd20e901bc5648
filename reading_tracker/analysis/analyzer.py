"""
Content relevance analyzer.

Decides whether a page or post is worth tracking as learning material.
A negative-signal gate runs first and can reject content outright; content
that passes is measured by independent signal extractors whose scores are
blended with fixed weights into a single 0-100 learning score.
"""

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, is_dataclass
from typing import Any

from ..config import AnalyzerConfig, ScoringWeights, build_analyzer_config, get_settings
from ..logging import get_logger
from .gate import GateResult, check_negative_signals
from .platform import PlatformSignal, analyze_platform
from .signals import (
    ContentQuality,
    LanguageRelevance,
    LearningIndicators,
    SourceCredibility,
    TopicalRelevance,
    analyze_content_quality,
    analyze_language,
    analyze_source_credibility,
    analyze_topics,
    detect_learning_indicators,
)

logger = get_logger(__name__)

OTHER_CATEGORY = "other"
MANUAL_QUEUE_CATEGORY = "newsletter_queue"

HIGH_VALUE_REASON = "High learning value"
LOW_VALUE_REASON = "Low learning value"
MANUAL_REASON = "Manually curated"


def _to_plain(value: Any) -> Any:
    # asdict cannot copy the read-only mappings held by the signal records
    if is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class SignalBundle:
    """All signals gathered for one analysis.

    Only the gate is populated when the gate blocked the content.
    """
    gate: GateResult
    content_quality: ContentQuality | None = None
    learning_indicators: LearningIndicators | None = None
    language_relevance: LanguageRelevance | None = None
    topical_relevance: TopicalRelevance | None = None
    source_credibility: SourceCredibility | None = None
    platform_specific: PlatformSignal | None = None

    @property
    def is_gated(self) -> bool:
        return self.gate.should_block


@dataclass(frozen=True)
class AnalysisResult:
    """Tracking decision for one page."""
    should_track: bool
    learning_score: int
    category: str
    reason: str
    signals: SignalBundle

    def to_dict(self) -> dict[str, Any]:
        """Convert result to a plain dictionary for serialization."""
        return _to_plain(self)


@dataclass(frozen=True)
class ManualAdmission:
    """Fixed-score result for an item a user queued by hand."""
    url: str
    title: str
    learning_score: int
    category: str = MANUAL_QUEUE_CATEGORY
    reason: str = MANUAL_REASON
    should_track: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def blend_scores(signals: SignalBundle, weights: ScoringWeights) -> int:
    """Weighted sum of the five primary signal scores.

    Rounds half up and clamps to 0-100. The platform signal is not part
    of the blend.
    """
    if signals.is_gated:
        return 0

    total = 0.0
    if signals.content_quality is not None:
        total += signals.content_quality.quality_score * weights.content_quality
    if signals.learning_indicators is not None:
        total += signals.learning_indicators.learning_score * weights.learning_indicators
    if signals.language_relevance is not None:
        total += signals.language_relevance.language_score * weights.language_relevance
    if signals.topical_relevance is not None:
        total += signals.topical_relevance.topical_relevance_score * weights.topical_relevance
    if signals.source_credibility is not None:
        total += signals.source_credibility.credibility_score * weights.source_credibility

    # Trim float noise before rounding so 57.4999999 rounds like 57.5
    score = math.floor(round(total, 6) + 0.5)
    return max(0, min(100, score))


class ContentAnalyzer:
    """Scores pages for learning value using heuristic signals."""

    def __init__(self, config: AnalyzerConfig | None = None):
        """Initialize analyzer with an immutable configuration."""
        self.config = config if config is not None else build_analyzer_config(get_settings())

    def analyze(self, url: str, title: str, content: str) -> AnalysisResult:
        """Analyze one page and decide whether to track it.

        Args:
            url: Page URL, need not be valid
            title: Page title, may be empty
            content: Extracted plain text, may be empty

        Returns:
            Analysis result with score, category and all signals
        """
        url = url or ""
        title = title or ""
        content = content or ""
        config = self.config
        tables = config.tables

        language = analyze_language(
            content,
            tables,
            min_target_percent=config.target_language_min_percent,
            max_foreign_percent=config.foreign_script_max_percent,
        )
        gate = check_negative_signals(title, content, config, language=language)

        if gate.should_block:
            logger.debug(
                "content_blocked",
                url=url,
                reason=gate.reason,
                negative_score=gate.negative_score,
                word_count=gate.word_count,
            )
            return AnalysisResult(
                should_track=False,
                learning_score=0,
                category=OTHER_CATEGORY,
                reason=gate.reason,
                signals=SignalBundle(gate=gate),
            )

        topical = analyze_topics(title, content, tables)
        signals = SignalBundle(
            gate=gate,
            content_quality=analyze_content_quality(content, tables),
            learning_indicators=detect_learning_indicators(title, content, tables),
            language_relevance=language,
            topical_relevance=topical,
            source_credibility=analyze_source_credibility(url, tables),
            platform_specific=analyze_platform(url, title, content, tables),
        )

        learning_score = blend_scores(signals, config.weights)
        should_track = learning_score >= config.min_learning_score
        category = topical.primary_topic or OTHER_CATEGORY

        logger.debug(
            "content_analyzed",
            url=url,
            learning_score=learning_score,
            should_track=should_track,
            category=category,
            threshold=config.min_learning_score,
        )

        return AnalysisResult(
            should_track=should_track,
            learning_score=learning_score,
            category=category,
            reason=HIGH_VALUE_REASON if should_track else LOW_VALUE_REASON,
            signals=signals,
        )

    def manual_admit(self, url: str, title: str = "") -> ManualAdmission:
        """Admit a hand-picked item to the newsletter queue.

        Manually curated items bypass automatic scoring and receive a
        fixed elevated score.
        """
        admission = ManualAdmission(
            url=url or "",
            title=title or "",
            learning_score=self.config.manual_admit_score,
        )
        logger.info("manual_admission", url=admission.url, learning_score=admission.learning_score)
        return admission


def analyze_content(url: str, title: str, content: str,
                    config: AnalyzerConfig | None = None) -> AnalysisResult:
    """Convenience function for a single analysis."""
    return ContentAnalyzer(config).analyze(url, title, content)
