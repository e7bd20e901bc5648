"""Content relevance analysis."""

from .analyzer import (
    AnalysisResult,
    ContentAnalyzer,
    ManualAdmission,
    SignalBundle,
    analyze_content,
    blend_scores,
)
from .gate import GateResult, check_negative_signals
from .platform import Platform, analyze_platform, classify_platform
from .signals import (
    ContentQuality,
    LanguageRelevance,
    LearningIndicators,
    SourceCredibility,
    TopicalRelevance,
)

__all__ = [
    'analyze_content',
    'ContentAnalyzer',
    'AnalysisResult',
    'ManualAdmission',
    'SignalBundle',
    'blend_scores',
    'check_negative_signals',
    'GateResult',
    'Platform',
    'analyze_platform',
    'classify_platform',
    'ContentQuality',
    'LearningIndicators',
    'LanguageRelevance',
    'TopicalRelevance',
    'SourceCredibility',
]
