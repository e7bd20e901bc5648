"""Configuration management for Reading Tracker."""

import re
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).parent / "data" / "reference.yaml"

WEIGHT_SUM_TOLERANCE = 1e-6


class ConfigurationError(ValueError):
    """Raised when analyzer configuration or reference data is invalid."""


class PatternGroup(BaseModel):
    """Named lexical pattern with a per-match weight."""
    model_config = ConfigDict(frozen=True)

    name: str
    pattern: str
    weight: int = 1

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid pattern {v!r}: {e}") from e
        return v


class ReferenceTables(BaseModel):
    """Static lexical and domain tables used by the analyzer."""
    model_config = ConfigDict(frozen=True)

    # ── Topics ─────────────────────────────────────────────────────────────
    topics: Mapping[str, tuple[str, ...]]

    # ── Lexical patterns ───────────────────────────────────────────────────
    learning_patterns: tuple[PatternGroup, ...]
    negative_patterns: tuple[PatternGroup, ...]
    technical_terms: tuple[str, ...]
    actionable_verbs: tuple[str, ...]
    step_words: tuple[str, ...]
    reference_terms: tuple[str, ...]
    analytic_terms: tuple[str, ...]
    transcript_terms: tuple[str, ...]
    blocked_keywords: tuple[str, ...]

    # ── Domains ────────────────────────────────────────────────────────────
    high_credibility_domains: tuple[str, ...]
    educational_domains: tuple[str, ...]
    video_domains: tuple[str, ...]
    link_aggregator_domains: tuple[str, ...]
    microblog_domains: tuple[str, ...]
    professional_network_domains: tuple[str, ...] = ()

    # ── Platform allow-lists ───────────────────────────────────────────────
    educational_channels: tuple[str, ...] = ()
    learning_communities: tuple[str, ...] = ()

    # ── Scripts ────────────────────────────────────────────────────────────
    target_script: str = "[a-zA-Z]"
    foreign_script: str = "[\u0C00-\u0C7F]"

    @field_validator("topics")
    @classmethod
    def validate_topics(cls, v: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        """Require at least one topic and no empty keyword lists, then freeze."""
        if not v:
            raise ValueError("At least one topic must be configured")
        for topic, keywords in v.items():
            if not keywords:
                raise ValueError(f"Topic '{topic}' has no keywords")
        return MappingProxyType(dict(v))

    @field_validator("target_script", "foreign_script")
    @classmethod
    def validate_script(cls, v: str) -> str:
        """Script classes must be valid regular expressions."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid character class {v!r}: {e}") from e
        return v


class ScoringWeights(BaseModel):
    """Blend weights for the five primary signals."""
    model_config = ConfigDict(frozen=True)

    content_quality: float = 0.30
    learning_indicators: float = 0.40
    language_relevance: float = 0.10
    topical_relevance: float = 0.15
    source_credibility: float = 0.05

    @field_validator("*")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        """Validate weight values are between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError("Weight must be between 0 and 1")
        return v

    @model_validator(mode="after")
    def validate_sum(self) -> "ScoringWeights":
        """Weights must sum to 1.0."""
        if abs(self.total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Scoring weights sum to {self.total}, should be 1.0")
        return self

    @property
    def total(self) -> float:
        return (
            self.content_quality
            + self.learning_indicators
            + self.language_relevance
            + self.topical_relevance
            + self.source_credibility
        )


class AnalyzerConfig(BaseModel):
    """Immutable configuration handed to the content analyzer."""
    model_config = ConfigDict(frozen=True)

    min_learning_score: int = Field(50, ge=0, le=100)
    minimum_word_count: int = Field(300, ge=0)
    negative_signal_limit: int = Field(3, ge=0)
    target_language_min_percent: float = Field(70.0, ge=0, le=100)
    foreign_script_max_percent: float = Field(5.0, ge=0, le=100)
    manual_admit_score: int = Field(75, ge=0, le=100)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    tables: ReferenceTables = Field(default_factory=lambda: load_reference_tables())


class Settings(BaseSettings):
    """Main application settings."""

    # ── Decision thresholds ────────────────────────────────────────────────
    min_learning_score: int = Field(50, description="Minimum learning score to track content")
    minimum_word_count: int = Field(300, description="Word count below which content is rejected")
    negative_signal_limit: int = Field(3, description="Negative pattern matches tolerated before blocking")
    manual_admit_score: int = Field(75, description="Fixed score for manually curated items")

    # ── Scoring Weights ────────────────────────────────────────────────────
    w_content_quality: float = Field(0.30, description="Content quality weight")
    w_learning_indicators: float = Field(0.40, description="Learning indicator weight")
    w_language_relevance: float = Field(0.10, description="Language relevance weight")
    w_topical_relevance: float = Field(0.15, description="Topical relevance weight")
    w_source_credibility: float = Field(0.05, description="Source credibility weight")

    # ── Reference data ─────────────────────────────────────────────────────
    reference_path: Path | None = Field(None, description="Override for the reference tables YAML")

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = Field("INFO", description="Log level")
    json_logging: bool = Field(False, description="Enable JSON logging")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "w_content_quality",
        "w_learning_indicators",
        "w_language_relevance",
        "w_topical_relevance",
        "w_source_credibility",
    )
    @classmethod
    def validate_weights(cls, v: float) -> float:
        """Validate weight values are between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError("Weight must be between 0 and 1")
        return v

    @field_validator("min_learning_score", "manual_admit_score")
    @classmethod
    def validate_score(cls, v: int) -> int:
        """Validate score thresholds are within 0-100."""
        if not 0 <= v <= 100:
            raise ValueError("Score must be between 0 and 100")
        return v


@lru_cache(maxsize=8)
def load_reference_tables(path: Path | None = None) -> ReferenceTables:
    """Load reference tables from YAML.

    Args:
        path: YAML file to read, defaults to the packaged tables

    Returns:
        Validated, immutable reference tables

    Raises:
        ConfigurationError: If the file is missing or its content is invalid
    """
    config_path = Path(path) if path is not None else DEFAULT_REFERENCE_PATH
    if not config_path.exists():
        raise ConfigurationError(f"Reference tables not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Reference tables must be a mapping: {config_path}")

    try:
        return ReferenceTables(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid reference tables in {config_path}: {e}") from e


def build_analyzer_config(settings: "Settings") -> AnalyzerConfig:
    """Build the immutable analyzer configuration from settings."""
    try:
        weights = ScoringWeights(
            content_quality=settings.w_content_quality,
            learning_indicators=settings.w_learning_indicators,
            language_relevance=settings.w_language_relevance,
            topical_relevance=settings.w_topical_relevance,
            source_credibility=settings.w_source_credibility,
        )
        return AnalyzerConfig(
            min_learning_score=settings.min_learning_score,
            minimum_word_count=settings.minimum_word_count,
            negative_signal_limit=settings.negative_signal_limit,
            manual_admit_score=settings.manual_admit_score,
            weights=weights,
            tables=load_reference_tables(settings.reference_path),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid analyzer configuration: {e}") from e


# Global instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def validate_config(settings: Settings) -> bool:
    """Validate configuration completeness."""
    try:
        build_analyzer_config(settings)
        return True

    except ConfigurationError as e:
        logger.error("config_validation_failed", error=str(e))
        return False
