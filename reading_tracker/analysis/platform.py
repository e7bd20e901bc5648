"""
Platform-specific heuristics.

Video sites, link aggregators and microblogs have page structures that
mislead the generic signals, so each gets its own handler. The platform
is chosen by a pure classification of the hostname, and every Platform
member has exactly one handler.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from ..config import ReferenceTables
from .text_utils import domain_matches, extract_domain, has_match, word_pattern

THREAD_PATTERN: Final[str] = r"\bthread\b|🧵|\b1/\d+\b"
URL_PATTERN: Final[str] = r"https?://[^\s<>]+"
COMMUNITY_PATTERN: Final[re.Pattern[str]] = re.compile(r"/r/([^/?#]+)", re.IGNORECASE)

SHORT_POST_CHARS: Final[int] = 280
QUALITY_DISCUSSION_CHARS: Final[int] = 500


class Platform(str, Enum):
    """Platforms with dedicated scoring heuristics."""
    GENERIC = "generic"
    VIDEO = "video"
    LINK_AGGREGATOR = "link_aggregator"
    MICROBLOG = "microblog"


@dataclass(frozen=True)
class GenericSignal:
    platform_score: int = 50
    platform: Platform = Platform.GENERIC


@dataclass(frozen=True)
class VideoSignal:
    is_educational_channel: bool
    has_transcript_indicators: bool
    is_short_form: bool
    platform_score: int
    platform: Platform = Platform.VIDEO


@dataclass(frozen=True)
class AggregatorSignal:
    community: str | None
    is_learning_community: bool
    has_quality_discussion: bool
    platform_score: int
    platform: Platform = Platform.LINK_AGGREGATOR


@dataclass(frozen=True)
class MicroblogSignal:
    has_thread: bool
    has_links: bool
    is_short_post: bool
    platform_score: int
    platform: Platform = Platform.MICROBLOG


PlatformSignal = GenericSignal | VideoSignal | AggregatorSignal | MicroblogSignal


def classify_platform(domain: str, tables: ReferenceTables) -> Platform:
    """Map a hostname to its platform, GENERIC when none matches."""
    if domain_matches(domain, tables.video_domains):
        return Platform.VIDEO
    if domain_matches(domain, tables.link_aggregator_domains):
        return Platform.LINK_AGGREGATOR
    if domain_matches(domain, tables.microblog_domains):
        return Platform.MICROBLOG
    return Platform.GENERIC


def analyze_video(url: str, title: str, content: str, tables: ReferenceTables) -> VideoSignal:
    """Favour known educational channels, penalise short-form clips."""
    channels = word_pattern(tables.educational_channels)
    is_educational = has_match(channels, content) or has_match(channels, url)
    has_transcript = has_match(word_pattern(tables.transcript_terms), content)
    is_short_form = "short" in title.lower() or "shorts" in url.lower()

    if is_educational:
        score = 90
    elif is_short_form:
        score = 20
    else:
        score = 60

    return VideoSignal(
        is_educational_channel=is_educational,
        has_transcript_indicators=has_transcript,
        is_short_form=is_short_form,
        platform_score=score,
    )


def analyze_link_aggregator(url: str, title: str, content: str, tables: ReferenceTables) -> AggregatorSignal:
    """Favour learning communities and long analytical threads."""
    match = COMMUNITY_PATTERN.search(url)
    community = match.group(1).lower() if match else None
    is_learning = community in tables.learning_communities

    has_quality_discussion = (
        len(content) > QUALITY_DISCUSSION_CHARS
        and has_match(word_pattern(tables.analytic_terms), content)
    )

    if is_learning:
        score = 80
    elif has_quality_discussion:
        score = 60
    else:
        score = 30

    return AggregatorSignal(
        community=community,
        is_learning_community=is_learning,
        has_quality_discussion=has_quality_discussion,
        platform_score=score,
    )


def analyze_microblog(url: str, title: str, content: str, tables: ReferenceTables) -> MicroblogSignal:
    """Favour threads and posts with outbound links, penalise very short posts."""
    has_thread = has_match(THREAD_PATTERN, content)
    has_links = has_match(URL_PATTERN, content)
    is_short = len(content) < SHORT_POST_CHARS

    if has_thread:
        score = 70
    elif has_links:
        score = 50
    else:
        score = 20

    if is_short and not has_thread:
        score = min(score, 30)

    return MicroblogSignal(
        has_thread=has_thread,
        has_links=has_links,
        is_short_post=is_short,
        platform_score=score,
    )


def analyze_generic(url: str, title: str, content: str, tables: ReferenceTables) -> GenericSignal:
    return GenericSignal()


PLATFORM_HANDLERS: Final[dict[Platform, Callable[[str, str, str, ReferenceTables], PlatformSignal]]] = {
    Platform.GENERIC: analyze_generic,
    Platform.VIDEO: analyze_video,
    Platform.LINK_AGGREGATOR: analyze_link_aggregator,
    Platform.MICROBLOG: analyze_microblog,
}


def analyze_platform(url: str, title: str, content: str, tables: ReferenceTables) -> PlatformSignal:
    """Classify the URL's platform and run its handler."""
    platform = classify_platform(extract_domain(url), tables)
    return PLATFORM_HANDLERS[platform](url, title, content, tables)
