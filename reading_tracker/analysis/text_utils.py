"""Text and URL helpers shared by the signal extractors."""

import math
import re
from collections.abc import Iterable
from functools import lru_cache
from urllib.parse import urlparse

from ..config import PatternGroup

WORDS_PER_MINUTE = 250

NEVER_MATCHES = r"(?!)"


def count_words(text: str) -> int:
    """Count whitespace-delimited, non-empty tokens.

    Args:
        text: Input text

    Returns:
        Number of words
    """
    if not text:
        return 0
    return len(text.split())


def reading_time_minutes(word_count: int, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimated reading time, rounded up to whole minutes."""
    return math.ceil(word_count / words_per_minute)


def extract_domain(url: str) -> str:
    """Extract the lowercased hostname from a URL.

    Unparseable or schemeless URLs fall back to the whole string, so
    domain checks degrade to substring tests on the raw input.

    Args:
        url: URL string

    Returns:
        Hostname, or the lowercased input when no hostname can be found
    """
    if not url:
        return ""

    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None

    return hostname.lower() if hostname else url.lower()


def domain_matches(domain: str, candidates: Iterable[str]) -> bool:
    """Check if domain is one of candidates or a subdomain of one."""
    return any(domain == c or domain.endswith("." + c) for c in candidates)


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a case-insensitive pattern, cached by pattern text."""
    return re.compile(pattern, re.IGNORECASE)


@lru_cache(maxsize=128)
def word_pattern(words: tuple[str, ...]) -> str:
    """Build a whole-word alternation pattern from literal words."""
    if not words:
        return NEVER_MATCHES
    alternatives = "|".join(re.escape(w) for w in words)
    return rf"\b(?:{alternatives})\b"


def count_matches(pattern: str, text: str) -> int:
    """Count non-overlapping, case-insensitive matches of pattern in text."""
    if not text:
        return 0
    return sum(1 for _ in compile_pattern(pattern).finditer(text))


def has_match(pattern: str, text: str) -> bool:
    """Check for at least one case-insensitive match."""
    return bool(text) and compile_pattern(pattern).search(text) is not None


def count_group_matches(groups: Iterable[PatternGroup], text: str) -> dict[str, int]:
    """Weighted match count per pattern group, in group order."""
    return {
        group.name: count_matches(group.pattern, text) * group.weight
        for group in groups
    }
