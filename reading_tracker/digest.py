"""Digest selection: which scored reading sessions go into the newsletter.

Sessions are filtered by learning score and grouped into sections by
category. Items queued by hand always make the cut and lead the digest
under a "curated" section.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from .analysis.analyzer import MANUAL_QUEUE_CATEGORY
from .analysis.text_utils import domain_matches, extract_domain
from .config import load_reference_tables
from .logging import get_logger

logger = get_logger(__name__)

CURATED_SECTION = "curated"

CATEGORY_TITLES = {
    CURATED_SECTION: "Curated Articles",
    "technology": "Technology & Development",
    "science": "Science & Research",
    "business": "Business & Strategy",
    "education": "Learning & Education",
    "future": "Future & Innovation",
    "other": "Other Insights",
}


@dataclass(frozen=True)
class ScoredItem:
    """A stored reading session as seen by the digest."""
    url: str
    title: str
    learning_score: int
    category: str = "other"

    @property
    def is_curated(self) -> bool:
        return self.category == MANUAL_QUEUE_CATEGORY

    @classmethod
    def from_dict(cls, data: dict) -> "ScoredItem":
        return cls(
            url=data.get("url") or "",
            title=data.get("title") or "",
            learning_score=int(data.get("learning_score") or 0),
            category=data.get("category") or "other",
        )


def section_title(category: str) -> str:
    """Display name for a digest section."""
    return CATEGORY_TITLES.get(category, category.replace("_", " ").capitalize())


def is_professional_network(url: str, domains: Iterable[str] | None = None) -> bool:
    """Check if URL points at a professional-network post."""
    if domains is None:
        domains = load_reference_tables().professional_network_domains
    return domain_matches(extract_domain(url), domains)


def select_for_digest(
    items: Iterable[ScoredItem],
    min_score: int = 50,
    categories: Iterable[str] | None = None,
    include_professional: bool = False,
    professional_domains: Iterable[str] | None = None,
) -> dict[str, list[ScoredItem]]:
    """Filter and group scored items into digest sections.

    Args:
        items: Scored reading sessions
        min_score: Minimum learning score for automatically scored items
        categories: Restrict automatic items to these categories
        include_professional: Keep automatically scored professional-network posts
        professional_domains: Override the professional-network domain list

    Returns:
        Mapping of section name to items, curated section first, each
        section sorted by learning score descending
    """
    if professional_domains is None:
        professional_domains = load_reference_tables().professional_network_domains
    professional_domains = tuple(professional_domains)
    allowed = set(categories) if categories is not None else None

    items = list(items)
    sections: dict[str, list[ScoredItem]] = {CURATED_SECTION: []}
    for item in items:
        if item.is_curated:
            sections[CURATED_SECTION].append(item)
            continue
        if item.learning_score < min_score:
            continue
        if allowed is not None and item.category not in allowed:
            continue
        if not include_professional and is_professional_network(item.url, professional_domains):
            continue
        sections.setdefault(item.category, []).append(item)

    for section_items in sections.values():
        section_items.sort(key=lambda i: i.learning_score, reverse=True)

    selected = {name: section for name, section in sections.items() if section}
    logger.info(
        "digest_selected",
        input_count=len(items),
        output_count=sum(len(s) for s in selected.values()),
        sections=list(selected),
    )
    return selected
