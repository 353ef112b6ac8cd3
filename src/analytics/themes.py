"""Theme matching: detect recurring thematic clusters across classified items."""

from __future__ import annotations

import re

from src.analytics.models import Pattern
from src.analytics.numeric import round_half_up
from src.braindump.models import Category, VoiceItem

TOP_PATTERNS_LIMIT = 8
DEFAULT_ITEM_CONFIDENCE = 0.5

THEME_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("Work", re.compile(r"\b(work|job|office|meeting|deadline|project|client)\b", re.IGNORECASE)),
    ("Food", re.compile(r"\b(grocery|groceries|food|cooking|restaurant|eat|meal)\b", re.IGNORECASE)),
    ("Health", re.compile(r"\b(exercise|gym|workout|run|fitness|health)\b", re.IGNORECASE)),
    ("Family", re.compile(r"\b(family|mom|dad|parent|child|kids|spouse)\b", re.IGNORECASE)),
    ("Travel", re.compile(r"\b(travel|trip|vacation|flight|hotel|book)\b", re.IGNORECASE)),
    ("Finance", re.compile(r"\b(money|budget|pay|bill|expense|finance)\b", re.IGNORECASE)),
    ("Learning", re.compile(r"\b(learn|study|course|skill|education|read)\b", re.IGNORECASE)),
    ("Creative", re.compile(r"\b(idea|innovation|creative|design|art)\b", re.IGNORECASE)),
    ("Home", re.compile(r"\b(home|house|clean|repair|fix|maintenance)\b", re.IGNORECASE)),
    ("Social", re.compile(r"\b(friend|social|party|event|birthday)\b", re.IGNORECASE)),
]


def find_patterns(items: list[VoiceItem], limit: int = TOP_PATTERNS_LIMIT) -> list[Pattern]:
    """Rank themes by how many classified items mention them.

    Items without a classification are skipped. An item may count towards
    several themes. Each theme reports the category of the last matching
    item seen, not a majority vote.

    Args:
        items: Items to scan, in stable order.
        limit: Maximum number of patterns returned.

    Returns:
        Patterns sorted by descending count (ties keep first-seen order).
    """
    counts: dict[str, int] = {}
    confidence_sums: dict[str, float] = {}
    categories: dict[str, Category] = {}

    for item in items:
        if item.classification is None:
            continue
        # A zero confidence is treated as missing.
        confidence = item.confidence or DEFAULT_ITEM_CONFIDENCE
        for theme, pattern in THEME_PATTERNS:
            if not pattern.search(item.text):
                continue
            counts[theme] = counts.get(theme, 0) + 1
            confidence_sums[theme] = confidence_sums.get(theme, 0.0) + confidence
            categories[theme] = item.classification.category

    patterns = [
        Pattern(
            theme=theme,
            count=count,
            confidence=round_half_up(confidence_sums[theme] / count, 2),
            category=categories[theme],
        )
        for theme, count in counts.items()
    ]
    patterns.sort(key=lambda p: p.count, reverse=True)
    return patterns[:limit]
