"""Deterministic rule-based classification of braindump text into tasks or notes."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from src.braindump.models import Category, Classification, Urgency
from src.classification.rules import (
    ACTION_WITH_TIMING_CONFIDENCE,
    ACTION_WORDS,
    DATE_PATTERNS,
    RULES,
    TIER_CONFIDENCE,
    TIME_PATTERNS,
    URGENCY_PATTERNS,
    Rule,
    RuleTier,
)


def _word_pattern(word: str) -> re.Pattern[str]:
    body = r"\s+".join(re.escape(part) for part in word.split())
    return re.compile(r"\b" + body + r"\b", re.IGNORECASE)


_ACTION_WORD_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    (word, _word_pattern(word)) for word in ACTION_WORDS
]


def classify(text: str) -> Classification:
    """Classify one captured thought.

    Rules from :data:`src.classification.rules.RULES` are tried in order and
    the first match decides the category; text matching no rule is a note.
    Metadata is extracted independently of the chosen category.

    Args:
        text: The raw captured text. May be empty.

    Returns:
        A Classification; this function does not raise on any string input.
    """
    stripped = (text or "").strip()
    if not stripped:
        return Classification(
            category=Category.NOTES,
            confidence=TIER_CONFIDENCE[RuleTier.EMPTY],
            reasoning="empty input",
            metadata={"has_date": False, "has_time": False, "urgency": Urgency.NONE.value},
        )

    metadata = extract_metadata(stripped)
    rule, cue = _first_match(stripped)

    if rule is None:
        return Classification(
            category=Category.NOTES,
            confidence=TIER_CONFIDENCE[RuleTier.DEFAULT],
            reasoning="no task cues found",
            metadata=metadata,
        )

    confidence = TIER_CONFIDENCE[rule.tier]
    if rule.tier is RuleTier.ACTION and (metadata["has_date"] or metadata["has_time"]):
        confidence = ACTION_WITH_TIMING_CONFIDENCE

    return Classification(
        category=rule.category,
        confidence=confidence,
        reasoning=f"{rule.reason} ('{cue}')",
        metadata=metadata,
    )


def classify_batch(texts: Iterable[str]) -> list[Classification]:
    """Classify several texts, preserving input order."""
    return [classify(t) for t in texts]


def _first_match(text: str) -> tuple[Rule | None, str | None]:
    for rule in RULES:
        cue = rule.match(text)
        if cue is not None:
            return rule, cue
    return None, None


def extract_metadata(text: str) -> dict[str, Any]:
    """Extract date/time references, urgency, and action verbs from text."""
    dates = _find_all(DATE_PATTERNS, text)
    times = _find_all(TIME_PATTERNS, text)

    metadata: dict[str, Any] = {
        "has_date": bool(dates),
        "has_time": bool(times),
        "urgency": extract_urgency(text).value,
    }
    if dates or times:
        metadata["date_info"] = ", ".join(dates + times)

    patterns = [word for word, pattern in _ACTION_WORD_PATTERNS if pattern.search(text)]
    if patterns:
        metadata["patterns"] = patterns
    return metadata


def extract_urgency(text: str) -> Urgency:
    for level, pattern in URGENCY_PATTERNS:
        if pattern.search(text):
            return level
    return Urgency.NONE


def _find_all(patterns: Iterable[re.Pattern[str]], text: str) -> list[str]:
    found: list[str] = []
    for pattern in patterns:
        found.extend(m.group(0) for m in pattern.finditer(text))
    return found
