"""Ordered rule set for braindump classification.

Rules are evaluated top to bottom and the first match wins, so the order of
:data:`RULES` is the priority order. Confidence per tier lives in
:data:`TIER_CONFIDENCE`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from src.braindump.models import Category, Urgency


class RuleTier(StrEnum):
    """Named tiers of the decision list."""

    INTENT = "intent"
    QUESTION = "question"
    SCHEDULING = "scheduling"
    OBLIGATION = "obligation"
    SOFTENED_ACTION = "softened_action"
    ACTION = "action"
    NOTE_INDICATOR = "note_indicator"
    DEFAULT = "default"
    EMPTY = "empty"


# Tiers 1-4 must never score below the note-indicator or default tiers.
TIER_CONFIDENCE: dict[RuleTier, float] = {
    RuleTier.INTENT: 0.88,
    RuleTier.QUESTION: 0.90,
    RuleTier.SCHEDULING: 0.92,
    RuleTier.OBLIGATION: 0.93,
    RuleTier.SOFTENED_ACTION: 0.72,
    RuleTier.ACTION: 0.85,
    RuleTier.NOTE_INDICATOR: 0.80,
    RuleTier.DEFAULT: 0.60,
    RuleTier.EMPTY: 0.20,
}

# Action verbs backed by a date or time read as firmer commitments.
ACTION_WITH_TIMING_CONFIDENCE = 0.88


@dataclass(frozen=True)
class Rule:
    """One entry of the decision list.

    A rule matches when any of ``patterns`` matches and, if ``requires`` is
    non-empty, at least one of ``requires`` matches as well.
    """

    tier: RuleTier
    category: Category
    reason: str
    patterns: tuple[re.Pattern[str], ...]
    requires: tuple[re.Pattern[str], ...] = ()

    def match(self, text: str) -> str | None:
        """Return the matched cue, or None when the rule does not apply."""
        cue: str | None = None
        for pattern in self.patterns:
            found = pattern.search(text)
            if found:
                cue = found.group(0)
                break
        if cue is None:
            return None
        if self.requires and not any(p.search(text) for p in self.requires):
            return None
        return cue


def _compile(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(s, re.IGNORECASE) for s in sources)


_APOS = "['’]"

_INTENT_PATTERNS = _compile(
    r"\bi\s+want\s+to\b",
    rf"\bi{_APOS}d\s+(?:really\s+)?(?:like|love)\s+to\b",
    r"\bwould\s+(?:really\s+)?(?:like|love)\s+to\b",
    rf"\bi(?:{_APOS}m|\s+am)\s+thinking\s+(?:about|of)\b",
    r"\bi\s+wish\b",
    r"\bi\s+hope\s+to\b",
    r"\bit\s+would\s+be\s+(?:nice|good|interesting|cool)\s+to\b",
)

_QUESTION_PATTERNS = _compile(
    r"\bwhat\s+should\s+i\b",
    r"\bhow\s+(?:do|can|could|should)\s+i\b",
    r"\?$",
)

_SCHEDULING_PATTERNS = _compile(
    r"\b(?:schedule|book|arrange)\b",
    r"\b(?:appointment|meeting|call)\b",
    r"\bremind\s+me\s+to\b",
)

_OBLIGATION_PATTERNS = _compile(
    r"\bneeds?\s+to\b",
    r"\b(?:have|has)\s+to\b",
    r"\bmust\b",
    r"\b(?:gotta|got\s+to)\b",
    r"\bremember\s+to\b",
    rf"\b(?:don{_APOS}t|do\s+not)\s+forget\b",
    r"\bmake\s+sure\s+to\b",
    r"\bto-?do\b",
    r"\btasks?\b",
)

_ACTION_PATTERNS = _compile(
    r"\b(?:buy|purchase|get|pick\s+up|finish|complete|submit|fix|create|email|send|pay"
    r"|clean|organize|write|prepare|review|order|install|update|contact|return|renew)\b",
)

_GENTLE_PATTERNS = _compile(
    r"\b(?:maybe|perhaps|could|might)\b",
    r"\bshould\s+probably\b",
)

_NOTE_PATTERNS = _compile(
    r"\b(?:ideas?|thoughts?|notes?|insights?|interesting)\b",
    r"\bremember\s+this\b",
    r"\bwhat\s+if\b",
    r"\bi\s+wonder\b",
    r"\b(?:noticed|reali[sz]ed)\b",
)

RULES: tuple[Rule, ...] = (
    Rule(RuleTier.INTENT, Category.NOTES, "expresses intent", _INTENT_PATTERNS),
    Rule(RuleTier.QUESTION, Category.NOTES, "question", _QUESTION_PATTERNS),
    Rule(RuleTier.SCHEDULING, Category.TASKS, "scheduling", _SCHEDULING_PATTERNS),
    Rule(RuleTier.OBLIGATION, Category.TASKS, "obligation phrase", _OBLIGATION_PATTERNS),
    Rule(
        RuleTier.SOFTENED_ACTION,
        Category.NOTES,
        "softened suggestion",
        _ACTION_PATTERNS,
        requires=_GENTLE_PATTERNS,
    ),
    Rule(RuleTier.ACTION, Category.TASKS, "action verb", _ACTION_PATTERNS),
    Rule(RuleTier.NOTE_INDICATOR, Category.NOTES, "note keyword", _NOTE_PATTERNS),
)

# ---------------------------------------------------------------------------
# Metadata extraction tables
# ---------------------------------------------------------------------------

DATE_PATTERNS = _compile(
    r"\b(?:today|tomorrow|yesterday)\b",
    r"\b(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
    r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:tember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\s+\d{1,2}\b",
    r"\b\d{1,2}/\d{1,2}/\d{2,4}\b",
    r"\b\d{1,2}-\d{1,2}-\d{2,4}\b",
    r"\b(?:next|this)\s+(?:week|month|year)\b",
)

TIME_PATTERNS = _compile(
    r"\b\d{1,2}:\d{2}(?:\s*[ap]m)?\b",
    r"\b\d{1,2}\s*[ap]m\b",
    r"\b(?:morning|afternoon|evening|tonight|night)\b",
    r"\bat\s+\d{1,2}\b(?!:)",
)

# Checked in order; the first level with a match wins.
URGENCY_PATTERNS: tuple[tuple[Urgency, re.Pattern[str]], ...] = (
    (
        Urgency.IMMEDIATE,
        re.compile(r"\b(?:urgent(?:ly)?|asap|immediately|right\s+away|right\s+now|emergency)\b", re.IGNORECASE),
    ),
    (
        Urgency.SOON,
        re.compile(r"\b(?:today|tonight|tomorrow|this\s+week|soon|quickly)\b", re.IGNORECASE),
    ),
    (
        Urgency.FUTURE,
        re.compile(r"\b(?:next\s+(?:week|month|year)|someday|eventually|later)\b", re.IGNORECASE),
    ),
)

ACTION_WORDS: tuple[str, ...] = (
    "buy", "purchase", "get", "pick up", "finish", "complete", "submit", "fix", "create",
    "email", "send", "pay", "clean", "organize", "write", "prepare", "review", "order",
    "install", "update", "contact", "call", "schedule", "book",
)
