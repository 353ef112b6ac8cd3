"""Data models for captured braindump items, sessions, and the app aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class Category(StrEnum):
    """Destination collection of an organized item."""

    TASKS = "tasks"
    NOTES = "notes"


class Urgency(StrEnum):
    """Urgency level extracted from item text."""

    IMMEDIATE = "immediate"
    SOON = "soon"
    FUTURE = "future"
    NONE = "none"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive values are taken to be UTC. Returns None for missing or
    unparseable input instead of raising.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat()


@dataclass
class Classification:
    """The classifier's verdict for one piece of text."""

    category: Category
    confidence: float  # 0.0 - 1.0
    reasoning: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Classification:
        return cls(
            category=Category(data.get("category", Category.NOTES)),
            confidence=float(data.get("confidence", 0.0)),
            reasoning=data.get("reasoning", ""),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class VoiceItem:
    """One captured thought.

    ``confidence`` mirrors ``classification.confidence``; use
    :meth:`attach_classification` to keep the two in step.
    """

    id: str
    text: str
    timestamp: str
    session_id: str | None = None
    processed: bool = False
    classification: Classification | None = None
    confidence: float | None = None

    # Populated once committed as a task or note
    category: Category | None = None
    completed: bool | None = None
    priority: str | None = None  # "low", "medium", "high"
    tags: list[str] = field(default_factory=list)

    metadata: dict[str, Any] = field(default_factory=dict)

    def attach_classification(self, classification: Classification) -> None:
        self.classification = classification
        self.confidence = classification.confidence

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "timestamp": self.timestamp,
            "session_id": self.session_id,
            "processed": self.processed,
            "classification": self.classification.to_dict() if self.classification else None,
            "confidence": self.confidence,
            "category": self.category.value if self.category else None,
            "completed": self.completed,
            "priority": self.priority,
            "tags": list(self.tags),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoiceItem:
        classification = data.get("classification")
        category = data.get("category")
        confidence = data.get("confidence")
        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            timestamp=data.get("timestamp", ""),
            session_id=data.get("session_id"),
            processed=bool(data.get("processed", False)),
            classification=Classification.from_dict(classification) if classification else None,
            confidence=float(confidence) if confidence is not None else None,
            category=Category(category) if category else None,
            completed=data.get("completed"),
            priority=data.get("priority"),
            tags=list(data.get("tags") or []),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class SessionStats:
    """Summary of a fully organized session."""

    total_words: int
    duration: int  # seconds
    tasks_created: int
    notes_created: int
    average_confidence: float


@dataclass
class BraindumpSession:
    """One capture episode grouping one or more items."""

    id: str
    start_time: str
    end_time: str | None = None
    item_count: int = 0
    processed: bool = False
    processed_at: str | None = None
    stats: SessionStats | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "item_count": self.item_count,
            "processed": self.processed,
            "processed_at": self.processed_at,
            "stats": vars(self.stats).copy() if self.stats else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BraindumpSession:
        stats = data.get("stats")
        return cls(
            id=str(data["id"]),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time"),
            item_count=int(data.get("item_count", 0)),
            processed=bool(data.get("processed", False)),
            processed_at=data.get("processed_at"),
            stats=SessionStats(**stats) if stats else None,
        )


@dataclass
class AppData:
    """Aggregate root: every item lives in exactly one of the three collections."""

    tasks: list[VoiceItem] = field(default_factory=list)
    notes: list[VoiceItem] = field(default_factory=list)
    braindump: list[VoiceItem] = field(default_factory=list)
    sessions: list[BraindumpSession] = field(default_factory=list)

    def all_items(self) -> list[VoiceItem]:
        """Braindump, tasks, and notes in that order."""
        return [*self.braindump, *self.tasks, *self.notes]

    def find_session(self, session_id: str) -> BraindumpSession | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": [i.to_dict() for i in self.tasks],
            "notes": [i.to_dict() for i in self.notes],
            "braindump": [i.to_dict() for i in self.braindump],
            "sessions": [s.to_dict() for s in self.sessions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppData:
        return cls(
            tasks=[VoiceItem.from_dict(i) for i in data.get("tasks", [])],
            notes=[VoiceItem.from_dict(i) for i in data.get("notes", [])],
            braindump=[VoiceItem.from_dict(i) for i in data.get("braindump", [])],
            sessions=[BraindumpSession.from_dict(s) for s in data.get("sessions", [])],
        )
