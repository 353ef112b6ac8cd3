"""Data models for the analytics snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from src.braindump.models import Category


class TimeOfDay(StrEnum):
    """UTC hour buckets used for the most-productive-time metric."""

    MORNING = "Morning"  # 5-11
    AFTERNOON = "Afternoon"  # 12-16
    EVENING = "Evening"  # 17-20
    NIGHT = "Night"  # 21-4


@dataclass
class Pattern:
    """A theme detected across several items."""

    theme: str
    count: int
    confidence: float  # mean item confidence, 2 decimals
    category: Category


@dataclass
class WeeklyStats:
    week: str  # "YYYY-WW"
    item_count: int
    session_count: int
    accuracy: int  # percentage 0-100


@dataclass
class CategoryBreakdown:
    tasks: int = 0
    notes: int = 0
    tasks_percentage: int = 0
    notes_percentage: int = 0


@dataclass
class ProductivityTrend:
    hour: int  # UTC, 0-23
    item_count: int
    label: str  # "12 AM" ... "11 PM"


@dataclass
class BraindumpStats:
    """Read-only analytics snapshot, recomputed on demand.

    ``organization_accuracy`` is an integer percentage (0-100), not a fraction.
    """

    total_sessions: int = 0
    total_items: int = 0
    avg_items_per_session: float = 0
    avg_session_duration: float = 0  # minutes
    organization_accuracy: int = 0
    most_productive_time: TimeOfDay = TimeOfDay.MORNING
    top_patterns: list[Pattern] = field(default_factory=list)
    weekly_stats: list[WeeklyStats] = field(default_factory=list)
    category_breakdown: CategoryBreakdown = field(default_factory=CategoryBreakdown)
    productivity_trends: list[ProductivityTrend] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["most_productive_time"] = self.most_productive_time.value
        for pattern in data["top_patterns"]:
            pattern["category"] = Category(pattern["category"]).value
        return data
