"""Longitudinal productivity analytics over the braindump corpus.

:func:`calculate_stats` is a pure function: it reads an :class:`AppData`
and returns a fresh :class:`BraindumpStats` without mutating its input.
Metrics:

- Totals and averages over sessions and the raw braindump corpus.
- Organization accuracy: share of classified items above a confidence threshold.
- Most productive time of day and per-hour trends (UTC).
- Top themes via :mod:`src.analytics.themes`.
- Weekly session/item counts with mean confidence.
- Category breakdown of organized tasks vs notes.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

from src.analytics.models import (
    BraindumpStats,
    CategoryBreakdown,
    ProductivityTrend,
    TimeOfDay,
    WeeklyStats,
)
from src.analytics.numeric import percentage, round_half_up
from src.analytics.themes import TOP_PATTERNS_LIMIT, find_patterns
from src.braindump.models import AppData, BraindumpSession, VoiceItem, parse_timestamp

logger = logging.getLogger(__name__)

ACCURACY_THRESHOLD = 0.7
WEEKLY_WINDOW = 8


def calculate_stats(
    data: AppData,
    *,
    accuracy_threshold: float = ACCURACY_THRESHOLD,
    top_patterns_limit: int = TOP_PATTERNS_LIMIT,
    weekly_window: int = WEEKLY_WINDOW,
) -> BraindumpStats:
    """Compute a full analytics snapshot.

    Args:
        data: The app aggregate to analyse. Not modified.
        accuracy_threshold: Confidence above which an item counts as accurately organized.
        top_patterns_limit: Maximum number of themes reported.
        weekly_window: Number of most recent weeks kept.

    Returns:
        A BraindumpStats snapshot.
    """
    all_items = data.all_items()

    return BraindumpStats(
        total_sessions=len(data.sessions),
        total_items=len(data.braindump),
        avg_items_per_session=_avg_items_per_session(data.sessions),
        avg_session_duration=_avg_session_duration(data.sessions),
        organization_accuracy=_organization_accuracy(all_items, accuracy_threshold),
        most_productive_time=_most_productive_time(all_items),
        top_patterns=find_patterns(data.braindump, limit=top_patterns_limit),
        weekly_stats=_weekly_stats(data.sessions, data.braindump, weekly_window),
        category_breakdown=_category_breakdown(len(data.tasks), len(data.notes)),
        productivity_trends=_productivity_trends(all_items),
    )


def _avg_items_per_session(sessions: list[BraindumpSession]) -> float:
    if not sessions:
        return 0
    total = sum(s.item_count for s in sessions)
    return round_half_up(total / len(sessions), 1)


def _avg_session_duration(sessions: list[BraindumpSession]) -> float:
    """Mean duration in minutes over sessions that have ended and recorded stats."""
    durations = [s.stats.duration for s in sessions if s.end_time and s.stats and s.stats.duration]
    if not durations:
        return 0
    return round_half_up(sum(durations) / len(durations) / 60, 1)


def _organization_accuracy(items: list[VoiceItem], threshold: float) -> int:
    # Items scored 0 (failed classification) count as unscored.
    classified = [i for i in items if i.classification is not None and i.confidence]
    if not classified:
        return 0
    confident = sum(1 for i in classified if i.confidence > threshold)  # type: ignore[operator]
    return percentage(confident, len(classified))


def _time_of_day(hour: int) -> TimeOfDay:
    if 5 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 21:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT


def _item_hours(items: list[VoiceItem]) -> list[int]:
    hours: list[int] = []
    for item in items:
        moment = parse_timestamp(item.timestamp)
        if moment is None:
            logger.debug("Skipping item %s with unparseable timestamp %r", item.id, item.timestamp)
            continue
        hours.append(moment.hour)
    return hours


def _most_productive_time(items: list[VoiceItem]) -> TimeOfDay:
    counts = {slot: 0 for slot in TimeOfDay}
    for hour in _item_hours(items):
        counts[_time_of_day(hour)] += 1

    # Strictly greater replaces, so ties fall back to Morning.
    best, best_count = TimeOfDay.MORNING, 0
    for slot, count in counts.items():
        if count > best_count:
            best, best_count = slot, count
    return best


def week_key(moment: datetime) -> str:
    """Return the "YYYY-WW" key of a UTC instant.

    Weeks are counted from January 1st, offset by the weekday it falls on
    (Sunday = 0), so week 01 is the partial week containing January 1st.
    """
    moment = moment.astimezone(UTC)
    start_of_year = datetime(moment.year, 1, 1, tzinfo=UTC)
    days = (moment - start_of_year).total_seconds() / 86400
    start_weekday = (start_of_year.weekday() + 1) % 7
    week_number = math.ceil((days + start_weekday + 1) / 7)
    return f"{moment.year}-{week_number:02d}"


def _weekly_stats(
    sessions: list[BraindumpSession], items: list[VoiceItem], window: int
) -> list[WeeklyStats]:
    weeks: dict[str, dict[str, float]] = {}

    for session in sessions:
        started = parse_timestamp(session.start_time)
        if started is None:
            continue
        week = weeks.setdefault(week_key(started), {"items": 0, "sessions": 0, "confidence": 0.0})
        week["sessions"] += 1
        week["items"] += session.item_count

    # Confidence only lands in weeks that already have a session.
    for item in items:
        moment = parse_timestamp(item.timestamp)
        if moment is None or not item.confidence:
            continue
        week = weeks.get(week_key(moment))
        if week is not None:
            week["confidence"] += item.confidence

    results = [
        WeeklyStats(
            week=key,
            item_count=int(w["items"]),
            session_count=int(w["sessions"]),
            accuracy=percentage(w["confidence"], w["items"]),
        )
        for key, w in weeks.items()
    ]
    results.sort(key=lambda w: w.week)
    return results[-window:] if window > 0 else []


def _category_breakdown(tasks: int, notes: int) -> CategoryBreakdown:
    total = tasks + notes
    if total == 0:
        return CategoryBreakdown()
    return CategoryBreakdown(
        tasks=tasks,
        notes=notes,
        tasks_percentage=percentage(tasks, total),
        notes_percentage=percentage(notes, total),
    )


def format_hour(hour: int) -> str:
    """Format a 0-23 hour as a 12-hour clock label."""
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def _productivity_trends(items: list[VoiceItem]) -> list[ProductivityTrend]:
    counts = [0] * 24
    for hour in _item_hours(items):
        counts[hour] += 1
    return [
        ProductivityTrend(hour=hour, item_count=count, label=format_hour(hour))
        for hour, count in enumerate(counts)
        if count > 0
    ]


def identify_user_segment(stats: BraindumpStats) -> str:
    """Label the usage style suggested by a stats snapshot."""
    themes = {p.theme for p in stats.top_patterns}

    if stats.avg_items_per_session > 8 and stats.avg_session_duration < 3:
        return "adhd_focused"
    if "Work" in themes and stats.most_productive_time is TimeOfDay.AFTERNOON:
        return "professional"
    if "Learning" in themes:
        return "student"
    if "Creative" in themes:
        return "creative"
    if themes & {"Family", "Home", "Social"}:
        return "parent"
    return "general"
