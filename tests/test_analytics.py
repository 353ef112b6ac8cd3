"""Tests for the analytics aggregator."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from src.analytics.aggregator import (
    calculate_stats,
    format_hour,
    identify_user_segment,
    week_key,
)
from src.analytics.models import BraindumpStats, Pattern, TimeOfDay
from src.analytics.numeric import percentage, round_half_up
from src.braindump.models import (
    AppData,
    BraindumpSession,
    Category,
    Classification,
    SessionStats,
    VoiceItem,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _item(
    item_id: str,
    timestamp: str = "2024-03-04T09:00:00+00:00",
    confidence: float | None = None,
    text: str = "something",
    category: Category = Category.NOTES,
) -> VoiceItem:
    item = VoiceItem(id=item_id, text=text, timestamp=timestamp)
    if confidence is not None:
        item.attach_classification(Classification(category=category, confidence=confidence, reasoning="test"))
    return item


def _session(
    session_id: str,
    start: str = "2024-03-04T09:00:00+00:00",
    item_count: int = 1,
    end: str | None = "2024-03-04T09:05:00+00:00",
    duration: int | None = None,
) -> BraindumpSession:
    stats = None
    if duration is not None:
        stats = SessionStats(
            total_words=0, duration=duration, tasks_created=0, notes_created=0, average_confidence=0.0
        )
    return BraindumpSession(id=session_id, start_time=start, end_time=end, item_count=item_count, stats=stats)


def _at_hour(item_id: str, hour: int) -> VoiceItem:
    return _item(item_id, timestamp=f"2024-03-04T{hour:02d}:15:00+00:00")


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------


class TestNumeric:
    @pytest.mark.parametrize(
        ("value", "digits", "expected"),
        [(2.5, 0, 3), (0.5, 0, 1), (1.25, 1, 1.3), (0.125, 2, 0.13), (66.666, 0, 67)],
    )
    def test_round_half_up(self, value: float, digits: int, expected: float) -> None:
        assert round_half_up(value, digits) == expected

    def test_percentage(self) -> None:
        assert percentage(2, 3) == 67
        assert percentage(1, 3) == 33
        assert percentage(1, 0) == 0
        assert isinstance(percentage(1, 2), int)


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class TestCalculateStats:
    def test_empty_data(self) -> None:
        stats = calculate_stats(AppData())

        assert stats.total_sessions == 0
        assert stats.total_items == 0
        assert stats.avg_items_per_session == 0
        assert stats.avg_session_duration == 0
        assert stats.organization_accuracy == 0
        assert stats.most_productive_time is TimeOfDay.MORNING
        assert stats.top_patterns == []
        assert stats.weekly_stats == []
        assert stats.productivity_trends == []
        assert stats.category_breakdown.tasks == 0
        assert stats.category_breakdown.tasks_percentage == 0
        assert stats.category_breakdown.notes_percentage == 0

    def test_totals_and_averages(self) -> None:
        data = AppData(
            sessions=[
                _session("a", item_count=1, duration=120),
                _session("b", item_count=2, duration=240),
                _session("c", item_count=0, end=None, duration=600),
                _session("d", item_count=3),
            ],
            braindump=[_item("1"), _item("2")],
            tasks=[_item("3")],
        )
        stats = calculate_stats(data)

        assert stats.total_sessions == 4
        assert stats.total_items == 2
        assert stats.avg_items_per_session == 1.5
        assert stats.avg_session_duration == 3.0

    def test_accuracy_counts_every_collection(self) -> None:
        data = AppData(
            braindump=[_item("1", confidence=0.85)],
            tasks=[_item("2", confidence=0.75, category=Category.TASKS)],
            notes=[_item("3", confidence=0.9), _item("4")],
        )
        assert calculate_stats(data).organization_accuracy == 100

    def test_accuracy_threshold_is_strict(self) -> None:
        data = AppData(braindump=[_item("1", confidence=0.7), _item("2", confidence=0.71)])
        assert calculate_stats(data).organization_accuracy == 50
        assert calculate_stats(data, accuracy_threshold=0.5).organization_accuracy == 100

    def test_zero_confidence_counts_as_unscored(self) -> None:
        data = AppData(braindump=[_item("1", confidence=0.9), _item("2", confidence=0.0)])
        assert calculate_stats(data).organization_accuracy == 100

    def test_accuracy_rounds(self) -> None:
        data = AppData(
            braindump=[_item("1", confidence=0.9), _item("2", confidence=0.5), _item("3", confidence=0.8)]
        )
        stats = calculate_stats(data)
        assert stats.organization_accuracy == 67
        assert isinstance(stats.organization_accuracy, int)

    def test_category_breakdown(self) -> None:
        data = AppData(tasks=[_item("1"), _item("2")], notes=[_item("3")])
        breakdown = calculate_stats(data).category_breakdown

        assert breakdown.tasks == 2
        assert breakdown.notes == 1
        assert breakdown.tasks_percentage == 67
        assert breakdown.notes_percentage == 33

    def test_most_productive_tie_falls_back_to_morning(self) -> None:
        data = AppData(braindump=[_at_hour("1", 9), _at_hour("2", 10), _at_hour("3", 14), _at_hour("4", 16)])
        assert calculate_stats(data).most_productive_time is TimeOfDay.MORNING

    @pytest.mark.parametrize(
        ("hours", "expected"),
        [
            ([13, 14, 15, 9], TimeOfDay.AFTERNOON),
            ([18, 19, 3], TimeOfDay.EVENING),
            ([22, 23, 2, 9], TimeOfDay.NIGHT),
        ],
    )
    def test_most_productive_time(self, hours: list[int], expected: TimeOfDay) -> None:
        data = AppData(braindump=[_at_hour(str(n), h) for n, h in enumerate(hours)])
        assert calculate_stats(data).most_productive_time is expected

    def test_productivity_trends(self) -> None:
        data = AppData(
            braindump=[_at_hour("1", 0), _at_hour("2", 13)],
            notes=[_at_hour("3", 13), _item("4", timestamp="not a date")],
        )
        trends = calculate_stats(data).productivity_trends

        assert [(t.hour, t.item_count, t.label) for t in trends] == [(0, 1, "12 AM"), (13, 2, "1 PM")]

    def test_unparseable_timestamp_still_counts_as_item(self) -> None:
        stats = calculate_stats(AppData(braindump=[_item("1", timestamp="garbage")]))
        assert stats.total_items == 1
        assert stats.productivity_trends == []

    def test_top_patterns(self) -> None:
        data = AppData(
            braindump=[
                _item("1", confidence=0.9, text="Go to the gym"),
                _item("2", confidence=0.8, text="Morning run"),
                _item("3", text="Book a gym class"),
            ]
        )
        patterns = calculate_stats(data).top_patterns
        assert patterns[0].theme == "Health"
        assert patterns[0].count == 2

    def test_pure_and_idempotent(self) -> None:
        data = AppData(
            sessions=[_session("a", item_count=2, duration=60)],
            braindump=[_item("1", confidence=0.9, text="Finish the project"), _at_hour("2", 20)],
            tasks=[_item("3", confidence=0.8, category=Category.TASKS)],
        )
        before = data.to_dict()

        first = calculate_stats(data)
        second = calculate_stats(data)

        assert first == second
        assert data.to_dict() == before

    def test_to_dict_is_json_serializable(self) -> None:
        data = AppData(braindump=[_item("1", confidence=0.9, text="Finish the project")])
        payload = json.loads(json.dumps(calculate_stats(data).to_dict()))

        assert payload["most_productive_time"] == "Morning"
        assert payload["top_patterns"][0]["category"] == "notes"


# ---------------------------------------------------------------------------
# Weekly stats
# ---------------------------------------------------------------------------


class TestWeeklyStats:
    @pytest.mark.parametrize(
        ("moment", "expected"),
        [
            (datetime(2024, 1, 1, tzinfo=UTC), "2024-01"),
            (datetime(2024, 1, 6, tzinfo=UTC), "2024-01"),
            (datetime(2024, 1, 7, tzinfo=UTC), "2024-02"),
            (datetime(2023, 1, 1, tzinfo=UTC), "2023-01"),
            (datetime(2023, 1, 8, tzinfo=UTC), "2023-02"),
        ],
    )
    def test_week_key(self, moment: datetime, expected: str) -> None:
        assert week_key(moment) == expected

    def test_groups_sessions_and_item_confidence(self) -> None:
        data = AppData(
            sessions=[
                _session("a", start="2024-03-04T09:00:00+00:00", item_count=2),
                _session("b", start="2024-03-05T09:00:00+00:00", item_count=2),
            ],
            braindump=[
                _item("1", timestamp="2024-03-04T09:01:00+00:00", confidence=0.9),
                _item("2", timestamp="2024-03-04T09:02:00+00:00", confidence=0.8),
                _item("3", timestamp="2024-03-05T09:01:00+00:00", confidence=0.7),
                _item("4", timestamp="2024-03-05T09:02:00+00:00", confidence=0.6),
                # no session that week
                _item("5", timestamp="2024-06-05T09:00:00+00:00", confidence=1.0),
            ],
        )
        weekly = calculate_stats(data).weekly_stats

        assert len(weekly) == 1
        week = weekly[0]
        assert week.week == week_key(datetime(2024, 3, 4, 9, tzinfo=UTC))
        assert week.session_count == 2
        assert week.item_count == 4
        assert week.accuracy == 75

    def test_zero_confidence_adds_nothing_to_week(self) -> None:
        data = AppData(
            sessions=[_session("a", start="2024-03-04T09:00:00+00:00", item_count=2)],
            braindump=[
                _item("1", timestamp="2024-03-04T09:01:00+00:00", confidence=0.8),
                _item("2", timestamp="2024-03-04T09:02:00+00:00", confidence=0.0),
            ],
        )
        assert calculate_stats(data).weekly_stats[0].accuracy == 40

    def test_keeps_most_recent_weeks_sorted(self) -> None:
        sessions = [
            _session(f"s{n}", start=f"2024-{month:02d}-10T09:00:00+00:00")
            for n, month in enumerate([11, 1, 3, 5, 2, 4, 6, 8, 7, 10])
        ]
        weekly = calculate_stats(AppData(sessions=sessions)).weekly_stats

        assert len(weekly) == 8
        keys = [w.week for w in weekly]
        assert keys == sorted(keys)
        assert keys[-1] == week_key(datetime(2024, 11, 10, 9, tzinfo=UTC))
        assert week_key(datetime(2024, 1, 10, 9, tzinfo=UTC)) not in keys

    def test_window_override(self) -> None:
        sessions = [_session("a", start="2024-01-10T09:00:00+00:00"), _session("b", start="2024-02-10T09:00:00+00:00")]
        weekly = calculate_stats(AppData(sessions=sessions), weekly_window=1).weekly_stats
        assert [w.week for w in weekly] == [week_key(datetime(2024, 2, 10, 9, tzinfo=UTC))]


# ---------------------------------------------------------------------------
# Formatting and segments
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("hour", "label"),
    [(0, "12 AM"), (1, "1 AM"), (11, "11 AM"), (12, "12 PM"), (13, "1 PM"), (23, "11 PM")],
)
def test_format_hour(hour: int, label: str) -> None:
    assert format_hour(hour) == label


def _pattern(theme: str) -> Pattern:
    return Pattern(theme=theme, count=1, confidence=0.9, category=Category.NOTES)


class TestUserSegment:
    def test_adhd_focused(self) -> None:
        stats = BraindumpStats(avg_items_per_session=9, avg_session_duration=2)
        assert identify_user_segment(stats) == "adhd_focused"

    def test_professional(self) -> None:
        stats = BraindumpStats(top_patterns=[_pattern("Work")], most_productive_time=TimeOfDay.AFTERNOON)
        assert identify_user_segment(stats) == "professional"

    def test_work_in_morning_is_not_professional(self) -> None:
        stats = BraindumpStats(top_patterns=[_pattern("Work")])
        assert identify_user_segment(stats) == "general"

    @pytest.mark.parametrize(
        ("theme", "segment"),
        [("Learning", "student"), ("Creative", "creative"), ("Family", "parent"), ("Home", "parent")],
    )
    def test_theme_segments(self, theme: str, segment: str) -> None:
        assert identify_user_segment(BraindumpStats(top_patterns=[_pattern(theme)])) == segment

    def test_general(self) -> None:
        assert identify_user_segment(BraindumpStats()) == "general"
