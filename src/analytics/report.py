"""Analytics report: render a stats snapshot as markdown or JSON.

Entry point
-----------
Run as a module::

    python -m src.analytics.report data/app_data.json --format markdown

The input file is an AppData JSON document as produced by ``AppData.to_dict()``.
Use ``--help`` for full argument documentation.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime

from src.analytics.aggregator import calculate_stats, identify_user_segment
from src.analytics.models import BraindumpStats
from src.braindump.models import AppData
from src.config import settings


def _format_overview(stats: BraindumpStats) -> str:
    lines = [
        f"- **Sessions:** {stats.total_sessions}",
        f"- **Items awaiting organization:** {stats.total_items}",
        f"- **Average items per session:** {stats.avg_items_per_session}",
        f"- **Average session duration:** {stats.avg_session_duration} min",
        f"- **Organization accuracy:** {stats.organization_accuracy}%",
        f"- **Most productive time:** {stats.most_productive_time.value}",
        f"- **User segment:** {identify_user_segment(stats)}",
    ]
    return "\n".join(lines)


def _format_breakdown(stats: BraindumpStats) -> str:
    b = stats.category_breakdown
    return "\n".join(
        [
            f"- Tasks: {b.tasks} ({b.tasks_percentage}%)",
            f"- Notes: {b.notes} ({b.notes_percentage}%)",
        ]
    )


def _format_patterns(stats: BraindumpStats) -> str:
    if not stats.top_patterns:
        return "No recurring themes yet.\n"
    lines = [
        "| Theme | Count | Avg confidence | Category |",
        "|-------|-------|----------------|----------|",
    ]
    for p in stats.top_patterns:
        lines.append(f"| {p.theme} | {p.count} | {p.confidence:.2f} | {p.category.value} |")
    return "\n".join(lines)


def _format_weekly(stats: BraindumpStats) -> str:
    if not stats.weekly_stats:
        return "No weekly data yet.\n"
    lines = [
        "| Week | Sessions | Items | Accuracy |",
        "|------|----------|-------|----------|",
    ]
    for w in stats.weekly_stats:
        lines.append(f"| {w.week} | {w.session_count} | {w.item_count} | {w.accuracy}% |")
    return "\n".join(lines)


def _format_trends(stats: BraindumpStats) -> str:
    if not stats.productivity_trends:
        return "No captured items yet.\n"
    return "\n".join(f"- {t.label}: {t.item_count}" for t in stats.productivity_trends)


def format_stats_report(stats: BraindumpStats) -> str:
    """Render a stats snapshot as a markdown report."""
    now = datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")

    sections = [
        f"# Braindump Productivity Report\n\n_Generated: {now}_\n",
        "## 1. Overview\n",
        _format_overview(stats),
        "\n## 2. Tasks vs Notes\n",
        _format_breakdown(stats),
        "\n## 3. Top Themes\n",
        _format_patterns(stats),
        "\n## 4. Weekly Activity\n",
        _format_weekly(stats),
        "\n## 5. Captures by Hour (UTC)\n",
        _format_trends(stats),
    ]
    return "\n".join(sections) + "\n"


def load_app_data(path: str) -> AppData:
    """Read an AppData JSON document from disk."""
    with open(path, encoding="utf-8") as f:
        return AppData.from_dict(json.load(f))


# ── CLI entry point ────────────────────────────────────────────────────────


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser for the report command."""
    parser = argparse.ArgumentParser(
        prog="python -m src.analytics.report",
        description="Compute braindump productivity statistics from an AppData JSON file.",
    )
    parser.add_argument("data", metavar="DATA_JSON", help="Path to an AppData JSON document.")
    parser.add_argument(
        "--format",
        choices=["markdown", "json"],
        default="markdown",
        help="Output format (default: markdown).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        data = load_app_data(args.data)
    except (OSError, json.JSONDecodeError, KeyError, ValueError) as exc:
        print(f"ERROR: Could not load {args.data}: {exc}", file=sys.stderr)
        return 1

    stats = calculate_stats(
        data,
        accuracy_threshold=settings.high_confidence_threshold,
        top_patterns_limit=settings.top_patterns_limit,
        weekly_window=settings.weekly_stats_window,
    )
    if args.format == "json":
        print(json.dumps(stats.to_dict(), indent=2))
    else:
        print(format_stats_report(stats))
    return 0


if __name__ == "__main__":
    sys.exit(main())
