"""Aggregations behind the dashboard statistics endpoints."""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from enum import Enum
from typing import Any, Iterable

DAILY_WINDOW_DAYS = 7


def percentage(count: int, total: int) -> float:
    """Share of total as a percentage with one decimal; zero when total is zero."""
    if total <= 0:
        return 0.0
    return round(count * 100.0 / total, 1)


def status_breakdown(statuses: Iterable[Enum], status_type: type[Enum]) -> dict[str, Any]:
    """Count statuses over every member of the closed status set."""
    counts = Counter(status.value for status in statuses)
    by_status = {member.value: counts.get(member.value, 0) for member in status_type}
    total = sum(by_status.values())
    return {
        "total": total,
        "byStatus": by_status,
        "byStatusPercent": {key: percentage(value, total) for key, value in by_status.items()},
    }


def archive_breakdown(archived_flags: Iterable[bool]) -> dict[str, int]:
    flags = list(archived_flags)
    archived = sum(1 for flag in flags if flag)
    return {"total": len(flags), "active": len(flags) - archived, "archived": archived}


def daily_histogram(
    created_at_values: Iterable[str],
    *,
    today: date,
    days: int = DAILY_WINDOW_DAYS,
) -> list[dict[str, Any]]:
    """Zero-filled per-day counts for today and the preceding days, oldest first."""
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    keys = {day.isoformat() for day in window}
    counts = Counter(value[:10] for value in created_at_values if value[:10] in keys)
    return [{"date": day.isoformat(), "count": counts.get(day.isoformat(), 0)} for day in window]


def course_breakdown(pairs: Iterable[tuple[str, str]]) -> list[dict[str, Any]]:
    """Group (courseId, courseTitle) pairs, highest count first."""
    counts = Counter(pairs)
    rows = [
        {"courseId": course_id, "courseTitle": course_title, "count": count}
        for (course_id, course_title), count in counts.items()
    ]
    rows.sort(key=lambda row: (-row["count"], row["courseTitle"], row["courseId"]))
    return rows
