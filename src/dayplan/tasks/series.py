# src/dayplan/tasks/series.py

from __future__ import annotations

"""
Series expansion.

A recurrence rule becomes a flat list of ordinary tasks that share one
series_id and one created_at. There is no series record: the series is
whatever set of tasks carries the same series_id.

The range is not bounded here. Callers must keep start/end sane
(the CLI enforces Settings.max_recurrence_days).
"""

import logging
import time
from collections.abc import Iterator
from datetime import date, timedelta

from .task_models import Category, RecurrenceRule, Task, new_id

logger = logging.getLogger(__name__)


def weekday_index(day: date) -> int:
    """Sunday-based weekday index (0 = Sunday ... 6 = Saturday)."""
    return (day.weekday() + 1) % 7


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def default_rule_end(start_date: str, days: int = 30) -> str:
    return (date.fromisoformat(start_date) + timedelta(days=days)).isoformat()


def expand_series(
    text: str,
    category: Category,
    rule: RecurrenceRule,
    *,
    time_of_day: str | None = None,
    now: float | None = None,
) -> list[Task]:
    """
    Emit one task per date in [rule.start_date, rule.end_date] whose weekday
    is in rule.days_of_week.

    Returns [] for an empty weekday set or an inverted range; the caller must
    treat that as "not recurring".
    """
    if not category.is_dated:
        raise ValueError("recurrence is only available for WORK and FAMILY tasks")

    if rule.is_empty():
        return []

    start = date.fromisoformat(rule.start_date)
    end = date.fromisoformat(rule.end_date)
    if start > end:
        logger.debug("Series range inverted start=%s end=%s", start, end)
        return []

    series_id = new_id()
    created_at = time.time() if now is None else float(now)

    out = [
        Task.create(
            text,
            category,
            date=day.isoformat(),
            time=time_of_day,
            series_id=series_id,
            created_at=created_at,
        )
        for day in iter_days(start, end)
        if weekday_index(day) in rule.days_of_week
    ]

    logger.debug(
        "Expanded series id=%s days=%s range=%s..%s -> %d instances",
        series_id,
        sorted(rule.days_of_week),
        rule.start_date,
        rule.end_date,
        len(out),
    )
    return out
