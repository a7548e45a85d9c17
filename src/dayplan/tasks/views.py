# src/dayplan/tasks/views.py

from __future__ import annotations

"""
Read-side views over the flat task collection.

Everything here is a pure recomputation over the whole collection; nothing is
cached or indexed.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from .task_models import Category, Task


def sort_key(task: Task) -> tuple[bool, str, bool, float, str]:
    """
    Total order for display:
    1. timed before untimed, timed ones by HH:MM
    2. incomplete before completed
    3. older created_at first
    4. id, so equal keys never depend on input order
    """
    return (
        task.time is None,
        task.time or "",
        task.completed,
        task.created_at,
        task.id,
    )


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=sort_key)


def tasks_for_day(tasks: Iterable[Task], category: Category, day: str) -> list[Task]:
    return sort_tasks(t for t in tasks if t.category == category and t.date == day)


def long_term_tasks(tasks: Iterable[Task]) -> list[Task]:
    return sort_tasks(t for t in tasks if t.category == Category.LONG_TERM)


@dataclass(slots=True, frozen=True)
class DayBoard:
    date: str
    work: list[Task] = field(default_factory=list)
    family: list[Task] = field(default_factory=list)
    long_term: list[Task] = field(default_factory=list)

    def columns(self) -> list[tuple[Category, list[Task]]]:
        return [
            (Category.WORK, self.work),
            (Category.FAMILY, self.family),
            (Category.LONG_TERM, self.long_term),
        ]


def day_board(tasks: Iterable[Task], day: str) -> DayBoard:
    snapshot = list(tasks)
    return DayBoard(
        date=day,
        work=tasks_for_day(snapshot, Category.WORK, day),
        family=tasks_for_day(snapshot, Category.FAMILY, day),
        long_term=long_term_tasks(snapshot),
    )


@dataclass(slots=True, frozen=True)
class DayPreview:
    date: str
    work_count: int
    family_count: int

    @property
    def is_free(self) -> bool:
        return self.work_count == 0 and self.family_count == 0


def upcoming(tasks: Iterable[Task], from_date: str, days: int = 3) -> list[DayPreview]:
    """Per-day WORK/FAMILY counts for the `days` dates after from_date."""
    snapshot = list(tasks)
    start = date.fromisoformat(from_date)
    out: list[DayPreview] = []
    for offset in range(1, max(0, days) + 1):
        day = (start + timedelta(days=offset)).isoformat()
        on_day = [t for t in snapshot if t.date == day]
        out.append(
            DayPreview(
                date=day,
                work_count=sum(1 for t in on_day if t.category == Category.WORK),
                family_count=sum(1 for t in on_day if t.category == Category.FAMILY),
            )
        )
    return out


def month_marks(tasks: Iterable[Task], year: int, month: int) -> dict[str, set[Category]]:
    """Categories present on each date of the given month (dated tasks only)."""
    prefix = f"{year:04d}-{month:02d}-"
    marks: dict[str, set[Category]] = {}
    for t in tasks:
        if t.date and t.date.startswith(prefix):
            marks.setdefault(t.date, set()).add(t.category)
    return marks
