# src/dayplan/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from datetime import date as _date
from datetime import datetime
from enum import StrEnum

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


class Category(StrEnum):
    """
    Task category (one column of the day board).

    WORK / FAMILY tasks always carry a date, LONG_TERM tasks never do.
    """

    WORK = "WORK"
    FAMILY = "FAMILY"
    LONG_TERM = "LONG_TERM"

    @property
    def is_dated(self) -> bool:
        return self is not Category.LONG_TERM

    @classmethod
    def parse(cls, raw: str) -> Category:
        key = (raw or "").strip().lower()
        found = _CATEGORY_ALIASES.get(key)
        if found is None:
            raise ValueError(f"unknown category: {raw!r}")
        return found

    @classmethod
    def from_db(cls, raw: str | None) -> Category | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


_CATEGORY_ALIASES: dict[str, Category] = {
    "work": Category.WORK,
    "w": Category.WORK,
    "family": Category.FAMILY,
    "f": Category.FAMILY,
    "long_term": Category.LONG_TERM,
    "long": Category.LONG_TERM,
    "long-term": Category.LONG_TERM,
    "longterm": Category.LONG_TERM,
    "lt": Category.LONG_TERM,
    "l": Category.LONG_TERM,
}


class Scope(StrEnum):
    """How far a series edit/delete reaches."""

    SINGLE = "SINGLE"
    FUTURE = "FUTURE"
    ALL = "ALL"


class ActionType(StrEnum):
    EDIT = "EDIT"
    DELETE = "DELETE"


def parse_date(raw: str) -> str:
    """Validate a YYYY-MM-DD string and return it normalized."""
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date().isoformat()
    except (AttributeError, ValueError):
        raise ValueError(f"invalid date (expected YYYY-MM-DD): {raw!r}") from None


def parse_time(raw: str) -> str:
    """Validate an HH:MM string and return it zero-padded."""
    try:
        return datetime.strptime(raw.strip(), TIME_FORMAT).strftime(TIME_FORMAT)
    except (AttributeError, ValueError):
        raise ValueError(f"invalid time (expected HH:MM): {raw!r}") from None


def today_str() -> str:
    return _date.today().isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True, frozen=True)
class TaskEdit:
    """New field values for an EDIT request."""

    text: str
    category: Category
    time: str | None = None
    date: str | None = None


@dataclass(slots=True, frozen=True, eq=False)
class Task:
    id: str
    text: str
    category: Category
    date: str | None
    time: str | None = None
    completed: bool = False
    created_at: float = 0.0
    series_id: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def create(
        cls,
        text: str,
        category: Category,
        *,
        date: str | None = None,
        time: str | None = None,
        current_date: str | None = None,
        series_id: str | None = None,
        created_at: float | None = None,
        task_id: str | None = None,
        completed: bool = False,
    ) -> Task:
        """
        Build a task with the category/date invariant applied:
        - LONG_TERM: date is always cleared
        - WORK / FAMILY: missing date falls back to current_date (or today)
        """
        if category.is_dated:
            resolved_date = date or current_date or today_str()
        else:
            resolved_date = None

        return cls(
            id=task_id or new_id(),
            text=(text or "").strip(),
            category=category,
            date=resolved_date,
            time=time or None,
            completed=bool(completed),
            created_at=_now() if created_at is None else float(created_at),
            series_id=series_id or None,
        )

    @property
    def in_series(self) -> bool:
        return self.series_id is not None

    def toggled(self) -> Task:
        return replace(self, completed=not self.completed)

    def with_edit(
        self, edit: TaskEdit, *, keep_date: bool = False, fallback_date: str | None = None
    ) -> Task:
        """
        Apply `edit`. With keep_date the task keeps its own date; a dated
        category with no date to keep takes fallback_date (or today).
        """
        if not edit.category.is_dated:
            new_date = None
        elif keep_date:
            new_date = self.date or fallback_date or today_str()
        else:
            new_date = edit.date or self.date or fallback_date or today_str()
        return replace(
            self,
            text=(edit.text or "").strip(),
            category=edit.category,
            time=edit.time or None,
            date=new_date,
        )


@dataclass(slots=True, frozen=True)
class RecurrenceRule:
    """
    Weekly recurrence inside an inclusive date range.

    days_of_week uses 0 = Sunday ... 6 = Saturday.
    """

    start_date: str
    end_date: str
    days_of_week: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        bad = [d for d in self.days_of_week if not 0 <= int(d) <= 6]
        if bad:
            raise ValueError(f"weekday index out of range 0-6: {sorted(bad)}")
        object.__setattr__(self, "days_of_week", frozenset(int(d) for d in self.days_of_week))

    def is_empty(self) -> bool:
        return not self.days_of_week


@dataclass(slots=True, frozen=True)
class PendingAction:
    """A series edit/delete waiting for the user to pick a scope."""

    type: ActionType
    target: Task
    edit: TaskEdit | None = None


def _now() -> float:
    return time.time()
