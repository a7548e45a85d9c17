# src/dayplan/tasks/coordinator.py

from __future__ import annotations

"""
Mutation coordinator.

Owns the in-memory task collection and routes add/edit/delete/toggle
requests. Edits and deletes on series members do not mutate anything until
a scope is chosen: the coordinator moves to AWAITING_SCOPE and holds a
PendingAction until resolve() or cancel().

Every committed mutation swaps in a complete new list, then calls the
on_commit hook (persistence) once.
"""

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from enum import StrEnum

from .scope import resolve_scope
from .series import expand_series
from .task_models import (
    ActionType,
    Category,
    PendingAction,
    RecurrenceRule,
    Scope,
    Task,
    TaskEdit,
)

logger = logging.getLogger(__name__)

CommitHook = Callable[[Sequence[Task]], None]


class CoordinatorState(StrEnum):
    IDLE = "idle"
    AWAITING_SCOPE = "awaiting_scope"


class Outcome(StrEnum):
    APPLIED = "applied"
    PENDING = "pending"
    NOT_FOUND = "not_found"
    IGNORED = "ignored"


class TaskCoordinator:
    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        on_commit: CommitHook | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)
        self._on_commit = on_commit
        self._clock = clock
        self._pending: PendingAction | None = None

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def state(self) -> CoordinatorState:
        if self._pending is None:
            return CoordinatorState.IDLE
        return CoordinatorState.AWAITING_SCOPE

    @property
    def pending(self) -> PendingAction | None:
        return self._pending

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- low-level helpers ----

    def _commit(self, new_tasks: Iterable[Task]) -> None:
        self._tasks = tuple(new_tasks)
        if self._on_commit is None:
            return
        try:
            self._on_commit(self._tasks)
        except Exception:
            logger.exception("Commit hook failed (tasks=%d).", len(self._tasks))

    def _hold(self, action: PendingAction) -> Outcome:
        if self._pending is not None:
            logger.info(
                "Replacing pending %s on task=%s with %s on task=%s",
                self._pending.type.value,
                self._pending.target.id,
                action.type.value,
                action.target.id,
            )
        self._pending = action
        return Outcome.PENDING

    # ---- public API ----

    def add(
        self,
        text: str,
        category: Category,
        *,
        time: str | None = None,
        recurring: RecurrenceRule | None = None,
        date: str | None = None,
        current_date: str | None = None,
    ) -> list[Task]:
        """
        Create one task, or one series when a non-empty rule is given.

        A rule that produces no instances falls back to a single task so the
        request never silently vanishes.
        """
        now = self._clock()

        if category == Category.LONG_TERM:
            created = [Task.create(text, category, created_at=now)]
        else:
            created = []
            if recurring is not None and not recurring.is_empty():
                created = expand_series(text, category, recurring, time_of_day=time, now=now)
                if not created:
                    logger.info(
                        "Recurrence %s..%s produced no dates; adding a single task",
                        recurring.start_date,
                        recurring.end_date,
                    )
            if not created:
                created = [
                    Task.create(
                        text,
                        category,
                        date=date,
                        time=time,
                        current_date=current_date,
                        created_at=now,
                    )
                ]

        self._commit([*self._tasks, *created])
        logger.info(
            "Added %d task(s) category=%s series=%s",
            len(created),
            category.value,
            created[0].series_id,
        )
        return created

    def toggle(self, task_id: str) -> Outcome:
        if self.get(task_id) is None:
            logger.debug("toggle: unknown task id=%s", task_id)
            return Outcome.NOT_FOUND
        self._commit(t.toggled() if t.id == task_id else t for t in self._tasks)
        return Outcome.APPLIED

    def edit(self, task_id: str, edit: TaskEdit) -> Outcome:
        task = self.get(task_id)
        if task is None:
            logger.debug("edit: unknown task id=%s", task_id)
            return Outcome.NOT_FOUND
        if task.in_series:
            return self._hold(PendingAction(type=ActionType.EDIT, target=task, edit=edit))
        self._commit(t.with_edit(edit) if t.id == task_id else t for t in self._tasks)
        return Outcome.APPLIED

    def delete(self, task_id: str) -> Outcome:
        task = self.get(task_id)
        if task is None:
            logger.debug("delete: unknown task id=%s", task_id)
            return Outcome.NOT_FOUND
        if task.in_series:
            return self._hold(PendingAction(type=ActionType.DELETE, target=task))
        self._commit(t for t in self._tasks if t.id != task_id)
        return Outcome.APPLIED

    def resolve(self, scope: Scope | str) -> Outcome:
        """Apply the pending action under `scope` and return to IDLE."""
        pending = self._pending
        if pending is None:
            logger.debug("resolve(%s) with nothing pending; ignored", scope)
            return Outcome.IGNORED

        if scope not in tuple(Scope):
            logger.warning("Unknown scope %r; pending %s kept", scope, pending.type.value)
            return Outcome.IGNORED

        self._pending = None

        self._commit(
            resolve_scope(self._tasks, pending.type, pending.target, scope, pending.edit)
        )
        logger.info(
            "Resolved %s on series=%s scope=%s",
            pending.type.value,
            pending.target.series_id,
            Scope(scope).value,
        )
        return Outcome.APPLIED

    def cancel(self) -> Outcome:
        if self._pending is None:
            return Outcome.IGNORED
        logger.debug(
            "Cancelled pending %s on task=%s", self._pending.type.value, self._pending.target.id
        )
        self._pending = None
        return Outcome.APPLIED
