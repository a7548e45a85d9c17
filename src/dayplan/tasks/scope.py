# src/dayplan/tasks/scope.py

from __future__ import annotations

"""
Scope resolution for series edits and deletes.

Given the full collection, a pending action on a series member and a scope,
compute the replacement collection. The input list is never mutated and the
relative order of surviving tasks is preserved.

FUTURE compares YYYY-MM-DD strings lexicographically. A dateless target uses
MIN_DATE as its cutoff, so it never excludes anything. Dateless siblings are
always in range: they are deleted by a FUTURE delete and edited by a FUTURE
edit.
"""

import logging
from collections.abc import Sequence

from .task_models import ActionType, Scope, Task, TaskEdit

logger = logging.getLogger(__name__)

MIN_DATE = "0000-00-00"


def series_members(tasks: Sequence[Task], series_id: str) -> list[Task]:
    return [t for t in tasks if t.series_id == series_id]


def _cutoff(target: Task) -> str:
    return target.date or MIN_DATE


def _before_cutoff(task: Task, cutoff: str) -> bool:
    return task.date is not None and task.date < cutoff


def _resolve_delete(tasks: Sequence[Task], target: Task, scope: Scope) -> list[Task]:
    series_id = target.series_id

    if scope == Scope.SINGLE:
        return [t for t in tasks if t.id != target.id]

    if scope == Scope.ALL:
        return [t for t in tasks if t.series_id != series_id]

    cutoff = _cutoff(target)
    return [
        t
        for t in tasks
        if t.series_id != series_id or (t.id != target.id and _before_cutoff(t, cutoff))
    ]


def _resolve_edit(
    tasks: Sequence[Task], target: Task, scope: Scope, edit: TaskEdit
) -> list[Task]:
    if scope == Scope.SINGLE:
        return [t.with_edit(edit) if t.id == target.id else t for t in tasks]

    series_id = target.series_id
    cutoff = _cutoff(target)
    anchor = target.with_edit(edit).date
    out: list[Task] = []
    for t in tasks:
        if t.series_id != series_id:
            out.append(t)
        elif t.id == target.id:
            out.append(t.with_edit(edit))
        elif scope == Scope.FUTURE and _before_cutoff(t, cutoff):
            out.append(t)
        else:
            # Siblings keep their own date; dateless ones take the target's.
            out.append(t.with_edit(edit, keep_date=True, fallback_date=anchor))
    return out


def resolve_scope(
    tasks: Sequence[Task],
    action: ActionType | str,
    target: Task,
    scope: Scope | str,
    edit: TaskEdit | None = None,
) -> list[Task]:
    """
    Return the collection after applying `action` to `target` under `scope`.

    The target must belong to a series. Unknown actions/scopes, or an EDIT
    without an edit payload, leave the collection unchanged.
    """
    try:
        scope = Scope(scope)
        action = ActionType(action)
    except ValueError:
        logger.warning("Ignoring scope resolution action=%s scope=%s", action, scope)
        return list(tasks)

    if action == ActionType.DELETE:
        out = _resolve_delete(tasks, target, scope)
    elif edit is None:
        logger.warning("EDIT without new data for task=%s; nothing changed", target.id)
        return list(tasks)
    else:
        out = _resolve_edit(tasks, target, scope, edit)

    logger.debug(
        "Resolved %s scope=%s target=%s series=%s: %d -> %d tasks",
        action.value,
        scope.value,
        target.id,
        target.series_id,
        len(tasks),
        len(out),
    )
    return out
