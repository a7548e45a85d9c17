# src/dayplan/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The coordinator and the CLI depend on Protocols instead of concrete storage,
so tests can swap in an in-memory repo.
"""

from collections.abc import Iterable
from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Load/save boundary: the whole ordered collection in, the whole collection out."""

    def load_tasks(self) -> list[Task]: ...
    def save_tasks(self, tasks: Iterable[Task]) -> None: ...
