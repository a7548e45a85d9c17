# src/dayplan/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- loads the task collection and wires the coordinator to save after each commit.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks.coordinator import TaskCoordinator
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, task_repo: TaskRepo | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the repo injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if task_repo is None:
        _ensure_local_dirs(settings)
        task_repo = TaskStore(settings.tasks_db_path)

    tasks = task_repo.load_tasks()
    logger.info("Loaded %d tasks", len(tasks))

    coordinator = TaskCoordinator(tasks, on_commit=task_repo.save_tasks)
    return AppState(settings=settings, task_repo=task_repo, coordinator=coordinator)
