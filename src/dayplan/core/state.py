# src/dayplan/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.coordinator import TaskCoordinator
from ..tasks.task_models import today_str
from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: object

    task_repo: TaskRepo
    coordinator: TaskCoordinator

    # Date the board is showing; also the default date for new tasks.
    current_date: str = field(default_factory=today_str)
