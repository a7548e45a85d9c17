# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from dayplan.cli.bootstrap import create_initial_state
from dayplan.core.state import AppState

from .fakes import FakeTaskRepo


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    A SimpleNamespace rather than the real config keeps tests isolated from
    the environment and any local .env file.
    """
    return SimpleNamespace(
        app_name="dayplan-test",
        log_level="WARNING",
        file_log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        recurrence_default_days=30,
        max_recurrence_days=366,
        upcoming_days=3,
    )


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeTaskRepo) -> AppState:
    st = create_initial_state(settings=settings, task_repo=repo)
    st.current_date = "2024-01-03"
    return st
