# src/dayplan/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a local default; nothing is required at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYPLAN"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    file_log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Planner ----
    recurrence_default_days: int
    max_recurrence_days: int
    upcoming_days: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "dayplan") or "dayplan"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        file_log_level = _env(_k("FILE_LOG_LEVEL"), "DEBUG")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/dayplan"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        # The add form proposes "start + 30 days" as the end of a series.
        recurrence_default_days = max(0, _env_int(_k("RECURRENCE_DEFAULT_DAYS"), 30))
        # Series expansion itself is unbounded; this is the caller-side guard.
        max_recurrence_days = max(1, _env_int(_k("MAX_RECURRENCE_DAYS"), 366))
        upcoming_days = max(0, _env_int(_k("UPCOMING_DAYS"), 3))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            file_log_level=file_log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            recurrence_default_days=recurrence_default_days,
            max_recurrence_days=max_recurrence_days,
            upcoming_days=upcoming_days,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
