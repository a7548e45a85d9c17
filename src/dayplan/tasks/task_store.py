# src/dayplan/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from .task_models import Category, Task

logger = logging.getLogger(__name__)

# Unknown-category rows are never loaded, so a save must not erase them.
_DELETE_KNOWN_SQL = (
    "DELETE FROM tasks WHERE category IN (" + ", ".join("?" for _ in Category) + ")"
)


class TaskStore:
    """
    SQLite task store.

    The whole collection is the state: load_tasks() returns it in saved order,
    save_tasks() replaces it in one transaction.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    series_id TEXT,
                    text TEXT NOT NULL DEFAULT '',
                    category TEXT NOT NULL,
                    date TEXT,
                    time TEXT,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL DEFAULT 0
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("position", "INTEGER NOT NULL DEFAULT 0")
            add_col("series_id", "TEXT")
            add_col("time", "TEXT")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_series ON tasks(series_id)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_date ON tasks(category, date)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task | None:
        category = Category.from_db(row["category"])
        if category is None:
            logger.warning(
                "Skipping task id=%s with unknown category %r", row["id"], row["category"]
            )
            return None
        return Task.create(
            str(row["text"] or ""),
            category,
            date=row["date"] or None,
            time=row["time"] or None,
            series_id=row["series_id"] or None,
            created_at=float(row["created_at"] or 0.0),
            task_id=str(row["id"]),
            completed=bool(row["completed"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def load_tasks(self) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY position ASC, created_at ASC")
            out: list[Task] = []
            for row in cur.fetchall():
                task = self._row_to_task(row)
                if task is not None:
                    out.append(task)
            logger.debug("Loaded %d tasks from %s", len(out), self._db_path)
            return out
        finally:
            conn.close()

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        """
        Replace the stored collection with `tasks` (order preserved).

        Rows whose category load_tasks() skips are left in place.
        """
        rows = [
            (
                t.id,
                pos,
                t.series_id,
                t.text,
                t.category.value,
                t.date,
                t.time,
                int(t.completed),
                float(t.created_at),
            )
            for pos, t in enumerate(tasks)
        ]

        conn = self._get_conn()
        try:
            with conn:
                conn.execute(_DELETE_KNOWN_SQL, [c.value for c in Category])
                conn.executemany(
                    """
                    INSERT INTO tasks(
                        id, position, series_id, text, category,
                        date, time, completed, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
            logger.debug("Saved %d tasks to %s", len(rows), self._db_path)
        except sqlite3.Error:
            logger.exception("Failed to save %d tasks to %s", len(rows), self._db_path)
            raise
        finally:
            conn.close()
