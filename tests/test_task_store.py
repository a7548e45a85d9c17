# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from dataclasses import astuple
from pathlib import Path

from dayplan.tasks.coordinator import TaskCoordinator
from dayplan.tasks.task_models import Category
from dayplan.tasks.task_store import TaskStore

from .fakes import make_series, make_task


def test_empty_store_loads_nothing(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    assert store.load_tasks() == []
    assert store.count_tasks() == 0


def test_save_load_keeps_order_and_fields(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    tasks = [
        make_task("late", time="18:00", completed=True, created_at=5.5, task_id="z"),
        *make_series(["2024-01-01", "2024-01-08"]),
        make_task("dream", Category.LONG_TERM, date=None, task_id="a"),
    ]

    store.save_tasks(tasks)
    loaded = store.load_tasks()

    assert [t.id for t in loaded] == ["z", "d1", "d2", "a"]
    assert [astuple(t) for t in loaded] == [astuple(t) for t in tasks]


def test_save_replaces_previous_collection(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    store.save_tasks(make_series(["2024-01-01", "2024-01-02", "2024-01-03"]))
    store.save_tasks([make_task("only", task_id="only")])

    assert [t.id for t in store.load_tasks()] == ["only"]
    assert store.count_tasks() == 1


def test_missing_optionals_and_unknown_category(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    TaskStore(db)

    conn = sqlite3.connect(db)
    with conn:
        conn.execute(
            "INSERT INTO tasks(id, position, text, category, date) VALUES (?, ?, ?, ?, ?)",
            ("bare", 0, "no extras", "FAMILY", "2024-02-02"),
        )
        conn.execute(
            "INSERT INTO tasks(id, position, text, category, date) VALUES (?, ?, ?, ?, ?)",
            ("odd", 1, "mystery", "HOBBY", "2024-02-02"),
        )
        conn.execute(
            "INSERT INTO tasks(id, position, text, category, date) VALUES (?, ?, ?, ?, ?)",
            ("lt", 2, "someday", "LONG_TERM", "2024-02-02"),
        )
    conn.close()

    loaded = TaskStore(db).load_tasks()

    assert [t.id for t in loaded] == ["bare", "lt"]
    bare, long_term = loaded
    assert bare.series_id is None
    assert bare.time is None
    assert bare.completed is False
    assert long_term.date is None


def test_old_schema_gets_migrated(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    conn = sqlite3.connect(db)
    with conn:
        conn.execute(
            "CREATE TABLE tasks ("
            "id TEXT PRIMARY KEY, text TEXT NOT NULL, category TEXT NOT NULL, date TEXT)"
        )
        conn.execute(
            "INSERT INTO tasks(id, text, category, date) "
            "VALUES ('old', 'legacy', 'WORK', '2024-01-01')"
        )
    conn.close()

    store = TaskStore(db)
    loaded = store.load_tasks()

    assert [t.id for t in loaded] == ["old"]
    assert loaded[0].series_id is None
    assert loaded[0].completed is False

    store.save_tasks([*loaded, make_task("new", task_id="new")])
    assert [t.id for t in store.load_tasks()] == ["old", "new"]


def test_save_keeps_rows_with_unknown_category(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(db)
    conn = sqlite3.connect(db)
    with conn:
        conn.execute(
            "INSERT INTO tasks(id, position, text, category, date) VALUES (?, ?, ?, ?, ?)",
            ("odd", 0, "mystery", "HOBBY", "2024-02-02"),
        )
    conn.close()

    coordinator = TaskCoordinator(store.load_tasks(), on_commit=store.save_tasks)
    coordinator.add("new", Category.WORK, date="2024-02-03")
    coordinator.add("newer", Category.FAMILY, date="2024-02-04")

    conn = sqlite3.connect(db)
    ids = {row[0] for row in conn.execute("SELECT id FROM tasks")}
    conn.close()
    assert "odd" in ids
    assert [t.text for t in store.load_tasks()] == ["new", "newer"]
