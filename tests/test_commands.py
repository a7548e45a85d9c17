# tests/test_commands.py

from __future__ import annotations

from dayplan.cli.commands import CommandRegistry, find_task, parse_weekdays, registry
from dayplan.connectors.console_connector import handle_line, run_console_loop
from dayplan.tasks.coordinator import CoordinatorState
from dayplan.tasks.task_models import Category


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    notes: list[str] = []
    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_parse_weekdays() -> None:
    assert parse_weekdays("mon,wed,fri") == frozenset({1, 3, 5})
    assert parse_weekdays("0,6") == frozenset({0, 6})
    assert parse_weekdays("") == frozenset()


def test_add_single_and_long_term(state, repo) -> None:
    reply = registry.handle(state, "/add work time=9:00 write report")
    assert reply is not None and reply.startswith("Added")

    registry.handle(state, "/add long learn piano")

    tasks = state.coordinator.tasks
    assert [(t.text, t.category, t.date, t.time) for t in tasks] == [
        ("write report", Category.WORK, "2024-01-03", "09:00"),
        ("learn piano", Category.LONG_TERM, None, None),
    ]
    assert len(repo.saves) == 2


def test_add_recurring_then_delete_future(state) -> None:
    reply = registry.handle(
        state, "/add work days=mon,wed,fri from=2024-01-01 until=2024-01-14 standup"
    )
    assert reply == "Added 6 repeating tasks (2024-01-01 .. 2024-01-12)."

    target = next(t for t in state.coordinator.tasks if t.date == "2024-01-08")
    prompt = registry.handle(state, f"/rm {target.id[:8]}")
    assert "/scope future" in (prompt or "")
    assert state.coordinator.state == CoordinatorState.AWAITING_SCOPE

    assert registry.handle(state, "/scope future") == "Removed 3 task(s)."
    assert [t.date for t in state.coordinator.tasks] == ["2024-01-01", "2024-01-03", "2024-01-05"]


def test_add_with_empty_days_falls_back_and_notifies(state) -> None:
    notes: list[str] = []
    registry.handle(state, "/add family days= gym", emit=notes.append)
    assert len(state.coordinator.tasks) == 1
    assert state.coordinator.tasks[0].series_id is None
    assert notes and "single task" in notes[0]


def test_add_rejects_overlong_range(state) -> None:
    reply = registry.handle(state, "/add work days=mon from=2024-01-01 until=2026-01-01 x")
    assert reply is not None and "too long" in reply
    assert state.coordinator.tasks == ()


def test_add_long_term_ignores_repeat_options(state) -> None:
    notes: list[str] = []
    reply = registry.handle(
        state, "/add long days=mon from=2024-01-01 until=2026-01-01 learn piano", emit=notes.append
    )
    assert reply is not None and reply.startswith("Added")
    assert notes == []
    (task,) = state.coordinator.tasks
    assert (task.category, task.date, task.series_id) == (Category.LONG_TERM, None, None)


def test_edit_series_all_and_cancel(state) -> None:
    registry.handle(state, "/add work days=mon from=2024-01-01 until=2024-01-15 review")
    first = state.coordinator.tasks[0]

    registry.handle(state, f"/rm {first.id}")
    assert registry.handle(state, "/cancel") == "Cancelled. Nothing was changed."
    assert len(state.coordinator.tasks) == 3

    registry.handle(state, f"/edit {first.id} time=15:00 weekly review")
    assert registry.handle(state, "/scope all") == "Applied."
    assert [(t.text, t.time, t.date) for t in state.coordinator.tasks] == [
        ("weekly review", "15:00", "2024-01-01"),
        ("weekly review", "15:00", "2024-01-08"),
        ("weekly review", "15:00", "2024-01-15"),
    ]


def test_scope_without_pending(state) -> None:
    assert registry.handle(state, "/scope all") == "Nothing is waiting for a scope decision."


def test_done_toggles(state) -> None:
    registry.handle(state, "/add family call grandma")
    task = state.coordinator.tasks[0]
    assert "as done" in (registry.handle(state, f"/done {task.id}") or "")
    assert state.coordinator.tasks[0].completed is True
    assert "not done" in (registry.handle(state, f"/done {task.id}") or "")


def test_unknown_ref(state) -> None:
    assert registry.handle(state, "/rm nope") == "No task matches 'nope'."
    assert find_task(state, "") is None


def test_day_navigation_and_board(state) -> None:
    registry.handle(state, "/add work date=2024-01-04 tomorrow thing")
    board = registry.handle(state, "/day +1") or ""
    assert state.current_date == "2024-01-04"
    assert "tomorrow thing" in board
    assert "WORK (1)" in board
    assert "(empty)" in board

    registry.handle(state, "/day 2024-02-01")
    assert state.current_date == "2024-02-01"
    assert "Usage" in (registry.handle(state, "/day someday") or "")


def test_upcoming_and_calendar(state) -> None:
    registry.handle(state, "/add work date=2024-01-04 a")
    registry.handle(state, "/add family date=2024-01-04 b")
    upcoming = registry.handle(state, "/upcoming") or ""
    assert "2024-01-04: work 1, family 1" in upcoming
    assert "2024-01-05: free" in upcoming

    cal = registry.handle(state, "/calendar 2024-01") or ""
    assert cal.startswith("January 2024")
    assert " 4WF" in cal


def test_handle_line_redraws_board_after_mutation(state) -> None:
    reply = handle_line(state, "/add work ship it")
    assert "ship it" in reply
    assert "LONG-TERM & NOTES" in reply
    assert "Commands start with" in handle_line(state, "hello")


def test_console_loop_runs_until_exit(state, capsys) -> None:
    lines = iter(["/add work loop task", "", "/exit"])
    run_console_loop(state, input_fn=lambda _prompt: next(lines))
    out = capsys.readouterr().out
    assert "loop task" in out
    assert len(state.coordinator.tasks) == 1
