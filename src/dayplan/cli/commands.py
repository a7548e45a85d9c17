# src/dayplan/cli/commands.py

from __future__ import annotations

import calendar
import inspect
import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import cast

from ..core.state import AppState
from ..tasks.coordinator import CoordinatorState, Outcome
from ..tasks.series import default_rule_end
from ..tasks.task_models import (
    ActionType,
    Category,
    RecurrenceRule,
    Scope,
    Task,
    TaskEdit,
    parse_date,
    parse_time,
    today_str,
)
from ..tasks.views import day_board, month_marks, upcoming

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

REF_LEN = 6

WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

SCOPE_ALIASES = {
    "single": Scope.SINGLE,
    "s": Scope.SINGLE,
    "one": Scope.SINGLE,
    "future": Scope.FUTURE,
    "f": Scope.FUTURE,
    "all": Scope.ALL,
    "a": Scope.ALL,
}

COLUMN_TITLES = {
    Category.WORK: "WORK",
    Category.FAMILY: "FAMILY & LIFE",
    Category.LONG_TERM: "LONG-TERM & NOTES",
}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


def _split_options(args: list[str], keys: set[str]) -> tuple[dict[str, str], list[str]]:
    """Pull `key=value` tokens for known keys out of args; the rest is free text."""
    opts: dict[str, str] = {}
    rest: list[str] = []
    for tok in args:
        key, sep, value = tok.partition("=")
        if sep and key.lower() in keys:
            opts[key.lower()] = value
        else:
            rest.append(tok)
    return opts, rest


def parse_weekdays(raw: str) -> frozenset[int]:
    """Parse "mon,wed,fri" or "1,3,5" (0 = Sunday) into weekday indices."""
    out: set[int] = set()
    for part in raw.replace(" ", "").lower().split(","):
        if not part:
            continue
        if part.isdigit():
            idx = int(part)
        elif part[:3] in WEEKDAY_NAMES:
            idx = WEEKDAY_NAMES.index(part[:3])
        else:
            raise ValueError(f"unknown weekday: {part!r}")
        if not 0 <= idx <= 6:
            raise ValueError(f"weekday index out of range 0-6: {idx}")
        out.add(idx)
    return frozenset(out)


def parse_day_arg(raw: str, current: str) -> str:
    """Accept YYYY-MM-DD, today, +N / -N (days relative to current)."""
    raw = raw.strip().lower()
    if raw in ("today", "t"):
        return today_str()
    if raw[:1] in ("+", "-") and raw[1:].isdigit():
        return (date.fromisoformat(current) + timedelta(days=int(raw))).isoformat()
    return parse_date(raw)


def find_task(state: AppState, ref: str) -> Task | None:
    """Find a task by full id or unique id prefix."""
    ref = ref.strip().lower()
    if not ref:
        return None
    matches = [t for t in state.coordinator.tasks if t.id.startswith(ref)]
    exact = [t for t in matches if t.id == ref]
    if exact:
        return exact[0]
    if len(matches) == 1:
        return matches[0]
    return None


def short_ref(task: Task) -> str:
    return task.id[:REF_LEN]


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    when = f"{task.time} " if task.time else ""
    repeat = " (repeats)" if task.in_series else ""
    return f"[{mark}] {short_ref(task)} {when}{task.text}{repeat}"


def render_board(state: AppState) -> str:
    board = day_board(state.coordinator.tasks, state.current_date)
    weekday = date.fromisoformat(board.date).strftime("%A")
    lines = [f"=== {board.date} ({weekday}) ==="]
    for category, items in board.columns():
        lines.append(f"{COLUMN_TITLES[category]} ({len(items)})")
        if not items:
            lines.append("  (empty)")
        lines.extend(f"  {format_task(t)}" for t in items)
    return "\n".join(lines)


def _scope_prompt(state: AppState) -> str:
    pending = state.coordinator.pending
    verb = "Delete" if pending is not None and pending.type == ActionType.DELETE else "Edit"
    return (
        f"{verb} a repeating task. Apply to:\n"
        "  /scope single  - this task only\n"
        "  /scope future  - this and later tasks in the series\n"
        "  /scope all     - every task in the series\n"
        "  /cancel        - keep everything as it is"
    )


# ---- command handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    coord = state.coordinator
    series = {t.series_id for t in coord.tasks if t.series_id}
    pending = coord.pending
    waiting = "no"
    if pending is not None:
        waiting = f"{pending.type.value} on {short_ref(pending.target)} ({pending.target.text})"
    return (
        "Status:\n"
        f"  Date: {state.current_date}\n"
        f"  Tasks: {len(coord.tasks)} ({len(series)} repeating series)\n"
        f"  Waiting for scope: {waiting}"
    )


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day            -> show the board for the current date
    /day today      -> jump to today
    /day +1 / -1    -> move relative to the current date
    /day 2024-01-31 -> jump to a date
    """
    if args:
        try:
            state.current_date = parse_day_arg(args[0], state.current_date)
        except ValueError as e:
            return f"{e}. Usage: /day [today | +N | -N | YYYY-MM-DD]"
    return render_board(state)


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <category> [time=HH:MM] [date=YYYY-MM-DD] [days=mon,wed from=.. until=..] <text>
    """
    usage = (
        "Usage: /add <work|family|long> [time=HH:MM] [date=YYYY-MM-DD] "
        "[days=mon,wed,fri from=YYYY-MM-DD until=YYYY-MM-DD] <text>"
    )
    if not args:
        return usage

    settings = state.settings
    opts, rest = _split_options(args[1:], {"time", "date", "days", "from", "until"})
    text = " ".join(rest).strip()
    if not text:
        return "Text required. " + usage

    try:
        category = Category.parse(args[0])
        time_of_day = parse_time(opts["time"]) if opts.get("time") else None
        task_date = parse_date(opts["date"]) if opts.get("date") else None

        rule: RecurrenceRule | None = None
        if "days" in opts and category.is_dated:
            start = (
                parse_date(opts["from"]) if opts.get("from") else (task_date or state.current_date)
            )
            end = (
                parse_date(opts["until"])
                if opts.get("until")
                else default_rule_end(start, getattr(settings, "recurrence_default_days", 30))
            )
            max_days = int(getattr(settings, "max_recurrence_days", 366))
            span = (date.fromisoformat(end) - date.fromisoformat(start)).days
            if span >= max_days:
                return f"Repeat range too long ({span + 1} days, limit {max_days})."
            rule = RecurrenceRule(
                start_date=start, end_date=end, days_of_week=parse_weekdays(opts["days"])
            )
    except ValueError as e:
        return f"{e}. {usage}"

    created = state.coordinator.add(
        text,
        category,
        time=time_of_day,
        recurring=rule,
        date=task_date,
        current_date=state.current_date,
    )
    fell_back = rule is not None and category.is_dated and created[0].series_id is None
    if fell_back and emit is not None:
        emit("No dates matched the repeat rule; added a single task instead.")
    if len(created) > 1:
        return f"Added {len(created)} repeating tasks ({created[0].date} .. {created[-1].date})."
    task = created[0]
    where = task.date or "long-term"
    return f"Added {short_ref(task)} to {COLUMN_TITLES[task.category]} ({where})."


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <ref> [category=..] [time=HH:MM|time=-] [date=YYYY-MM-DD] [new text]
    Fields that are not given keep their current value.
    """
    usage = "Usage: /edit <ref> [category=work|family|long] [time=HH:MM|-] [date=YYYY-MM-DD] [text]"
    if not args:
        return usage
    task = find_task(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."

    opts, rest = _split_options(args[1:], {"category", "time", "date"})
    try:
        category = Category.parse(opts["category"]) if opts.get("category") else task.category
        if "time" in opts:
            time_of_day = None if opts["time"] in ("", "-") else parse_time(opts["time"])
        else:
            time_of_day = task.time
        new_date = parse_date(opts["date"]) if opts.get("date") else task.date
    except ValueError as e:
        return f"{e}. {usage}"

    if category.is_dated and new_date is None:
        new_date = state.current_date

    edit = TaskEdit(
        text=" ".join(rest).strip() or task.text,
        category=category,
        time=time_of_day,
        date=new_date if category.is_dated else None,
    )
    outcome = state.coordinator.edit(task.id, edit)
    if outcome == Outcome.PENDING:
        return _scope_prompt(state)
    if outcome == Outcome.NOT_FOUND:
        return f"No task matches {args[0]!r}."
    return f"Updated {short_ref(task)}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <ref>"
    task = find_task(state, args[0])
    if task is None or state.coordinator.toggle(task.id) != Outcome.APPLIED:
        return f"No task matches {args[0]!r}."
    toggled = state.coordinator.get(task.id)
    status = "done" if toggled is not None and toggled.completed else "not done"
    return f"Marked {short_ref(task)} as {status}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <ref>"
    task = find_task(state, args[0])
    if task is None:
        return f"No task matches {args[0]!r}."
    outcome = state.coordinator.delete(task.id)
    if outcome == Outcome.PENDING:
        return _scope_prompt(state)
    if outcome == Outcome.NOT_FOUND:
        return f"No task matches {args[0]!r}."
    return f"Removed {short_ref(task)}."


def cmd_scope(state: AppState, args: list[str]) -> str:
    if state.coordinator.state != CoordinatorState.AWAITING_SCOPE:
        return "Nothing is waiting for a scope decision."
    if not args or args[0].lower() not in SCOPE_ALIASES:
        return _scope_prompt(state)
    before = len(state.coordinator.tasks)
    state.coordinator.resolve(SCOPE_ALIASES[args[0].lower()])
    after = len(state.coordinator.tasks)
    if after < before:
        return f"Removed {before - after} task(s)."
    return "Applied."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if state.coordinator.cancel() == Outcome.IGNORED:
        return "Nothing to cancel."
    return "Cancelled. Nothing was changed."


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    days = int(getattr(state.settings, "upcoming_days", 3))
    previews = upcoming(state.coordinator.tasks, state.current_date, days=days)
    if not previews:
        return "Coming up: nothing to show."
    lines = ["Coming up:"]
    for p in previews:
        weekday = date.fromisoformat(p.date).strftime("%a")
        summary = "free" if p.is_free else f"work {p.work_count}, family {p.family_count}"
        lines.append(f"  {weekday} {p.date}: {summary}")
    return "\n".join(lines)


def cmd_calendar(state: AppState, args: list[str]) -> str:
    """
    /calendar          -> month of the current date
    /calendar 2024-03  -> that month
    Days with tasks are marked W (work) and/or F (family).
    """
    try:
        if args:
            year_s, _, month_s = args[0].partition("-")
            year, month = int(year_s), int(month_s)
            if not 1 <= month <= 12:
                raise ValueError(args[0])
        else:
            current = date.fromisoformat(state.current_date)
            year, month = current.year, current.month
    except ValueError:
        return "Usage: /calendar [YYYY-MM]"

    marks = month_marks(state.coordinator.tasks, year, month)
    lines = [f"{calendar.month_name[month]} {year}", "Su   Mo   Tu   We   Th   Fr   Sa"]
    for week in calendar.Calendar(firstweekday=6).monthdayscalendar(year, month):
        cells = []
        for day in week:
            if day == 0:
                cells.append("    ")
                continue
            cats = marks.get(f"{year:04d}-{month:02d}-{day:02d}", set())
            flag = ("W" if Category.WORK in cats else "") + ("F" if Category.FAMILY in cats else "")
            cells.append(f"{day:2d}{flag:<2}")
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show date, task counts and pending decisions.")
registry.register(
    "day", cmd_day, help_text="Show the board: /day [today | +N | -N | YYYY-MM-DD].", aliases=["d"]
)
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add work time=09:00 days=mon,wed until=2024-02-01 Stand-up",
    aliases=["a"],
)
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <ref> [category=..] [time=..] [date=..] [text].",
    aliases=["e"],
)
registry.register(
    "done", cmd_done, help_text="Toggle a task done/not done: /done <ref>.", aliases=["x"]
)
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <ref>.", aliases=["del"])
registry.register(
    "scope", cmd_scope, help_text="Answer a repeating-task prompt: /scope single | future | all."
)
registry.register("cancel", cmd_cancel, help_text="Drop a pending repeating-task edit/delete.")
registry.register(
    "upcoming",
    cmd_upcoming,
    help_text="Work/family counts for the next few days.",
    aliases=["next"],
)
registry.register(
    "calendar", cmd_calendar, help_text="Month overview: /calendar [YYYY-MM].", aliases=["cal"]
)
