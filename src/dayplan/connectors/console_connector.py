# src/dayplan/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..cli.commands import render_board
from ..core.state import AppState

logger = logging.getLogger(__name__)

# Commands after which the board is redrawn.
_REDRAW_AFTER = {"add", "a", "edit", "e", "done", "x", "rm", "del", "scope", "cancel"}


def handle_line(state: AppState, line: str, emit: Callable[[str], None] | None = None) -> str:
    """Process one console line and return what should be printed."""
    line = line.strip()
    if not line:
        return ""

    if not line.startswith("/"):
        return "Commands start with '/'. Use /help to list them."

    try:
        reply = command_registry.handle(state, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    reply = reply or ""
    name = line[1:].split(maxsplit=1)[0].lower() if len(line) > 1 else ""
    if name in _REDRAW_AFTER and state.coordinator.pending is None:
        reply = f"{reply}\n\n{render_board(state)}" if reply else render_board(state)
    return reply


def run_console_loop(state: AppState, input_fn: Callable[[str], str] = input) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.coordinator.tasks))
    print(render_board(state))
    print("\nUse /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(text, flush=True)

    while True:
        try:
            user_input = input_fn("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input, emit=emit)
        if reply:
            print(reply)
            print()

    logger.info("Console connector finished.")
