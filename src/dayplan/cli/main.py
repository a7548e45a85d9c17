# src/dayplan/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = getattr(logging, str(settings.log_level).upper(), logging.WARNING)
    file_level = getattr(logging, str(settings.file_log_level).upper(), logging.DEBUG)
    setup_logging(log_dir=settings.data_dir, console_level=console_level, file_level=file_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    run_console_loop(state)
    logger.info("Bye.")


if __name__ == "__main__":
    main()
