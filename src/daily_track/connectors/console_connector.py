# src/daily_track/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from ..cli.commands import format_day_snapshot
from ..cli.commands import registry as command_registry
from ..core import service
from ..core.state import AppState

logger = logging.getLogger(__name__)

_EXIT_COMMANDS = ("/exit", "/quit")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Route one console line. Returns the reply to print, or None to exit.

    Plain text (not a slash command) gets a short hint instead of an error.
    """
    line = line.strip()
    if not line:
        return ""
    if line.lower() in _EXIT_COMMANDS:
        return None
    reply = command_registry.handle(state, line)
    if reply is None:
        return "Commands start with '/'. Use /help to list available commands."
    return reply


def run_console_loop(state: AppState, *, read: Callable[[str], str] = input) -> None:
    logger.info("Console connector started db=%s", getattr(state.settings, "db_path", "?"))
    app_name = str(getattr(state.settings, "app_name", "dailytrack"))

    print(f"[{app_name}] Use /help for commands, /exit to quit.\n")
    print(format_day_snapshot(service.load_day(state, date.today())))

    while True:
        try:
            user_input = read(">>> ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        reply = handle_line(state, user_input)
        if reply is None:
            logger.info("Console exit command received.")
            break
        if reply:
            print(reply)
