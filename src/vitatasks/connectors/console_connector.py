# src/vitatasks/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def build_prompt(state: AppState) -> str:
    """'>>> alice (!): ' while any reminder is due, '>>> guest: ' when logged out."""
    name = state.session.username if state.session.is_authenticated else "guest"
    with state.lock:
        reminders = state.reminders
    bell = " (!)" if reminders is not None and reminders.has_alert else ""
    return f">>> {name}{bell}: "


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (user=%s).", state.session.username)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "VitaTasks"))
    print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    if not state.session.is_authenticated:
        print_ts("You are not logged in. Use /login <username> <password> or /register.")

    while True:
        try:
            user_input = input(build_prompt(state)).strip()
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

        if not user_input.startswith("/"):
            print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            response = command_registry.handle(state, user_input, emit=print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print_ts(response)

    logger.info("Console connector finished.")
