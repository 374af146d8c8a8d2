# src/vitatasks/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (hydrating the saved session and theme),
starts the reminder runner if a session was restored, then runs the console
REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import activate_session, create_initial_state, shutdown
from ..config import get_settings
from ..connectors.console_connector import print_ts, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/vitatasks")
    log_file = setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s (log file: %s)", getattr(settings, "app_name", "VitaTasks"), log_file)

    state = create_initial_state(settings=settings)

    try:
        if state.session.is_authenticated:
            activate_session(state, emit=print_ts)
        run_console_loop(state)
    finally:
        shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
