# src/vitatasks/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds and hydrates the session/theme stores and wires them into AppState,
- starts/stops the reminder runner together with the logged-in session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..api.client import VitaApiClient
from ..config import get_settings
from ..connectors.reminder_runner import ReminderNotifier, start_reminders_in_background
from ..core.ports import BackendApi
from ..core.session import SessionStore
from ..core.state import AppState
from ..core.theme import ThemeStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)
    settings.theme_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, api: BackendApi | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings(); if api is None, builds the
    httpx-backed VitaApiClient.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    session = SessionStore(settings.session_path)
    session.hydrate()

    theme = ThemeStore(settings.theme_path, default_dark=bool(getattr(settings, "default_dark_theme", False)))
    theme.hydrate()

    if api is None:
        api = VitaApiClient(settings, session)

    return AppState(settings=settings, api=api, session=session, theme=theme)


def activate_session(state: AppState, emit: Callable[[str], None] | None = None) -> None:
    """Start the reminder runner for the logged-in user (no-op if already running)."""
    if state.reminder_runner is not None or not state.session.is_authenticated:
        return
    if not getattr(state.settings, "reminders_enabled", True):
        logger.info("Reminders disabled; not starting the reminder runner.")
        return

    notifier = ReminderNotifier(emit=emit) if emit is not None else None
    state.reminder_runner = start_reminders_in_background(state, notifier)


def deactivate_session(state: AppState, timeout: float = 5.0) -> None:
    """Stop the reminder runner and drop derived state; leaves the session itself alone."""
    runner = state.reminder_runner
    state.reminder_runner = None
    if runner is not None:
        runner.stop()
        runner.join(timeout=timeout)

    state.replace_tasks(())
    with state.lock:
        state.reminders = None


def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        deactivate_session(state)
    except Exception:
        logger.exception("Failed to stop the reminder runner.")

    try:
        state.api.close()
    except Exception:
        logger.debug("API client close failed.", exc_info=True)
