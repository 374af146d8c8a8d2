# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from vitatasks.core.session import SessionStore
from vitatasks.core.state import AppState
from vitatasks.core.theme import ThemeStore

from .fakes import FakeBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    A SimpleNamespace, not Settings.from_env(): tests never read the environment.
    """
    return SimpleNamespace(
        app_name="VitaTasks",
        api_base_url="http://backend.test/api",
        http_timeout_seconds=5.0,
        # The background thread is exercised in its own test only.
        reminders_enabled=False,
        reminder_check_interval_seconds=0.5,
        task_refresh_interval_seconds=0.5,
        default_dark_theme=False,
        data_dir=tmp_path,
        session_path=tmp_path / "session.json",
        theme_path=tmp_path / "theme.json",
    )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def state(settings: SimpleNamespace, backend: FakeBackend) -> AppState:
    """AppState wired with the in-memory backend and real file-backed stores."""
    return AppState(
        settings=settings,
        api=backend,
        session=SessionStore(settings.session_path),
        theme=ThemeStore(settings.theme_path),
    )


@pytest.fixture()
def logged_in(state: AppState) -> AppState:
    state.session.login("token-alice", "alice")
    return state
