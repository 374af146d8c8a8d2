# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

import pytest

from vitatasks.cli.bootstrap import activate_session, create_initial_state, deactivate_session, shutdown
from vitatasks.config import Settings
from vitatasks.connectors.console_connector import build_prompt
from vitatasks.tasks.reminders import compute_reminders

from .fakes import NOW, FakeBackend, FakeRunner, make_task


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VITA_API_BASE_URL", "https://tasks.example/api/")
    monkeypatch.setenv("VITA_REMINDERS_ENABLED", "no")
    monkeypatch.setenv("VITA_REMINDER_CHECK_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("VITA_TASK_REFRESH_INTERVAL_SECONDS", "not-a-number")
    monkeypatch.setenv("VITA_THEME", "dark")
    monkeypatch.setenv("VITA_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("VITA_SESSION_PATH", raising=False)

    s = Settings.from_env()

    assert s.api_base_url == "https://tasks.example/api"
    assert s.reminders_enabled is False
    assert s.reminder_check_interval_seconds == 2.5
    assert s.task_refresh_interval_seconds == 30.0
    assert s.default_dark_theme is True
    assert s.session_path == tmp_path / "session.json"


def test_create_initial_state_restores_session(settings) -> None:
    settings.session_path.write_text('{"token": "t-1", "username": "alice"}', "utf-8")
    backend = FakeBackend()

    state = create_initial_state(settings=settings, api=backend)

    assert state.api is backend
    assert state.session.username == "alice"
    assert state.theme.is_dark is False


def test_activate_is_noop_when_logged_out_or_disabled(state) -> None:
    activate_session(state)
    assert state.reminder_runner is None

    state.session.login("token-alice", "alice")
    activate_session(state)  # reminders_enabled=False in the test settings
    assert state.reminder_runner is None


def test_deactivate_stops_runner_and_drops_derived_state(logged_in) -> None:
    runner = FakeRunner()
    logged_in.reminder_runner = runner
    logged_in.replace_tasks([make_task(1)])
    logged_in.reminders = compute_reminders(logged_in.snapshot(), now=NOW)

    deactivate_session(logged_in)

    assert runner.stopped is True
    assert logged_in.reminder_runner is None
    assert logged_in.snapshot() == ()
    assert logged_in.reminders is None
    # The session itself survives; /logout clears it separately.
    assert logged_in.session.is_authenticated is True


def test_shutdown_closes_client(state, backend) -> None:
    shutdown(state)
    assert backend.closed is True


def test_prompt_shows_alert_marker(state) -> None:
    assert build_prompt(state) == ">>> guest: "

    state.session.login("token-alice", "alice")
    state.reminders = compute_reminders(
        [make_task(1, reminder_time="2026-10-19T17:00:00Z")], now=NOW
    )
    assert build_prompt(state) == ">>> alice (!): "
