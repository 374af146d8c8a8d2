# tests/test_task_api.py

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from vitatasks.api.errors import NotAuthenticatedError
from vitatasks.tasks.task_api import create_task, delete_task, edit_task, refresh_tasks, toggle_task
from vitatasks.tasks.task_models import TaskValidationError

from .fakes import FakeRunner, make_task


def _expected_wire(local_value: str) -> str:
    # Picker values are local wall time; the wire carries UTC.
    dt = datetime.fromisoformat(local_value).astimezone().astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def test_refresh_replaces_snapshot_and_feeds_runner(state, backend) -> None:
    backend.tasks = {1: make_task(1), 2: make_task(2)}
    runner = FakeRunner()
    state.reminder_runner = runner

    snapshot = refresh_tasks(state)

    assert [t.id for t in snapshot] == [1, 2]
    assert state.snapshot() == snapshot
    assert runner.snapshots == [snapshot]


def test_create_rejects_blank_title_without_request(state, backend) -> None:
    with pytest.raises(TaskValidationError):
        create_task(state, "   ")
    assert backend.calls == []


def test_create_converts_reminder_and_refetches(state, backend) -> None:
    snapshot = create_task(state, " Call mom ", "weekly", reminder_local="2026-10-20T09:30")

    name, payload = backend.calls[0]
    assert name == "create_task"
    assert payload["title"] == "Call mom"
    assert payload["reminderTime"] == _expected_wire("2026-10-20T09:30")
    assert backend.calls[-1][0] == "list_tasks"
    assert [t.title for t in snapshot] == ["Call mom"]


def test_create_rejects_bad_reminder_without_request(state, backend) -> None:
    with pytest.raises(TaskValidationError):
        create_task(state, "Call mom", reminder_local="soon")
    assert backend.calls == []


def test_toggle_flips_completion(state, backend) -> None:
    backend.tasks = {1: make_task(1)}
    refresh_tasks(state)

    toggle_task(state, 1)
    assert state.find_task(1).completed is True

    toggle_task(state, 1)
    assert state.find_task(1).completed is False


def test_edit_clears_reminder_and_keeps_other_fields(state, backend) -> None:
    backend.tasks = {1: make_task(1, "Old", description="d", reminder_time="2026-10-20T09:00:00.000Z")}
    refresh_tasks(state)

    edit_task(state, 1, reminder_local=None)

    task = state.find_task(1)
    assert task.reminder_time is None
    assert task.title == "Old"
    assert task.description == "d"


def test_edit_keeps_reminder_by_default(state, backend) -> None:
    backend.tasks = {1: make_task(1, "Old", reminder_time="2026-10-20T09:00:00.000Z")}
    refresh_tasks(state)

    edit_task(state, 1, title="New")

    task = state.find_task(1)
    assert task.title == "New"
    assert task.reminder_time == "2026-10-20T09:00:00.000Z"


def test_edit_without_changes_sends_nothing(state, backend) -> None:
    backend.tasks = {1: make_task(1)}
    refresh_tasks(state)
    backend.calls.clear()

    edit_task(state, 1)

    assert backend.calls == []


def test_edit_falls_back_to_backend_when_snapshot_is_stale(state, backend) -> None:
    backend.tasks = {4: make_task(4, "Remote")}

    edit_task(state, 4, title="Renamed")

    assert [c[0] for c in backend.calls] == ["get_task", "update_task", "list_tasks"]
    assert state.find_task(4).title == "Renamed"


def test_delete_removes_from_snapshot(state, backend) -> None:
    backend.tasks = {1: make_task(1), 2: make_task(2)}
    refresh_tasks(state)

    delete_task(state, 1)

    assert [t.id for t in state.snapshot()] == [2]


def test_failed_write_leaves_snapshot_untouched(state, backend) -> None:
    backend.tasks = {1: make_task(1)}
    refresh_tasks(state)
    before = state.snapshot()
    backend.fail_with = NotAuthenticatedError("HTTP 401")

    with pytest.raises(NotAuthenticatedError):
        toggle_task(state, 1)

    assert state.snapshot() == before


def test_failed_refetch_after_write_hands_off_to_runner(state, backend, monkeypatch) -> None:
    backend.tasks = {1: make_task(1)}
    refresh_tasks(state)
    runner = FakeRunner()
    state.reminder_runner = runner

    def unreachable():
        raise NotAuthenticatedError("HTTP 401")

    monkeypatch.setattr(backend, "list_tasks", unreachable)

    with pytest.raises(NotAuthenticatedError):
        toggle_task(state, 1)

    assert backend.tasks[1].completed is True
    assert runner.refreshes == 1
