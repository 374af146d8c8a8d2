# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import timedelta

import pytest

from vitatasks.api.errors import TransportError
from vitatasks.tasks import task_scheduler
from vitatasks.tasks.task_scheduler import PeriodicJob, ReminderMonitor

from .fakes import NOW, FakeBackend, make_task


@pytest.fixture()
def fast_jobs(monkeypatch: pytest.MonkeyPatch) -> None:
    # Let tests run jobs far more often than production ever would.
    monkeypatch.setattr(task_scheduler, "MIN_INTERVAL_SECONDS", 0.0)


def _due_at(delta: timedelta) -> str:
    return (NOW + delta).isoformat().replace("+00:00", "Z")


@pytest.mark.asyncio
async def test_periodic_job_ticks_until_stopped(fast_jobs) -> None:
    ticks: list[int] = []

    async def tick() -> None:
        ticks.append(1)

    job = PeriodicJob("t", tick, interval_seconds=0.01, run_immediately=True)
    job.start()
    job.start()  # idempotent
    await asyncio.sleep(0.06)
    await job.stop()

    assert job.running is False
    count = len(ticks)
    assert count >= 2

    await asyncio.sleep(0.03)
    assert len(ticks) == count, "No ticks after stop()"


@pytest.mark.asyncio
async def test_periodic_job_survives_failing_tick(fast_jobs) -> None:
    calls: list[int] = []

    async def flaky() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    job = PeriodicJob("flaky", flaky, interval_seconds=0.01, run_immediately=True)
    job.start()
    await asyncio.sleep(0.05)
    await job.stop()

    assert len(calls) >= 2


def test_periodic_job_interval_has_a_floor() -> None:
    async def noop() -> None:
        return None

    job = PeriodicJob("floor", noop, interval_seconds=0.0)
    assert job.interval_seconds == task_scheduler.MIN_INTERVAL_SECONDS


@pytest.mark.asyncio
async def test_monitor_start_fetches_and_computes(fast_jobs) -> None:
    backend = FakeBackend(
        [
            make_task(1, reminder_time=_due_at(-timedelta(minutes=1))),
            make_task(2, reminder_time=_due_at(timedelta(hours=1))),
        ]
    )
    updates = []
    snapshots = []

    monitor = ReminderMonitor(
        backend,
        on_update=updates.append,
        on_snapshot=snapshots.append,
        reminder_interval=0.01,
        refresh_interval=0.02,
        clock=lambda: NOW,
    )
    await monitor.start()
    assert monitor.running is True
    await asyncio.sleep(0.06)
    await monitor.stop()

    assert monitor.running is False
    assert monitor.state is not None
    assert monitor.state.has_alert is True
    assert monitor.state.due_task_ids == frozenset({1})
    assert len(updates) >= 2
    assert [t.id for t in snapshots[0]] == [1, 2]
    assert sum(1 for name, _ in backend.calls if name == "list_tasks") >= 2


@pytest.mark.asyncio
async def test_refresh_failure_keeps_previous_snapshot() -> None:
    backend = FakeBackend([make_task(1, reminder_time=_due_at(-timedelta(minutes=1)))])
    monitor = ReminderMonitor(backend, clock=lambda: NOW)

    assert await monitor.refresh() is True
    before = monitor.snapshot

    backend.tasks.clear()
    backend.fail_with = TransportError("GET /tasks timed out")
    assert await monitor.refresh() is False

    assert monitor.snapshot == before
    assert monitor.state is not None and monitor.state.has_alert is True


def test_set_snapshot_recomputes_with_clock() -> None:
    now = [NOW]
    monitor = ReminderMonitor(FakeBackend(), clock=lambda: now[0])

    monitor.set_snapshot([make_task(1, reminder_time=_due_at(timedelta(seconds=5)))])
    assert monitor.state.has_alert is False

    now[0] = NOW + timedelta(seconds=5)
    assert monitor.recompute().has_alert is True


def test_failing_update_callback_does_not_break_recompute() -> None:
    def explode(_state) -> None:
        raise RuntimeError("ui went away")

    monitor = ReminderMonitor(FakeBackend(), on_update=explode, clock=lambda: NOW)
    state = monitor.recompute()

    assert state.reminders == ()


def test_unparseable_reminder_is_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    monitor = ReminderMonitor(FakeBackend(), clock=lambda: NOW)
    bad = make_task(9, reminder_time="whenever")

    with caplog.at_level(logging.WARNING, logger="vitatasks.tasks.task_scheduler"):
        monitor.set_snapshot([bad])
        monitor.recompute()
        monitor.recompute()

    hits = [r for r in caplog.records if "unparseable reminderTime" in r.getMessage()]
    assert len(hits) == 1
    assert monitor.state.invalid_task_ids == (9,)


class GatedBackend(FakeBackend):
    """list_tasks blocks until the test opens the gate, like a slow GET /tasks."""

    def __init__(self, tasks) -> None:
        super().__init__(tasks)
        self.gate = threading.Event()

    def list_tasks(self):
        self.gate.wait(timeout=5.0)
        return super().list_tasks()


@pytest.mark.asyncio
async def test_fetch_started_before_a_write_does_not_overwrite_it() -> None:
    backend = GatedBackend([make_task(1, "before write")])
    snapshots = []
    monitor = ReminderMonitor(backend, on_snapshot=snapshots.append, clock=lambda: NOW)

    fetch = asyncio.create_task(monitor.refresh())
    await asyncio.sleep(0.05)  # the fetch is now waiting on the backend

    monitor.set_snapshot([make_task(1, "after write")])
    backend.gate.set()

    assert await fetch is False
    assert [t.title for t in monitor.snapshot] == ["after write"]
    assert [t.title for t in snapshots[-1]] == ["after write"]

    # The next fetch starts after the write and is applied normally.
    assert await monitor.refresh() is True
