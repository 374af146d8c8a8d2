# src/vitatasks/tasks/task_scheduler.py

"""
Reminder monitor.

Two independent polling loops over one task snapshot:
- recompute (every reminder_interval seconds): re-run the reminder engine on the
  last fetched snapshot so due/upcoming flips as time passes (no I/O),
- refresh (every refresh_interval seconds): re-fetch GET /tasks, replace the
  snapshot, then recompute once immediately.

Both loops are PeriodicJob instances with an explicit start/stop lifecycle; the
owner starts them when the task view becomes active and stops them when it goes
away, so no background work outlives the view.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..api.errors import ApiError
from ..core.ports import TaskApi
from .reminders import compute_reminders
from .task_models import ReminderState, Task
from .timestamps import now_local

logger = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 0.5


class PeriodicJob:
    """
    Run an async callback every interval_seconds on the current event loop.

    A failing tick is logged and the loop keeps going. To stop, call stop()
    (cancels the underlying asyncio task and waits for it).
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[], Awaitable[None]],
        *,
        interval_seconds: float,
        run_immediately: bool = False,
    ) -> None:
        self.name = name
        self.interval_seconds = max(MIN_INTERVAL_SECONDS, float(interval_seconds))
        self._callback = callback
        self._run_immediately = run_immediately
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=f"job:{self.name}")
        logger.debug("Job %s started (interval=%.1fs)", self.name, self.interval_seconds)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Job %s stopped", self.name)

    async def _loop(self) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self.interval_seconds)
        while True:
            try:
                await self._callback()
            except Exception:
                logger.exception("Job %s tick failed", self.name)
            await asyncio.sleep(self.interval_seconds)


class ReminderMonitor:
    """
    Owns the task snapshot and the derived ReminderState.

    on_update(state) runs after every recompute; on_snapshot(tasks) after every
    successful refetch. Both run on the monitor's event loop.
    """

    def __init__(
        self,
        api: TaskApi,
        *,
        on_update: Callable[[ReminderState], None] | None = None,
        on_snapshot: Callable[[tuple[Task, ...]], None] | None = None,
        reminder_interval: float = 10.0,
        refresh_interval: float = 30.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._api = api
        self._on_update = on_update
        self._on_snapshot = on_snapshot
        self._clock = clock or now_local

        self._snapshot: tuple[Task, ...] = ()
        # Bumped on every snapshot replacement; a fetch started before a newer
        # replacement is discarded.
        self._generation = 0
        self._state: ReminderState | None = None
        self._reported_invalid: set[int] = set()

        self._recompute_job = PeriodicJob(
            "reminder-recompute", self._recompute_tick, interval_seconds=reminder_interval
        )
        self._refresh_job = PeriodicJob("task-refresh", self.refresh, interval_seconds=refresh_interval)

    @property
    def snapshot(self) -> tuple[Task, ...]:
        return self._snapshot

    @property
    def state(self) -> ReminderState | None:
        return self._state

    @property
    def running(self) -> bool:
        return self._recompute_job.running or self._refresh_job.running

    def recompute(self) -> ReminderState:
        state = compute_reminders(self._snapshot, now=self._clock())
        self._state = state
        self._report_invalid(state)

        if self._on_update is not None:
            try:
                self._on_update(state)
            except Exception:
                logger.exception("Reminder on_update callback failed")
        return state

    async def _recompute_tick(self) -> None:
        self.recompute()

    def set_snapshot(self, tasks: list[Task] | tuple[Task, ...]) -> None:
        """Replace the snapshot (e.g. after a write went through) and recompute once."""
        self._replace_snapshot(tuple(tasks))
        self.recompute()

    def _replace_snapshot(self, tasks: tuple[Task, ...]) -> None:
        self._generation += 1
        self._snapshot = tasks
        logger.debug("Task snapshot replaced: %d tasks (generation %d)", len(tasks), self._generation)

        if self._on_snapshot is not None:
            try:
                self._on_snapshot(tasks)
            except Exception:
                logger.exception("Reminder on_snapshot callback failed")

    async def refresh(self) -> bool:
        """
        Re-fetch the task list. On failure the previous snapshot stays in place
        and the next scheduled tick tries again; nothing is retried here.
        Returns False as well when a newer snapshot arrived while fetching.
        """
        started = self._generation
        try:
            tasks = await asyncio.to_thread(self._api.list_tasks)
        except ApiError as e:
            logger.warning("Task refresh failed: %s", e)
            return False
        except Exception:
            logger.exception("Task refresh crashed")
            return False

        if self._generation != started:
            logger.debug("Discarding task fetch superseded by a newer snapshot")
            return False

        self._replace_snapshot(tuple(tasks))
        self.recompute()
        return True

    async def start(self) -> None:
        """Initial fetch, then both periodic jobs."""
        await self.refresh()
        self._recompute_job.start()
        self._refresh_job.start()
        logger.info("Reminder monitor started")

    async def stop(self) -> None:
        await self._recompute_job.stop()
        await self._refresh_job.stop()
        logger.info("Reminder monitor stopped")

    def _report_invalid(self, state: ReminderState) -> None:
        # Data-quality condition: report each bad record once, not on every tick.
        current = set(state.invalid_task_ids)
        for task_id in sorted(current - self._reported_invalid):
            logger.warning("Task %s has an unparseable reminderTime; excluded from reminders", task_id)
        self._reported_invalid = current
