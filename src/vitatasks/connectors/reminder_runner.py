# src/vitatasks/connectors/reminder_runner.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from ..core.state import AppState
from ..tasks.reminders import due_reminders
from ..tasks.task_models import ReminderState, Task
from ..tasks.task_scheduler import ReminderMonitor

logger = logging.getLogger(__name__)


@dataclass
class ReminderNotifier:
    """
    Edge-triggered surfacing of has_alert.

    A reminder stays due until its task is completed or the reminder is cleared;
    the notifier announces each task once when it becomes due and forgets it
    when it leaves the due set.
    """

    emit: Callable[[str], None]
    _announced: set[int] = field(default_factory=set)

    def __call__(self, state: ReminderState) -> None:
        due = due_reminders(state)
        due_ids = {r.task.id for r in due}

        for r in due:
            if r.task.id in self._announced:
                continue
            self.emit(f"[REMINDER] Due now: #{r.task.id} {r.task.title}")

        self._announced = due_ids


async def _run_monitor(monitor: ReminderMonitor, stop_event: asyncio.Event) -> None:
    try:
        await monitor.start()
        await stop_event.wait()
    except asyncio.CancelledError:
        logger.info("Reminder runner cancelled.")
    except Exception:
        logger.exception("Reminder runner crashed.")
    finally:
        await monitor.stop()


@dataclass
class ReminderBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event
    monitor: ReminderMonitor

    def set_snapshot(self, tasks: list[Task] | tuple[Task, ...]) -> None:
        try:
            self.loop.call_soon_threadsafe(self.monitor.set_snapshot, tuple(tasks))
        except RuntimeError:
            logger.debug("Reminder loop is closed; snapshot dropped.", exc_info=True)

    def request_refresh(self) -> None:
        try:
            asyncio.run_coroutine_threadsafe(self.monitor.refresh(), self.loop)
        except RuntimeError:
            logger.debug("Reminder loop is closed; refresh dropped.", exc_info=True)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal reminder runner stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_reminders_in_background(
    state: AppState, notifier: Callable[[ReminderState], None] | None = None
) -> ReminderBackgroundRunner | None:
    """
    Start the reminder monitor on its own event loop in a daemon thread.

    The console REPL blocks on input(), so the periodic jobs cannot share its thread.
    """
    settings = state.settings

    def on_update(reminders: ReminderState) -> None:
        with state.lock:
            state.reminders = reminders
        if notifier is not None:
            notifier(reminders)

    monitor = ReminderMonitor(
        state.api,
        on_update=on_update,
        on_snapshot=state.replace_tasks,
        reminder_interval=float(getattr(settings, "reminder_check_interval_seconds", 10.0)),
        refresh_interval=float(getattr(settings, "task_refresh_interval_seconds", 30.0)),
    )

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_monitor(monitor, stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_default_executor())
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="vitatasks-reminders", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info("Reminder background thread started.")
    return ReminderBackgroundRunner(thread=t, loop=loop, stop_event=stop_event, monitor=monitor)
