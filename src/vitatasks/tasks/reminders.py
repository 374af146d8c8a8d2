# src/vitatasks/tasks/reminders.py

"""
Reminder due-state engine.

Pure function of (tasks, now): filters to open tasks with a reminder, classifies
each as due or upcoming and orders them by reminder time. The monitor in
task_scheduler.py decides when to re-run it and how to surface the result.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .task_models import Reminder, ReminderState, Task
from .timestamps import ensure_aware, now_local, parse_timestamp


def compute_reminders(tasks: Iterable[Task], now: datetime | None = None) -> ReminderState:
    """
    Build the reminder view for the given snapshot.

    - completed tasks and tasks without reminderTime are skipped,
    - unparseable reminderTime -> skipped, id recorded in invalid_task_ids,
    - is_due = now >= reminder time (equal instants are due),
    - ascending by reminder time; sorted() is stable so ties keep input order.
    """
    now = ensure_aware(now) if now is not None else now_local()

    active: list[Reminder] = []
    invalid: list[int] = []

    for task in tasks:
        if task.completed or not task.has_reminder:
            continue

        remind_at = parse_timestamp(task.reminder_time)
        if remind_at is None:
            invalid.append(task.id)
            continue

        active.append(Reminder(task=task, is_due=now >= remind_at, remind_at=remind_at))

    ordered = tuple(sorted(active, key=lambda r: r.remind_at))

    return ReminderState(
        reminders=ordered,
        has_alert=any(r.is_due for r in ordered),
        invalid_task_ids=tuple(invalid),
        computed_at=now,
    )


def due_reminders(state: ReminderState) -> list[Reminder]:
    return [r for r in state.reminders if r.is_due]


def upcoming_reminders(state: ReminderState) -> list[Reminder]:
    return [r for r in state.reminders if not r.is_due]
