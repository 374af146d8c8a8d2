# src/vitatasks/tasks/history.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from .task_models import Task, TaskHistory
from .timestamps import ensure_aware, format_calendar_date, now_local, parse_timestamp

TODAY = "Today"
YESTERDAY = "Yesterday"


def bucket_label(completed_at: datetime, now: datetime) -> str:
    """Label relative to the calendar date of `now`, in the timezone of `now`."""
    day = completed_at.astimezone(now.tzinfo).date()
    today = now.date()
    if day == today:
        return TODAY
    if day == today - timedelta(days=1):
        return YESTERDAY
    return format_calendar_date(completed_at.astimezone(now.tzinfo))


def group_tasks_by_date(tasks: Iterable[Task], now: datetime | None = None) -> TaskHistory:
    """
    Bucket completed tasks by the day they were last updated.

    The whole list is sorted newest-first before bucketing, so dict insertion
    order gives newest bucket first and newest task first inside each bucket.
    Incomplete tasks are dropped; unparseable updatedAt values are excluded and
    reported through invalid_task_ids.
    """
    now = ensure_aware(now) if now is not None else now_local()

    dated: list[tuple[datetime, str, Task]] = []
    invalid: list[int] = []

    for task in tasks:
        if not task.completed:
            continue
        updated = parse_timestamp(task.updated_at)
        if updated is None:
            invalid.append(task.id)
            continue
        try:
            label = bucket_label(updated, now)
        except (ValueError, OverflowError):
            invalid.append(task.id)
            continue
        dated.append((updated, label, task))

    dated.sort(key=lambda entry: entry[0], reverse=True)

    buckets: dict[str, list[Task]] = {}
    for _, label, task in dated:
        buckets.setdefault(label, []).append(task)

    return TaskHistory(buckets=buckets, invalid_task_ids=tuple(invalid))


def pending_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)
