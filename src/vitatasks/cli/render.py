# src/vitatasks/cli/render.py

"""Plain-text views for the console: task cards, history buckets, reminder dropdown."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.theme import Palette
from ..tasks.history import pending_count
from ..tasks.reminders import due_reminders, upcoming_reminders
from ..tasks.task_models import ReminderState, Task, TaskHistory
from ..tasks.timestamps import format_timestamp, utc_iso_to_local_input


def render_task(task: Task, palette: Palette) -> str:
    mark = palette.paint(palette.success, "[x]") if task.completed else "[ ]"
    title = palette.paint(palette.muted, task.title) if task.completed else task.title
    lines = [f"{mark} #{task.id} {title}"]
    if task.description:
        lines.append(f"      {task.description}")

    footer = format_timestamp(task.created_at)
    if task.has_reminder and not task.completed:
        footer += f"  reminder: {utc_iso_to_local_input(task.reminder_time) or task.reminder_time}"
    lines.append("      " + palette.paint(palette.muted, footer))
    return "\n".join(lines)


def render_task_list(tasks: Iterable[Task], palette: Palette) -> str:
    tasks = list(tasks)
    if not tasks:
        return "All caught up! You don't have any tasks right now. Use /add to create one."

    n = pending_count(tasks)
    header = f"You have {n} pending task{'s' if n != 1 else ''}."
    return "\n".join([header, *(render_task(t, palette) for t in tasks)])


def render_history(history: TaskHistory, palette: Palette) -> str:
    if not history.buckets:
        return (
            "No completed tasks yet. Tasks you complete will show up here, "
            "grouped by the day you finished them."
        )

    lines: list[str] = []
    for label, tasks in history.buckets.items():
        lines.append(palette.paint(palette.accent, label.upper()))
        lines.extend(render_task(t, palette) for t in tasks)
        lines.append("")
    if history.invalid_task_ids:
        ids = ", ".join(f"#{i}" for i in history.invalid_task_ids)
        lines.append(palette.paint(palette.muted, f"(skipped tasks with unreadable dates: {ids})"))
    return "\n".join(lines).rstrip()


def render_reminders(state: ReminderState, palette: Palette) -> str:
    header = f"Scheduled Reminders ({len(state.reminders)})"
    if not state.reminders:
        return f"{header}\n  You have no active reminders."

    # Due reminders are never later than upcoming ones, so this keeps time order.
    due = palette.paint(palette.alert, "Due Now!")
    upcoming = palette.paint(palette.accent, "Upcoming")
    rows = [(r, due) for r in due_reminders(state)] + [(r, upcoming) for r in upcoming_reminders(state)]

    lines = [header]
    for r, status in rows:
        when = r.remind_at.astimezone().strftime("%Y-%m-%d %H:%M")
        lines.append(f"  #{r.task.id} {r.task.title} - {status} ({when})")
    return "\n".join(lines)
