# src/vitatasks/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)


class TaskDecodeError(ValueError):
    """A task payload from the backend does not have the expected shape."""


class TaskValidationError(ValueError):
    """Client-side validation failure (e.g. empty title); nothing was sent."""


@dataclass(slots=True, frozen=True)
class Task:
    """
    Local read-mostly copy of a backend task.

    Timestamps are kept as raw wire strings; the derived views parse them and
    exclude records they cannot read instead of failing the whole list.
    """

    id: int
    title: str
    description: str
    completed: bool
    created_at: str
    updated_at: str
    reminder_time: str | None = None

    @property
    def has_reminder(self) -> bool:
        return bool(self.reminder_time)

    @classmethod
    def from_wire(cls, data: Any) -> Task:
        if not isinstance(data, dict):
            raise TaskDecodeError(f"task payload must be an object, got {type(data).__name__}")

        raw_id = data.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            raise TaskDecodeError(f"task id must be an integer, got {raw_id!r}")

        title = data.get("title")
        if not isinstance(title, str):
            raise TaskDecodeError(f"task {raw_id}: title must be a string")

        description = data.get("description")
        reminder = data.get("reminderTime")
        if reminder is not None and not isinstance(reminder, str):
            reminder = str(reminder)

        return cls(
            id=raw_id,
            title=title,
            description=description if isinstance(description, str) else "",
            completed=bool(data.get("completed", False)),
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
            reminder_time=reminder or None,
        )

    def to_wire(self) -> dict[str, Any]:
        """Full payload, as PUT /tasks/{id} expects it."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "reminderTime": self.reminder_time,
        }

    def with_changes(self, **changes: Any) -> Task:
        return replace(self, **changes)


def decode_task_list(payload: Any) -> list[Task]:
    """Decode a GET /tasks array; entries that cannot be decoded are skipped (and logged)."""
    if not isinstance(payload, list):
        raise TaskDecodeError(f"task list must be an array, got {type(payload).__name__}")

    out: list[Task] = []
    for item in payload:
        try:
            out.append(Task.from_wire(item))
        except TaskDecodeError as e:
            logger.warning("Skipping undecodable task payload: %s", e)
    return out


@dataclass(slots=True, frozen=True)
class Reminder:
    task: Task
    is_due: bool
    remind_at: datetime


@dataclass(slots=True, frozen=True)
class ReminderState:
    """
    Derived reminder view, rebuilt from scratch on every tick.

    invalid_task_ids lists active tasks whose reminderTime could not be parsed;
    they are excluded from reminders and the caller reports them.
    """

    reminders: tuple[Reminder, ...]
    has_alert: bool
    invalid_task_ids: tuple[int, ...]
    computed_at: datetime

    @property
    def due_task_ids(self) -> frozenset[int]:
        return frozenset(r.task.id for r in self.reminders if r.is_due)


@dataclass(slots=True, frozen=True)
class TaskHistory:
    """Completed tasks bucketed by completion day, newest bucket first."""

    buckets: dict[str, list[Task]] = field(default_factory=dict)
    invalid_task_ids: tuple[int, ...] = ()

    def labels(self) -> list[str]:
        return list(self.buckets)

    def total(self) -> int:
        return sum(len(v) for v in self.buckets.values())
