# src/vitatasks/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..tasks.task_models import ReminderState, Task
from .ports import BackendApi, ReminderRunner
from .session import SessionStore
from .theme import ThemeStore


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: object

    api: BackendApi
    session: SessionStore
    theme: ThemeStore

    # Last fetched snapshot; replaced wholesale after every refresh, never patched.
    tasks: tuple[Task, ...] = ()
    reminders: ReminderState | None = None
    reminder_runner: ReminderRunner | None = None

    # Guards tasks/reminders: the reminder thread writes, the console thread reads.
    lock: threading.Lock = field(default_factory=threading.Lock)

    def replace_tasks(self, tasks: list[Task] | tuple[Task, ...]) -> None:
        with self.lock:
            self.tasks = tuple(tasks)

    def snapshot(self) -> tuple[Task, ...]:
        with self.lock:
            return self.tasks

    def find_task(self, task_id: int) -> Task | None:
        for t in self.snapshot():
            if t.id == task_id:
                return t
        return None
