# src/vitatasks/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on these Protocols, not on the httpx client;
tests plug in an in-memory backend.
"""

from __future__ import annotations

from typing import Any, Protocol


class TaskApi(Protocol):
    """Task CRUD against the backend. Implementations raise ApiError subclasses."""

    def list_tasks(self) -> list[Any]: ...
    def get_task(self, task_id: int) -> Any: ...
    def create_task(
        self,
        *,
        title: str,
        description: str = "",
        completed: bool = False,
        reminder_time: str | None = None,
    ) -> Any | None: ...
    def update_task(self, task: Any) -> Any | None: ...
    def delete_task(self, task_id: int) -> None: ...


class AuthApi(Protocol):
    def login(self, username: str, password: str) -> Any: ...
    def register(self, username: str, password: str) -> str: ...


class BackendApi(TaskApi, AuthApi, Protocol):
    def close(self) -> None: ...


class ReminderRunner(Protocol):
    """Background reminder monitor handle, as seen from the console thread."""

    def set_snapshot(self, tasks: list[Any]) -> None: ...
    def request_refresh(self) -> None: ...
    def stop(self) -> None: ...
    def join(self, timeout: float | None = None) -> None: ...
