# src/vitatasks/tasks/task_api.py

from __future__ import annotations

import logging

from ..api.errors import ApiError
from ..core.state import AppState
from .task_models import Task, TaskValidationError
from .timestamps import local_input_to_utc_iso

logger = logging.getLogger(__name__)

# Sentinel for "leave the reminder as it is" in edit_task.
KEEP = object()


def _reminder_to_wire(reminder_local: str | None) -> str | None:
    if reminder_local is None or not reminder_local.strip():
        return None
    try:
        return local_input_to_utc_iso(reminder_local)
    except ValueError as e:
        raise TaskValidationError(str(e)) from e


def refresh_tasks(state: AppState) -> tuple[Task, ...]:
    """
    Re-fetch the task list and replace the snapshot.

    Every write below ends here: the local copy is never patched in place.
    """
    tasks = state.api.list_tasks()
    state.replace_tasks(tasks)

    runner = state.reminder_runner
    if runner is not None:
        runner.set_snapshot(tasks)

    logger.debug("Snapshot refreshed: %d tasks", len(tasks))
    return state.snapshot()


def _refresh_after_write(state: AppState) -> tuple[Task, ...]:
    try:
        return refresh_tasks(state)
    except ApiError:
        # The write went through; let the background monitor catch up.
        runner = state.reminder_runner
        if runner is not None:
            runner.request_refresh()
        raise


def create_task(
    state: AppState,
    title: str,
    description: str = "",
    reminder_local: str | None = None,
) -> tuple[Task, ...]:
    """Create a task. Empty titles are rejected before any request is sent."""
    title = (title or "").strip()
    if not title:
        raise TaskValidationError("Title is required")

    reminder = _reminder_to_wire(reminder_local)
    state.api.create_task(
        title=title,
        description=(description or "").strip(),
        completed=False,
        reminder_time=reminder,
    )
    logger.info("Task created title=%r reminder=%s", title, reminder)
    return _refresh_after_write(state)


def _require_task(state: AppState, task_id: int) -> Task:
    task = state.find_task(task_id)
    if task is None:
        # Snapshot may be stale; ask the backend directly.
        task = state.api.get_task(task_id)
    return task


def edit_task(
    state: AppState,
    task_id: int,
    *,
    title: str | None = None,
    description: str | None = None,
    reminder_local=KEEP,
) -> tuple[Task, ...]:
    """
    Update fields of an existing task and PUT the full payload.

    reminder_local: KEEP leaves it unchanged, None/"" clears it,
    a local picker value ("YYYY-MM-DDTHH:MM") sets it.
    """
    task = _require_task(state, task_id)

    changes: dict[str, object] = {}
    if title is not None:
        title = title.strip()
        if not title:
            raise TaskValidationError("Title is required")
        changes["title"] = title
    if description is not None:
        changes["description"] = description.strip()
    if reminder_local is not KEEP:
        changes["reminder_time"] = _reminder_to_wire(reminder_local)  # type: ignore[arg-type]

    if not changes:
        return state.snapshot()

    state.api.update_task(task.with_changes(**changes))
    logger.info("Task %s updated fields=%s", task_id, sorted(changes))
    return _refresh_after_write(state)


def toggle_task(state: AppState, task_id: int) -> tuple[Task, ...]:
    task = _require_task(state, task_id)
    state.api.update_task(task.with_changes(completed=not task.completed))
    logger.info("Task %s completed=%s", task_id, not task.completed)
    return _refresh_after_write(state)


def delete_task(state: AppState, task_id: int) -> tuple[Task, ...]:
    state.api.delete_task(task_id)
    logger.info("Task %s deleted", task_id)
    return _refresh_after_write(state)
