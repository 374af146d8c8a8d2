# src/vitatasks/cli/commands.py

from __future__ import annotations

import inspect
import logging
import sys
from collections.abc import Callable
from typing import cast

from ..api.errors import ApiError, friendly_api_error_message
from ..core.state import AppState
from ..core.theme import Palette
from ..tasks import task_api
from ..tasks.history import group_tasks_by_date
from ..tasks.reminders import compute_reminders
from ..tasks.task_models import TaskValidationError
from .bootstrap import activate_session, deactivate_session
from .render import render_history, render_reminders, render_task_list

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

LOGIN_REQUIRED = "You are not logged in. Use /login <username> <password> (or /register first)."


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Backend and validation errors become one-line messages here; anything
        else propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                return cast(CommandHandler3, handler)(state, args, emit)
            return cast(CommandHandler2, handler)(state, args)
        except TaskValidationError as e:
            return str(e)
        except ApiError as e:
            logger.info("/%s failed: %s", name, e)
            return friendly_api_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _palette(state: AppState) -> Palette:
    return state.theme.palette(color=sys.stdout.isatty())


def _split_fields(args: list[str]) -> list[str]:
    """'/add Buy milk | 2 bottles | 2026-10-20T09:00' -> ['Buy milk', '2 bottles', '2026-10-20T09:00']"""
    return [p.strip() for p in " ".join(args).split("|")]


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    user = state.session.username if state.session.is_authenticated else "(not logged in)"
    reminders = state.reminders
    alert = "yes" if reminders is not None and reminders.has_alert else "no"
    runner = "running" if state.reminder_runner is not None else "stopped"
    return (
        "Status:\n"
        f"  User: {user}\n"
        f"  Backend: {getattr(state.settings, 'api_base_url', '?')}\n"
        f"  Theme: {state.theme.name}\n"
        f"  Tasks in snapshot: {len(state.snapshot())}\n"
        f"  Reminder monitor: {runner} (due alert: {alert})"
    )


def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) != 2:
        return "Usage: /login <username> <password>"

    result = state.api.login(args[0], args[1])
    deactivate_session(state)
    state.session.login(result.access_token, result.username)
    logger.info("Logged in as %s", result.username)

    activate_session(state, emit)
    if state.reminder_runner is None:
        task_api.refresh_tasks(state)
    return f"Welcome back, {result.username}!"


def cmd_register(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /register <username> <password>"
    message = state.api.register(args[0], args[1])
    logger.info("Registered account %s", args[0])
    return f"{message} Use /login {args[0]} <password> to sign in."


def cmd_logout(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return "You are not logged in."
    name = state.session.username
    deactivate_session(state)
    state.session.logout()
    logger.info("Logged out %s", name)
    return "Logged out."


def cmd_tasks(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    tasks = task_api.refresh_tasks(state)
    return render_task_list(tasks, _palette(state))


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| description] [| YYYY-MM-DDTHH:MM]
    """
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    fields = _split_fields(args)
    title = fields[0]
    description = fields[1] if len(fields) > 1 else ""
    reminder = fields[2] if len(fields) > 2 else None

    task_api.create_task(state, title, description, reminder)
    return f"Task created: {title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> <title> [| description] [| YYYY-MM-DDTHH:MM or - to clear]
    """
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /edit <id> <title> [| description] [| YYYY-MM-DDTHH:MM or -]"

    fields = _split_fields(args[1:])
    reminder: object = task_api.KEEP
    if len(fields) > 2:
        reminder = None if fields[2] in ("", "-") else fields[2]

    task_api.edit_task(
        state,
        task_id,
        title=fields[0],
        description=fields[1] if len(fields) > 1 else None,
        reminder_local=reminder,
    )
    return f"Task #{task_id} updated."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    tasks = task_api.toggle_task(state, task_id)
    now_done = next((t.completed for t in tasks if t.id == task_id), None)
    if now_done is None:
        return f"Task #{task_id} toggled."
    return f"Task #{task_id} marked {'completed' if now_done else 'not completed'}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <id>"
    task_api.delete_task(state, task_id)
    return f"Task #{task_id} deleted."


def cmd_history(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    tasks = task_api.refresh_tasks(state)
    history = group_tasks_by_date(tasks)
    if history.invalid_task_ids:
        logger.warning("History skipped tasks with unparseable updatedAt: %s", list(history.invalid_task_ids))
    return render_history(history, _palette(state))


def cmd_reminders(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    reminders = compute_reminders(state.snapshot())
    return render_reminders(reminders, _palette(state))


def cmd_refresh(state: AppState, args: list[str]) -> str:
    if not state.session.is_authenticated:
        return LOGIN_REQUIRED
    tasks = task_api.refresh_tasks(state)
    return f"Fetched {len(tasks)} tasks."


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme        -> toggle
    /theme dark   -> dark
    /theme light  -> light
    """
    if not args:
        state.theme.toggle()
    elif args[0].lower() in ("dark", "light"):
        state.theme.set_theme(args[0].lower() == "dark")
    else:
        return "Usage: /theme [dark|light]"
    return f"Theme: {state.theme.name}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session, backend and reminder status.")
registry.register("login", cmd_login, help_text="Sign in: /login <username> <password>.")
registry.register("register", cmd_register, help_text="Create an account: /register <username> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out and forget the saved session.")
registry.register("tasks", cmd_tasks, help_text="List your tasks.", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="New task: /add <title> [| description] [| YYYY-MM-DDTHH:MM]."
)
registry.register(
    "edit", cmd_edit, help_text="Edit: /edit <id> <title> [| description] [| reminder or -]."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("history", cmd_history, help_text="Completed tasks grouped by day.")
registry.register("reminders", cmd_reminders, help_text="Scheduled reminders, due first by time.")
registry.register("refresh", cmd_refresh, help_text="Re-fetch tasks from the server.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [dark|light].")
