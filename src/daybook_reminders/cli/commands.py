# src/daybook_reminders/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..reminders.models import ScheduleReport, Task
from ..reminders.refresh import refresh_once

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /refresh, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def remember_report(state: AppState, tasks: list[Task], report: ScheduleReport) -> None:
    state.tasks = tasks
    state.last_report = report


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    report = state.last_report
    last = report.summary() if report is not None else "never refreshed"
    return (
        "Status:\n"
        f"  Notifications: {state.scheduler.permission.value}\n"
        f"  Tasks today: {len(state.tasks)} ({sum(1 for t in state.tasks if not t.is_completed)} open)\n"
        f"  Active reminders: {len(state.scheduler.active_handles)}\n"
        f"  Last refresh: {last}\n"
        f"  Task file: {getattr(state.settings, 'tasks_path', '?')}"
    )


async def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.scheduler.signed_out:
        return "Logged out. Use /login to resume reminders."

    report = await refresh_once(
        state.scheduler,
        state.task_source,
        on_report=lambda tasks, rep: remember_report(state, tasks, rep),
    )
    if report is None:
        return "Refresh failed (could not load tasks). Existing reminders were kept."
    if not report.reminders_enabled:
        return "Notifications are disabled; no reminders scheduled."

    lines = [f"Refreshed: {report.summary()}"]
    for failure in report.failures:
        lines.append(f"  ! {failure.task_id}: {failure.message}")
    return "\n".join(lines)


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    reminders = state.scheduler.active_reminders()
    if not reminders:
        return "No active reminders."

    names = {t.id: t.name for t in state.tasks}
    lines = ["Active reminders:"]
    for r in reminders:
        name = names.get(r.trigger.task_id, r.trigger.task_id)
        lines.append(f"  {r.trigger.fire_at:%H:%M} [{r.handle[:8]}] {name}: {r.trigger.title}")
    return "\n".join(lines)


async def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /cancel <handle>  -> cancel one reminder (a unique prefix of the handle is enough)
    """
    if not args:
        return "Usage: /cancel <handle>"

    prefix = args[0]
    matches = [h for h in state.scheduler.active_handles if h.startswith(prefix)]
    if not matches:
        return f"No active reminder matches {prefix!r}."
    if len(matches) > 1:
        return f"{prefix!r} is ambiguous ({len(matches)} reminders). Use a longer prefix."

    ok = await state.scheduler.cancel_one(matches[0])
    return "Reminder cancelled." if ok else "Could not cancel the reminder (see log)."


async def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    logger.debug("Logout requested; cancelling all reminders.")
    await state.scheduler.sign_out()
    state.tasks = []
    state.last_report = None
    return "Logged out. All reminders cancelled."


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not state.scheduler.signed_out:
        return "Already logged in."

    state.scheduler.sign_in()
    return await cmd_refresh(state, args, emit)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show notification status and reminder counts.")
registry.register("refresh", cmd_refresh, help_text="Reload today's tasks and rebuild reminders.")
registry.register("list", cmd_list, help_text="List active reminders.", aliases=["ls"])
registry.register("cancel", cmd_cancel, help_text="Cancel one reminder: /cancel <handle>.")
registry.register("logout", cmd_logout, help_text="Cancel all reminders (logout).")
registry.register("login", cmd_login, help_text="Resume reminders after /logout.")
