# src/daybook_reminders/reminders/errors.py

from __future__ import annotations


class ReminderError(Exception):
    """Base class for reminder failures. None of these are fatal to the host app."""


class PermissionDenied(ReminderError):
    """The user (or the device) refused notification permission."""


class PlatformSchedulingError(ReminderError):
    """The notification platform rejected a schedule/cancel call."""


class MalformedTaskTime(ReminderError):
    """A task carries a start time that is not a valid HH:MM clock time."""

    def __init__(self, task_id: str, raw: str | None) -> None:
        super().__init__(f"task {task_id!r} has malformed start time {raw!r}")
        self.task_id = task_id
        self.raw = raw
