# src/daybook_reminders/reminders/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class PermissionStatus(StrEnum):
    """
    Outcome of asking the platform for notification permission.

    UNAVAILABLE is the sentinel callers get instead of an exception: permission
    denied, no capable device, or a platform error while asking.
    """

    GRANTED = "granted"
    UNDETERMINED = "undetermined"
    DENIED = "denied"
    UNAVAILABLE = "unavailable"


class FailureKind(StrEnum):
    PLATFORM = "platform_scheduling_error"
    MALFORMED_TIME = "malformed_task_time"
    PERMISSION = "permission_denied"


@dataclass(slots=True, frozen=True)
class Task:
    """A day's task as owned by the backend. The scheduler only reads it."""

    id: str
    name: str
    date: date
    start_time: str
    is_completed: bool = False
    category: str | None = None
    end_time: str | None = None
    notes: str | None = None


@dataclass(slots=True, frozen=True)
class ReminderTrigger:
    task_id: str
    fire_at: datetime
    title: str
    body: str
    offset_minutes: int


@dataclass(slots=True, frozen=True)
class NotificationRequest:
    """What the platform is asked to show, and after how many seconds."""

    title: str
    body: str
    fire_after_seconds: int
    data: dict[str, Any] = field(default_factory=dict)
    channel_id: str = "tasks"


@dataclass(slots=True, frozen=True)
class ScheduledReminder:
    handle: str
    trigger: ReminderTrigger


@dataclass(slots=True, frozen=True)
class SchedulingFailure:
    task_id: str
    kind: FailureKind
    message: str
    trigger: ReminderTrigger | None = None


@dataclass(slots=True)
class ScheduleReport:
    """Result of one schedule_all cycle (per-trigger success/failure capture)."""

    scheduled: list[ScheduledReminder] = field(default_factory=list)
    failures: list[SchedulingFailure] = field(default_factory=list)
    skipped_completed: list[str] = field(default_factory=list)
    skipped_malformed: list[str] = field(default_factory=list)
    reminders_enabled: bool = True

    @property
    def handles(self) -> list[str]:
        return [s.handle for s in self.scheduled]

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return (
            f"scheduled={len(self.scheduled)} failures={len(self.failures)} "
            f"completed_skipped={len(self.skipped_completed)} "
            f"malformed_skipped={len(self.skipped_malformed)}"
        )
