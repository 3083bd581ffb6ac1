# src/daybook_reminders/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..reminders.models import ScheduleReport, Task
from ..reminders.scheduler import ReminderScheduler
from .ports import NotificationPlatform, TaskSource


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    platform: NotificationPlatform
    scheduler: ReminderScheduler
    task_source: TaskSource

    tasks: list[Task] = field(default_factory=list)
    last_report: ScheduleReport | None = None
