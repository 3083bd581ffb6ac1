# src/daybook_reminders/reminders/triggers.py

from __future__ import annotations

"""
Reminder trigger computation.

Every task gets at most three reminders around its start time:
- 10 minutes before ("heads up"),
-  1 minute before ("starting"),
-  5 minutes after ("check-in").

Only triggers strictly in the future (relative to `now`) are produced.
Times are naive local datetimes, like the task's date and "HH:MM" start time.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, time, timedelta

from .errors import MalformedTaskTime
from .models import ReminderTrigger, Task


@dataclass(slots=True, frozen=True)
class ReminderOffset:
    minutes: int
    kind: str


REMINDER_OFFSETS: tuple[ReminderOffset, ...] = (
    ReminderOffset(-10, "heads_up"),
    ReminderOffset(-1, "starting"),
    ReminderOffset(5, "check_in"),
)


def parse_start_time(raw: str | None, *, task_id: str = "?") -> time:
    """Parse "H:MM", "HH:MM" or "HH:MM:SS" into a time; seconds are dropped."""
    if not raw or not isinstance(raw, str):
        raise MalformedTaskTime(task_id, raw)

    parts = raw.strip().split(":")
    if len(parts) not in (2, 3):
        raise MalformedTaskTime(task_id, raw)

    # int() alone would accept " 05", "+7" and "1_0"
    if not all(p.isascii() and p.isdigit() for p in parts):
        raise MalformedTaskTime(task_id, raw)

    nums = [int(p) for p in parts]

    hours, minutes = nums[0], nums[1]
    seconds = nums[2] if len(nums) == 3 else 0
    if not (0 <= hours <= 23 and 0 <= minutes <= 59 and 0 <= seconds <= 59):
        raise MalformedTaskTime(task_id, raw)

    return time(hour=hours, minute=minutes)


def task_start_at(task: Task) -> datetime:
    return datetime.combine(task.date, parse_start_time(task.start_time, task_id=task.id))


def _message(task: Task, offset: ReminderOffset) -> tuple[str, str]:
    category = (task.category or "").strip()

    if offset.kind == "heads_up":
        title = f"⏰ {task.name} in {abs(offset.minutes)} minutes"
        body = f"Coming up: {category}" if category else "Your task starts soon."
    elif offset.kind == "starting":
        title = f"⏰ {task.name} starts in {abs(offset.minutes)} minute"
        body = f"Time for {category}" if category else "It's time for your task!"
    else:
        title = f"✅ Checking in: {task.name}"
        body = f"Did you start {task.name}? Mark it complete when you're done."

    return title, body


def compute_triggers(task: Task, now: datetime) -> Iterator[ReminderTrigger]:
    """
    Lazily yield the future reminder triggers for one task.

    Raises MalformedTaskTime (on first iteration) if the start time can't be parsed.
    Completion state is not checked here; callers filter completed tasks.
    """
    start_at = task_start_at(task)

    for offset in REMINDER_OFFSETS:
        fire_at = start_at + timedelta(minutes=offset.minutes)
        if fire_at <= now:
            continue

        title, body = _message(task, offset)
        yield ReminderTrigger(
            task_id=task.id,
            fire_at=fire_at,
            title=title,
            body=body,
            offset_minutes=offset.minutes,
        )


def seconds_until(fire_at: datetime, now: datetime) -> int:
    """Whole seconds from now until fire_at (floored; may be <= 0)."""
    return math.floor((fire_at - now).total_seconds())
