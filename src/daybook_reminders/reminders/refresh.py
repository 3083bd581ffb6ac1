# src/daybook_reminders/reminders/refresh.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..core.ports import TaskSource
from .models import ScheduleReport, Task
from .scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

ReportCallback = Callable[[list[Task], ScheduleReport], None]


async def refresh_once(
        scheduler: ReminderScheduler,
        task_source: TaskSource,
        *,
        on_report: ReportCallback | None = None,
) -> ScheduleReport | None:
    """
    Reload today's tasks and rebuild reminders.

    Returns None if the reload failed or the user is signed out (no fetch happens then).
    """
    if scheduler.signed_out:
        logger.debug("Signed out; skipping refresh")
        return None

    try:
        tasks = await task_source.list_today_tasks()
    except Exception:
        logger.exception("list_today_tasks failed; keeping current reminders")
        return None

    report = await scheduler.schedule_all(tasks)
    if on_report is not None:
        on_report(tasks, report)
    return report


async def run_refresh_loop(
        scheduler: ReminderScheduler,
        task_source: TaskSource,
        *,
        interval_seconds: float = 300.0,
        on_report: ReportCallback | None = None,
) -> None:
    """
    Simple polling refresher.

    Every interval_seconds:
    - fetch today's tasks from the source
    - schedule_all (cancel-then-rebuild)
    A failed fetch leaves the previous cycle's reminders in place.

    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))

    while True:
        await refresh_once(scheduler, task_source, on_report=on_report)
        await asyncio.sleep(sleep_s)
