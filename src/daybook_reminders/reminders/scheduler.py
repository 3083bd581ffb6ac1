# src/daybook_reminders/reminders/scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

Turns the day's tasks into local notifications and owns their lifecycle:
- schedule_all: cancel everything, then rebuild reminders for incomplete tasks
- cancel_all: used on logout and before every rebuild
- cancel_one: targeted cleanup by handle

The registry of handles lives here (not only inside the platform) so the
replace-on-refresh behaviour is observable and testable.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..core.ports import NotificationPlatform
from .errors import MalformedTaskTime, PermissionDenied, PlatformSchedulingError, ReminderError
from .models import (
    FailureKind,
    NotificationRequest,
    PermissionStatus,
    ReminderTrigger,
    ScheduledReminder,
    ScheduleReport,
    SchedulingFailure,
    Task,
)
from .triggers import compute_triggers, seconds_until

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

NOTIFICATION_CHANNELS: tuple[tuple[str, str], ...] = (
    ("default", "default"),
    ("tasks", "Task Reminders"),
)


class ReminderScheduler:
    def __init__(self, platform: NotificationPlatform, *, clock: Clock = datetime.now) -> None:
        self._platform = platform
        self._clock = clock
        self._handles: dict[str, ReminderTrigger] = {}
        self._permission: PermissionStatus = PermissionStatus.UNDETERMINED
        self._signed_out = False
        # Serializes cancel-then-rebuild cycles and bulk cancels.
        self._lock = asyncio.Lock()

    @property
    def permission(self) -> PermissionStatus:
        return self._permission

    @property
    def signed_out(self) -> bool:
        return self._signed_out

    @property
    def active_handles(self) -> set[str]:
        return set(self._handles)

    def active_reminders(self) -> list[ScheduledReminder]:
        out = [ScheduledReminder(handle=h, trigger=t) for h, t in self._handles.items()]
        out.sort(key=lambda r: r.trigger.fire_at)
        return out

    async def register_for_notifications(self) -> PermissionStatus:
        """
        Ask for notification permission and set up channels.

        Never raises: returns PermissionStatus.UNAVAILABLE when reminders can't be shown.
        """
        if not self._platform.is_available:
            logger.info("Notifications unavailable on this device; reminders disabled.")
            self._permission = PermissionStatus.UNAVAILABLE
            return self._permission

        try:
            status = await self._platform.get_permission()
            if status != PermissionStatus.GRANTED:
                status = await self._platform.request_permission()

            if status != PermissionStatus.GRANTED:
                logger.info("Notification permission not granted (status=%s).", status)
                self._permission = PermissionStatus.UNAVAILABLE
                return self._permission

            for channel_id, name in NOTIFICATION_CHANNELS:
                await self._platform.ensure_channel(channel_id, name)
        except Exception:
            logger.exception("Error registering for notifications")
            self._permission = PermissionStatus.UNAVAILABLE
            return self._permission

        self._permission = PermissionStatus.GRANTED
        return self._permission

    async def schedule_task(
        self,
        task: Task,
        *,
        now: datetime | None = None,
        report: ScheduleReport | None = None,
    ) -> list[str] | None:
        """
        Register one platform notification per future trigger of `task`.

        Returns the handles, or None when nothing qualified (past task, malformed
        time, or every platform call failed).
        """
        now = self._clock() if now is None else now

        try:
            triggers = list(compute_triggers(task, now))
        except MalformedTaskTime as e:
            logger.warning("Skipping task %s: %s", task.id, e)
            if report is not None:
                report.skipped_malformed.append(task.id)
                report.failures.append(
                    SchedulingFailure(task_id=task.id, kind=FailureKind.MALFORMED_TIME, message=str(e))
                )
            return None

        handles: list[str] = []
        for trigger in triggers:
            delay = seconds_until(trigger.fire_at, now)
            if delay <= 0:
                continue

            request = NotificationRequest(
                title=trigger.title,
                body=trigger.body,
                fire_after_seconds=delay,
                data={"taskId": task.id},
            )

            try:
                handle = await self._schedule(request)
            except ReminderError as e:
                kind = FailureKind.PERMISSION if isinstance(e, PermissionDenied) else FailureKind.PLATFORM
                logger.error(
                    "Error scheduling notification task_id=%s offset=%+d: %s",
                    task.id,
                    trigger.offset_minutes,
                    e,
                )
                if report is not None:
                    report.failures.append(
                        SchedulingFailure(
                            task_id=task.id,
                            kind=kind,
                            message=str(e),
                            trigger=trigger,
                        )
                    )
                continue

            self._handles[handle] = trigger
            handles.append(handle)
            if report is not None:
                report.scheduled.append(ScheduledReminder(handle=handle, trigger=trigger))
            logger.debug(
                "Scheduled reminder %s for %s at %s (in %ss)",
                handle,
                task.name,
                trigger.fire_at.strftime("%H:%M"),
                delay,
            )

        if not handles:
            return None

        logger.info("Scheduled %d reminder(s) for %s at %s", len(handles), task.name, task.start_time)
        return handles

    async def schedule_all(self, tasks: Iterable[Task]) -> ScheduleReport:
        """
        Full rebuild: cancel every reminder, then schedule incomplete tasks.

        The whole cancel-then-rebuild runs under the scheduler lock, so overlapping
        refreshes are serialized and no reminder from an earlier cycle can survive.
        """
        async with self._lock:
            await self._cancel_all_unlocked()

            report = ScheduleReport()
            if self._signed_out:
                logger.info("Signed out; nothing scheduled.")
                report.reminders_enabled = False
                return report

            if self._permission == PermissionStatus.UNAVAILABLE:
                logger.info("Reminders disabled; nothing scheduled.")
                report.reminders_enabled = False
                return report

            now = self._clock()
            pending: list[Task] = []
            for task in tasks:
                if task.is_completed:
                    report.skipped_completed.append(task.id)
                else:
                    pending.append(task)

            for task in pending:
                await self.schedule_task(task, now=now, report=report)

        logger.info("Scheduled reminders for %d task(s): %s", len(pending), report.summary())
        return report

    async def cancel_all(self) -> None:
        """Cancel every pending reminder registered by this scheduler."""
        async with self._lock:
            await self._cancel_all_unlocked()

    async def sign_out(self) -> None:
        """Cancel everything and refuse to reschedule until sign_in()."""
        async with self._lock:
            self._signed_out = True
            await self._cancel_all_unlocked()
        logger.info("Signed out; reminders stopped.")

    def sign_in(self) -> None:
        self._signed_out = False

    async def cancel_one(self, handle: str) -> bool:
        try:
            await self._platform.cancel_scheduled(handle)
        except Exception:
            logger.exception("Error cancelling notification %s", handle)
            return False

        self._handles.pop(handle, None)
        return True

    async def _cancel_all_unlocked(self) -> None:
        try:
            await self._platform.cancel_all_scheduled()
            logger.info("Cancelled all notifications")
        except Exception:
            logger.exception("Error cancelling notifications; cancelling tracked handles one by one")
            for handle in list(self._handles):
                try:
                    await self._platform.cancel_scheduled(handle)
                except Exception:
                    logger.exception("Error cancelling notification %s", handle)
        finally:
            self._handles.clear()

    async def _schedule(self, request: NotificationRequest) -> str:
        try:
            return await self._platform.schedule_notification(request)
        except ReminderError:
            raise
        except Exception as e:
            raise PlatformSchedulingError(f"{type(e).__name__}: {e}") from e
