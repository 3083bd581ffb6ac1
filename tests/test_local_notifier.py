# tests/test_local_notifier.py

from __future__ import annotations

import asyncio

import pytest

from daybook_reminders.platform.local_notifier import LocalNotificationPlatform, extract_task_id
from daybook_reminders.reminders.errors import PermissionDenied, PlatformSchedulingError
from daybook_reminders.reminders.models import NotificationRequest, PermissionStatus
from daybook_reminders.reminders.scheduler import ReminderScheduler

from .conftest import FrozenClock, at, make_task


def _request(seconds: int = 0, task_id: str = "t1") -> NotificationRequest:
    return NotificationRequest(
        title="⏰ Workout",
        body="It's time for your task!",
        fire_after_seconds=seconds,
        data={"taskId": task_id},
    )


@pytest.mark.asyncio
async def test_scheduled_notification_is_delivered_to_listeners() -> None:
    platform = LocalNotificationPlatform()
    await platform.request_permission()
    seen = []
    platform.add_delivery_listener(seen.append)

    handle = await platform.schedule_notification(_request(0, "t42"))
    await asyncio.sleep(0.01)

    assert [n.handle for n in seen] == [handle]
    assert extract_task_id(seen[0]) == "t42"
    assert platform.pending_handles() == set()


@pytest.mark.asyncio
async def test_cancelled_notifications_never_fire() -> None:
    platform = LocalNotificationPlatform()
    await platform.request_permission()

    h1 = await platform.schedule_notification(_request(0))
    await platform.schedule_notification(_request(0))
    await platform.cancel_scheduled(h1)
    await platform.cancel_all_scheduled()
    await asyncio.sleep(0.01)

    assert platform.delivered == []
    assert platform.pending_handles() == set()


@pytest.mark.asyncio
async def test_schedule_without_permission_raises_permission_denied() -> None:
    platform = LocalNotificationPlatform(grant_permission=False)
    assert await platform.request_permission() == PermissionStatus.DENIED

    with pytest.raises(PermissionDenied):
        await platform.schedule_notification(_request(10))


@pytest.mark.asyncio
async def test_unavailable_platform_rejects_scheduling() -> None:
    platform = LocalNotificationPlatform(available=False)

    with pytest.raises(PlatformSchedulingError):
        await platform.schedule_notification(_request(10))


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others() -> None:
    platform = LocalNotificationPlatform()
    await platform.request_permission()
    seen = []

    def broken(_n):
        raise RuntimeError("listener bug")

    platform.add_delivery_listener(broken)
    platform.add_delivery_listener(seen.append)

    await platform.schedule_notification(_request(0))
    await asyncio.sleep(0.01)

    assert len(seen) == 1


@pytest.mark.asyncio
async def test_scheduler_replaces_timers_on_the_local_platform() -> None:
    platform = LocalNotificationPlatform()
    scheduler = ReminderScheduler(platform, clock=FrozenClock(at(17, 45)))
    assert await scheduler.register_for_notifications() == PermissionStatus.GRANTED
    assert platform.channels == {"default": "default", "tasks": "Task Reminders"}

    await scheduler.schedule_all([make_task("t1", "Workout", "18:00")])
    report = await scheduler.schedule_all([make_task("t1", "Workout", "18:00")])

    assert platform.pending_handles() == set(report.handles)
    assert len(report.handles) == 3

    platform.shutdown()
    assert platform.pending_handles() == set()
