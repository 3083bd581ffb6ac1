# src/daybook_reminders/platform/local_notifier.py

from __future__ import annotations

"""
In-process notification platform.

Schedules notifications as asyncio timers (loop.call_later) and hands delivered
notifications to listeners (the console prints them). It mirrors what a device
notification service offers: permission, channels, schedule, cancel.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..reminders.errors import PermissionDenied, PlatformSchedulingError
from ..reminders.models import NotificationRequest, PermissionStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DeliveredNotification:
    handle: str
    title: str
    body: str
    channel_id: str
    delivered_at: datetime
    data: dict[str, Any] = field(default_factory=dict)


DeliveryListener = Callable[[DeliveredNotification], None]


def extract_task_id(notification: DeliveredNotification) -> str | None:
    """Correlation payload used to deep-link a tapped notification back to its task."""
    task_id = (notification.data or {}).get("taskId")
    if task_id is None:
        return None
    return str(task_id)


class LocalNotificationPlatform:
    def __init__(self, *, available: bool = True, grant_permission: bool = True) -> None:
        self._available = available
        self._grant_permission = grant_permission
        self._permission = PermissionStatus.UNDETERMINED
        self._channels: dict[str, str] = {}
        self._pending: dict[str, asyncio.TimerHandle] = {}
        self._requests: dict[str, NotificationRequest] = {}
        self._listeners: list[DeliveryListener] = []
        self.delivered: list[DeliveredNotification] = []

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def channels(self) -> dict[str, str]:
        return dict(self._channels)

    def pending_handles(self) -> set[str]:
        return set(self._pending)

    def add_delivery_listener(self, listener: DeliveryListener) -> None:
        self._listeners.append(listener)

    async def get_permission(self) -> PermissionStatus:
        return self._permission

    async def request_permission(self) -> PermissionStatus:
        self._permission = PermissionStatus.GRANTED if self._grant_permission else PermissionStatus.DENIED
        return self._permission

    async def ensure_channel(self, channel_id: str, name: str) -> None:
        self._channels[channel_id] = name

    async def schedule_notification(self, request: NotificationRequest) -> str:
        if not self._available:
            raise PlatformSchedulingError("notifications are not available on this device")
        if self._permission != PermissionStatus.GRANTED:
            raise PermissionDenied(f"notification permission is {self._permission.value}")
        if request.fire_after_seconds < 0:
            raise PlatformSchedulingError(f"invalid delay: {request.fire_after_seconds}")

        loop = asyncio.get_running_loop()
        handle = uuid.uuid4().hex
        self._requests[handle] = request
        self._pending[handle] = loop.call_later(request.fire_after_seconds, self._deliver, handle)
        logger.debug("Timer %s armed for %ss: %s", handle, request.fire_after_seconds, request.title)
        return handle

    async def cancel_all_scheduled(self) -> None:
        for timer in self._pending.values():
            timer.cancel()
        n = len(self._pending)
        self._pending.clear()
        self._requests.clear()
        logger.debug("Cancelled %d pending timer(s)", n)

    async def cancel_scheduled(self, handle: str) -> None:
        # Unknown handles are a no-op (already delivered or cancelled).
        timer = self._pending.pop(handle, None)
        self._requests.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def shutdown(self) -> None:
        for timer in self._pending.values():
            timer.cancel()
        self._pending.clear()
        self._requests.clear()

    def _deliver(self, handle: str) -> None:
        self._pending.pop(handle, None)
        request = self._requests.pop(handle, None)
        if request is None:
            return

        notification = DeliveredNotification(
            handle=handle,
            title=request.title,
            body=request.body,
            channel_id=request.channel_id,
            delivered_at=datetime.now(),
            data=dict(request.data),
        )
        self.delivered.append(notification)

        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Delivery listener failed for %s", handle)
