# src/daybook_reminders/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the reminder core.

The scheduler depends on Protocols instead of concrete implementations.
This keeps the notification platform and the task source swappable and makes testing easier.
"""

from typing import Protocol

from ..reminders.models import NotificationRequest, PermissionStatus, Task


class NotificationPlatform(Protocol):
    """
    Device-side notification service.

    Implementations raise PlatformSchedulingError when a call is rejected.
    Handles are opaque strings owned by the platform.
    """

    @property
    def is_available(self) -> bool: ...

    async def get_permission(self) -> PermissionStatus: ...
    async def request_permission(self) -> PermissionStatus: ...
    async def ensure_channel(self, channel_id: str, name: str) -> None: ...

    async def schedule_notification(self, request: NotificationRequest) -> str: ...
    async def cancel_all_scheduled(self) -> None: ...
    async def cancel_scheduled(self, handle: str) -> None: ...


class TaskSource(Protocol):
    """Where today's tasks come from (the backend API, or a local export of it)."""

    async def list_today_tasks(self) -> list[Task]: ...
