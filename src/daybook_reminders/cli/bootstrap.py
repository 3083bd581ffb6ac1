# src/daybook_reminders/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (platform/scheduler/task source).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..platform.local_notifier import LocalNotificationPlatform
from ..reminders.scheduler import ReminderScheduler
from ..tasks.task_source import JsonFileTaskSource

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    platform = LocalNotificationPlatform(grant_permission=settings.notifications_enabled)

    return AppState(
        settings=settings,
        platform=platform,
        scheduler=ReminderScheduler(platform),
        task_source=JsonFileTaskSource(settings.tasks_path),
    )
