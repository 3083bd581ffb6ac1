# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from daybook_reminders.core.state import AppState
from daybook_reminders.reminders.models import Task
from daybook_reminders.reminders.scheduler import ReminderScheduler

from .fakes import FakeNotificationPlatform, FakeTaskSource

TODAY = date(2026, 10, 18)


def make_task(
    task_id: str = "t1",
    name: str = "Workout",
    start_time: str = "18:00",
    *,
    is_completed: bool = False,
    category: str | None = None,
    day: date = TODAY,
) -> Task:
    return Task(
        id=task_id,
        name=name,
        date=day,
        start_time=start_time,
        is_completed=is_completed,
        category=category,
    )


def at(hh: int, mm: int, ss: int = 0) -> datetime:
    return datetime(TODAY.year, TODAY.month, TODAY.day, hh, mm, ss)


class FrozenClock:
    """Settable clock passed to ReminderScheduler."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(at(17, 45))


@pytest.fixture()
def platform() -> FakeNotificationPlatform:
    return FakeNotificationPlatform()


@pytest.fixture()
def scheduler(platform: FakeNotificationPlatform, clock: FrozenClock) -> ReminderScheduler:
    return ReminderScheduler(platform, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="daybook-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks_today.json",
        refresh_interval_seconds=0.0,
        notifications_enabled=True,
        console_enabled=False,
    )


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    platform: FakeNotificationPlatform,
    scheduler: ReminderScheduler,
) -> AppState:
    return AppState(
        settings=settings,
        platform=platform,
        scheduler=scheduler,
        task_source=FakeTaskSource(),
    )
