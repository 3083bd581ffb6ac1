# tests/test_refresh.py

from __future__ import annotations

import asyncio

import pytest

from daybook_reminders.reminders.refresh import refresh_once, run_refresh_loop

from .conftest import make_task
from .fakes import FakeTaskSource


@pytest.mark.asyncio
async def test_refresh_once_rebuilds_from_source(scheduler, platform) -> None:
    source = FakeTaskSource([make_task("t1", "Workout", "18:00")])
    seen = []

    report = await refresh_once(scheduler, source, on_report=lambda tasks, rep: seen.append((tasks, rep)))

    assert report is not None
    assert len(report.scheduled) == 3
    assert seen and seen[0][1] is report


@pytest.mark.asyncio
async def test_refresh_once_keeps_reminders_when_source_fails(scheduler, platform) -> None:
    await scheduler.schedule_all([make_task("t1", "Workout", "18:00")])
    before = scheduler.active_handles

    report = await refresh_once(scheduler, FakeTaskSource(fail=True))

    assert report is None
    assert scheduler.active_handles == before
    assert set(platform.pending) == before


@pytest.mark.asyncio
async def test_refresh_loop_schedules_then_can_be_cancelled(scheduler, platform) -> None:
    source = FakeTaskSource([make_task("t1", "Workout", "18:00")])

    runner = asyncio.create_task(run_refresh_loop(scheduler, source, interval_seconds=0.01))

    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert source.loads >= 1
    assert len(scheduler.active_handles) == 3


@pytest.mark.asyncio
async def test_refresh_once_does_not_fetch_when_signed_out(scheduler, platform) -> None:
    source = FakeTaskSource([make_task("t1", "Workout", "18:00")])
    await scheduler.sign_out()

    assert await refresh_once(scheduler, source) is None
    assert source.loads == 0
    assert platform.pending == {}
