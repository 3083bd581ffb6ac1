# tests/test_commands.py

from __future__ import annotations

import asyncio

import pytest

from daybook_reminders.cli.commands import CommandRegistry, registry
from daybook_reminders.reminders.refresh import run_refresh_loop

from .conftest import make_task


@pytest.mark.asyncio
async def test_command_registry_routes_and_passes_emit(state) -> None:
    reg = CommandRegistry()
    notes: list[str] = []

    async def handler(state, args, emit):
        if emit is not None:
            emit("note")
        return f"args={args}"

    reg.register("a", handler, "a", aliases=["x"])

    assert await reg.handle(state, "/a 1 2", emit=notes.append) == "args=['1', '2']"
    assert await reg.handle(state, "/X") == "args=[]"
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


@pytest.mark.asyncio
async def test_refresh_list_cancel_logout_flow(state, platform) -> None:
    state.task_source.tasks = [
        make_task("t1", "Workout", "18:00"),
        make_task("t2", "Breakfast", "08:00", is_completed=True),
    ]

    out = await registry.handle(state, "/refresh")
    assert "scheduled=3" in (out or "")
    assert [t.id for t in state.tasks] == ["t1", "t2"]

    listing = await registry.handle(state, "/list") or ""
    assert len(listing.splitlines()) == 4  # header + three reminders

    handle = sorted(state.scheduler.active_handles)[0]
    assert await registry.handle(state, f"/cancel {handle}") == "Reminder cancelled."
    assert len(state.scheduler.active_handles) == 2

    assert "All reminders cancelled" in (await registry.handle(state, "/logout") or "")
    assert state.scheduler.active_handles == set()
    assert platform.pending == {}


@pytest.mark.asyncio
async def test_status_reports_counts(state) -> None:
    out = await registry.handle(state, "/status") or ""
    assert "Active reminders: 0" in out
    assert "never refreshed" in out


@pytest.mark.asyncio
async def test_logout_stops_the_refresh_loop_from_rescheduling(state, platform) -> None:
    state.task_source.tasks = [make_task("t1", "Workout", "18:00")]
    runner = asyncio.create_task(
        run_refresh_loop(state.scheduler, state.task_source, interval_seconds=0.01)
    )

    await asyncio.sleep(0.05)
    assert len(platform.pending) == 3

    await registry.handle(state, "/logout")
    await asyncio.sleep(0.6)  # loop sleeps at least 0.5s between cycles

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert platform.pending == {}
    assert state.scheduler.active_handles == set()
    assert "Logged out" in (await registry.handle(state, "/refresh") or "")


@pytest.mark.asyncio
async def test_login_resumes_reminders(state, platform) -> None:
    state.task_source.tasks = [make_task("t1", "Workout", "18:00")]
    await registry.handle(state, "/logout")

    out = await registry.handle(state, "/login") or ""

    assert "scheduled=3" in out
    assert len(platform.pending) == 3
