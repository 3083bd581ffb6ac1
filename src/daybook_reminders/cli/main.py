# src/daybook_reminders/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, asks for notification permission, then:
- keeps reminders in sync with today's tasks (refresh loop),
- runs the console REPL (optional).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..cli.commands import remember_report
from ..config import get_settings
from ..connectors.console_connector import print_notification, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..reminders.refresh import refresh_once, run_refresh_loop

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.scheduler.cancel_all()
    except Exception:
        logger.exception("Failed to cancel reminders on shutdown.")

    try:
        shutdown = getattr(state.platform, "shutdown", None)
        if shutdown is not None:
            shutdown()
    except Exception:
        logger.debug("Platform shutdown failed.", exc_info=True)


async def run_app(state: AppState) -> None:
    settings = state.settings

    add_listener = getattr(state.platform, "add_delivery_listener", None)
    if add_listener is not None:
        add_listener(lambda n: print_notification(state, n))

    status = await state.scheduler.register_for_notifications()
    logger.info("Notification permission: %s", status.value)

    def on_report(tasks, report) -> None:
        remember_report(state, tasks, report)

    interval = float(getattr(settings, "refresh_interval_seconds", 0) or 0)
    refresher: asyncio.Task[None] | None = None
    if interval > 0:
        refresher = asyncio.create_task(
            run_refresh_loop(state.scheduler, state.task_source, interval_seconds=interval, on_report=on_report)
        )
    else:
        await refresh_once(state.scheduler, state.task_source, on_report=on_report)

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Keeping reminders in sync. Press Ctrl+C to stop.")
            await asyncio.Event().wait()
    finally:
        if refresher is not None:
            refresher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await refresher

        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/daybook")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s reminders...", getattr(settings, "app_name", "daybook"))

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
