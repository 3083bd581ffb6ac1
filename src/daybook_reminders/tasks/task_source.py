# src/daybook_reminders/tasks/task_source.py

from __future__ import annotations

"""
Task source backed by a JSON export of the backend's "today" endpoint.

Accepted shapes:
- a list of task records
- {"tasks": [...]} (the API response envelope)

Records use the API's camelCase names (startTime, isCompleted, ...).
"""

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from ..reminders.models import Task

logger = logging.getLogger(__name__)


def _parse_date(raw: Any) -> date | None:
    # API dates are either "YYYY-MM-DD" or a full ISO timestamp; only the calendar day matters.
    if not isinstance(raw, str) or len(raw) < 10:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def _parse_bool(raw: Any) -> bool:
    # JSON exports sometimes carry "false"/"0" strings; bool("false") would be True.
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def parse_task_record(rec: Any) -> Task | None:
    """
    Convert one API task record into a Task.

    Returns None for records without id/name/date. A bad startTime is kept as-is:
    the scheduler reports it as malformed and skips the task.
    """
    if not isinstance(rec, dict):
        return None

    task_id = _opt_str(rec.get("id"))
    name = _opt_str(rec.get("name"))
    day = _parse_date(rec.get("date"))
    if task_id is None or name is None or day is None:
        return None

    start_time = rec.get("startTime", rec.get("time"))

    return Task(
        id=task_id,
        name=name,
        date=day,
        start_time=str(start_time) if start_time is not None else "",
        is_completed=_parse_bool(rec.get("isCompleted")),
        category=_opt_str(rec.get("category")),
        end_time=_opt_str(rec.get("endTime")),
        notes=_opt_str(rec.get("notes")),
    )


def parse_task_payload(data: Any) -> list[Task]:
    if isinstance(data, dict):
        data = data.get("tasks", [])
    if not isinstance(data, list):
        raise ValueError("expected a list of tasks or an object with a 'tasks' list")

    out: list[Task] = []
    for i, rec in enumerate(data):
        task = parse_task_record(rec)
        if task is None:
            logger.warning("Skipping invalid task record #%d: %r", i, rec)
            continue
        out.append(task)
    return out


class JsonFileTaskSource:
    """TaskSource reading the day's tasks from a local JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def list_today_tasks(self) -> list[Task]:
        if not self.path.exists():
            logger.info("Task file %s not found; no tasks today.", self.path)
            return []

        raw = await asyncio.to_thread(self.path.read_text, "utf-8")
        tasks = parse_task_payload(json.loads(raw))
        logger.debug("Loaded %d task(s) from %s", len(tasks), self.path)
        return tasks
