"""Task list views for the dashboard and task pages."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from .records import Task

TASK_FILTERS = ("all", "pending", "completed")


def filter_tasks(tasks: Iterable[Task], status: str = "all") -> list[Task]:
    if status not in TASK_FILTERS:
        raise ValueError(f"unknown task filter {status!r}")
    if status == "completed":
        return [t for t in tasks if t.completed]
    if status == "pending":
        return [t for t in tasks if not t.completed]
    return list(tasks)


def tasks_due_today(tasks: Iterable[Task], today: date | None = None) -> list[Task]:
    """Pending tasks due today."""
    today_str = (today or date.today()).isoformat()
    return [t for t in tasks if not t.completed and t.due_date == today_str]


def upcoming_tasks(
    tasks: Iterable[Task], today: date | None = None, limit: int = 5,
) -> list[Task]:
    """The first *limit* pending tasks due after today."""
    today_str = (today or date.today()).isoformat()
    return [t for t in tasks if not t.completed and t.due_date > today_str][:limit]


def recently_completed(tasks: Iterable[Task], limit: int = 3) -> list[Task]:
    return [t for t in tasks if t.completed][:limit]


def group_by_due_date(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Tasks keyed by due date in first-seen order; blank dates go under
    ``"No Date"``."""
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.due_date or "No Date", []).append(task)
    return groups
