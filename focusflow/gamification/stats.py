"""Analytics over completed tasks.

Everything here is a pure function of the task list and a reference
date, so the analytics page can recompute on every ``state_changed``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from ..progress.records import Category, Difficulty, Task
from .xp import round_half_up

PERIOD_DAYS: dict[str, int] = {"week": 7, "month": 30}


@dataclass(frozen=True)
class PeriodStats:
    period: str
    tasks_completed: int
    xp_earned: int
    focus_minutes: int
    completion_rate: int            # percent of all tasks, 0-100
    avg_tasks_per_day: float
    avg_xp_per_day: int


def _completed_on(task: Task) -> date | None:
    if not task.completed_date:
        return None
    return date.fromisoformat(task.completed_date[:10])


def period_stats(
    tasks: Iterable[Task], period: str = "week", today: date | None = None,
) -> PeriodStats:
    """Totals for tasks completed in the last 7 ("week") or 30 ("month")
    days.  The completion rate covers every task regardless of period."""
    tasks = list(tasks)
    today = today or date.today()
    days = PERIOD_DAYS[period]
    start = today - timedelta(days=days)

    in_period = []
    for task in tasks:
        done = _completed_on(task)
        if done is not None and done >= start:
            in_period.append(task)

    xp_earned = sum(t.xp for t in in_period)
    completed = sum(1 for t in tasks if t.completed)
    rate = round_half_up(completed / len(tasks) * 100) if tasks else 0

    return PeriodStats(
        period=period,
        tasks_completed=len(in_period),
        xp_earned=xp_earned,
        focus_minutes=sum(t.duration for t in in_period),
        completion_rate=rate,
        avg_tasks_per_day=round_half_up(len(in_period) / days * 10) / 10,
        avg_xp_per_day=round_half_up(xp_earned / days),
    )


def category_breakdown(tasks: Iterable[Task]) -> list[dict]:
    """``{"category", "count", "percentage"}`` per category over completed
    tasks."""
    completed = [t for t in tasks if t.completed]
    rows = []
    for cat in Category:
        count = sum(1 for t in completed if t.category == cat)
        pct = round_half_up(count / len(completed) * 100) if completed else 0
        rows.append({"category": cat.value, "count": count, "percentage": pct})
    return rows


def difficulty_breakdown(tasks: Iterable[Task]) -> list[dict]:
    """``{"difficulty", "count", "xp"}`` per difficulty over completed
    tasks."""
    completed = [t for t in tasks if t.completed]
    rows = []
    for diff in Difficulty:
        matching = [t for t in completed if t.difficulty == diff]
        rows.append({
            "difficulty": diff.value,
            "count": len(matching),
            "xp": sum(t.xp for t in matching),
        })
    return rows


def activity_heatmap(
    tasks: Iterable[Task], today: date | None = None, weeks: int = 12,
) -> list[list[dict]]:
    """*weeks* rows of 7 ``{"date", "count", "xp"}`` cells, oldest first.
    The final cell is *today*."""
    today = today or date.today()
    per_day: dict[str, list[Task]] = {}
    for task in tasks:
        if task.completed_date:
            per_day.setdefault(task.completed_date[:10], []).append(task)

    grid = []
    for w in range(weeks - 1, -1, -1):
        row = []
        for d in range(7):
            day = (today - timedelta(days=w * 7 + (6 - d))).isoformat()
            day_tasks = per_day.get(day, [])
            row.append({
                "date": day,
                "count": len(day_tasks),
                "xp": sum(t.xp for t in day_tasks),
            })
        grid.append(row)
    return grid


def format_focus_time(minutes: int) -> str:
    """``125`` → ``"2h 5m"``, ``45`` → ``"45m"``."""
    minutes = max(minutes, 0)
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"
