"""Shared test helpers for FocusFlow."""

from datetime import date, datetime, time, timedelta

from focusflow.progress.engine import ProgressEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Injectable ``today`` / ``now`` pair that tests can move around."""

    def __init__(self, day: date, hour: int = 10):
        self.day = day
        self.hour = hour

    def today(self) -> date:
        return self.day

    def now(self) -> datetime:
        return datetime.combine(self.day, time(self.hour))

    def advance(self, days: int = 1) -> None:
        self.day += timedelta(days=days)


def add_task(
    engine: ProgressEngine,
    *,
    title: str = "Write report",
    duration: int = 25,
    difficulty: str = "Easy",
    category: str = "Work",
    due_date: str = "2026-03-10",
):
    """Add a task with sensible defaults."""
    return engine.add_task(title, duration, difficulty, category, due_date)


def earn_xp(engine: ProgressEngine, amount: int):
    """Complete an Easy task worth exactly *amount* XP."""
    task = add_task(engine, duration=amount, difficulty="Easy")
    return engine.complete_task(task.id)
