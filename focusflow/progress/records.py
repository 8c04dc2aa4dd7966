"""Task, reward and progress records.

Records are frozen dataclasses.  The engine never edits one in place; it
builds a replacement with :func:`dataclasses.replace` and swaps it in, so a
reader holding a record always sees a complete, consistent value.

``to_dict`` / ``from_dict`` produce and accept the persisted field names
(``due_date``, ``is_unlocked``, ``userProgress`` …).  ``from_dict`` fills
in defaults for missing optional fields so older blobs still load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


# ── enums ─────────────────────────────────────────────────────────────────


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    ELITE = "Elite"


class Category(str, Enum):
    WORK = "Work"
    PERSONAL = "Personal"
    HEALTH = "Health"
    LEARNING = "Learning"


def _expect(value, kind: type, what: str):
    """Return *value* if it has the JSON type *kind*, else raise ValueError."""
    if not isinstance(value, kind):
        raise ValueError(
            f"{what} must be a JSON {kind.__name__}, got {type(value).__name__}"
        )
    return value


# ── records ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    duration: int                       # minutes
    difficulty: Difficulty
    category: Category
    xp: int
    due_date: str                       # YYYY-MM-DD
    created_date: str                   # ISO timestamp
    completed: bool = False
    completed_date: str | None = None   # YYYY-MM-DD, set once

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "duration": self.duration,
            "difficulty": self.difficulty.value,
            "category": self.category.value,
            "xp": self.xp,
            "due_date": self.due_date,
            "completed": self.completed,
            "created_date": self.created_date,
        }
        if self.completed_date is not None:
            data["completed_date"] = self.completed_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        _expect(data, dict, "task")
        return cls(
            id=str(data["id"]),
            title=data["title"],
            duration=int(data["duration"]),
            difficulty=Difficulty(data["difficulty"]),
            category=Category(data["category"]),
            xp=int(data["xp"]),
            due_date=data.get("due_date", ""),
            created_date=data["created_date"],
            completed=bool(data.get("completed", False)),
            completed_date=data.get("completed_date"),
        )


@dataclass(frozen=True)
class Reward:
    id: str
    title: str
    xp_cost: int
    created_date: str
    is_unlocked: bool = False
    redeemed_date: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "xp_cost": self.xp_cost,
            "is_unlocked": self.is_unlocked,
            "created_date": self.created_date,
        }
        if self.redeemed_date is not None:
            data["redeemed_date"] = self.redeemed_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Reward:
        _expect(data, dict, "reward")
        return cls(
            id=str(data["id"]),
            title=data["title"],
            xp_cost=int(data["xp_cost"]),
            created_date=data["created_date"],
            is_unlocked=bool(data.get("is_unlocked", False)),
            redeemed_date=data.get("redeemed_date"),
        )


@dataclass(frozen=True)
class UserProgress:
    """The singleton progress ledger."""

    total_xp: int = 0
    current_level: int = 1
    current_streak: int = 0
    longest_streak: int = 0
    total_tasks_completed: int = 0
    total_focus_minutes: int = 0
    earned_badges: tuple[str, ...] = ()
    last_active_date: str | None = None

    @classmethod
    def fresh(cls, today: date) -> UserProgress:
        """Progress for a brand-new installation, active as of *today*."""
        return cls(last_active_date=today.isoformat())

    def to_dict(self) -> dict:
        return {
            "total_xp": self.total_xp,
            "current_level": self.current_level,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_tasks_completed": self.total_tasks_completed,
            "total_focus_minutes": self.total_focus_minutes,
            "earned_badges": list(self.earned_badges),
            "last_active_date": self.last_active_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> UserProgress:
        _expect(data, dict, "userProgress")
        defaults = cls()
        badges: list[str] = []
        for badge in _expect(data.get("earned_badges", []), list, "earned_badges"):
            _expect(badge, str, "badge id")
            if badge not in badges:
                badges.append(badge)
        last_active = data.get("last_active_date")
        if last_active is not None:
            _expect(last_active, str, "last_active_date")
        return cls(
            total_xp=int(data.get("total_xp", defaults.total_xp)),
            current_level=int(data.get("current_level", defaults.current_level)),
            current_streak=int(data.get("current_streak", defaults.current_streak)),
            longest_streak=int(data.get("longest_streak", defaults.longest_streak)),
            total_tasks_completed=int(
                data.get("total_tasks_completed", defaults.total_tasks_completed)
            ),
            total_focus_minutes=int(
                data.get("total_focus_minutes", defaults.total_focus_minutes)
            ),
            earned_badges=tuple(badges),
            last_active_date=last_active,
        )


@dataclass(frozen=True)
class AppState:
    """Everything the engine owns, as one value."""

    tasks: tuple[Task, ...] = ()
    rewards: tuple[Reward, ...] = ()
    user_progress: UserProgress = field(default_factory=UserProgress)

    def to_dict(self) -> dict:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "rewards": [r.to_dict() for r in self.rewards],
            "userProgress": self.user_progress.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> AppState:
        _expect(data, dict, "state")
        return cls(
            tasks=tuple(
                Task.from_dict(t) for t in _expect(data.get("tasks", []), list, "tasks")
            ),
            rewards=tuple(
                Reward.from_dict(r)
                for r in _expect(data.get("rewards", []), list, "rewards")
            ),
            user_progress=UserProgress.from_dict(data.get("userProgress", {})),
        )
