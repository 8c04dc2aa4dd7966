"""Badge catalog and award checks for FocusFlow.

Badge Catalog
-------------
Twelve badges.  The catalog is static reference data; only the ids of
earned badges are stored, in ``UserProgress.earned_badges``.

    early-bird        Early Bird    complete a task before 7 AM
    focused-session   Deep Focus    60+ minutes of focus
    streak-master     Consistent    7-day streak
    task-crusher      Crusher       100 tasks completed
    top-performer     Elite         reach level 20
    reward-seeker     Achiever      redeem 10 rewards
    night-owl         Night Owl     complete a task after 11 PM
    social-butterfly  Connector     (no automatic check)
    mega-focus        Zen Master    4 hours of completed tasks in one day
    perfect-week      God Mode      (no automatic check)
    budget-king       Thrifty       hold 5000 XP without ever spending
    iron-will         Unstoppable   30-day streak

Awarding
--------
The engine never decides eligibility.  :class:`BadgeManager` inspects a
snapshot of engine state and calls ``engine.add_badge`` for anything newly
earned.  Badges with ``check=None`` can only be granted by calling
``add_badge`` directly.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from ..progress.records import AppState

if TYPE_CHECKING:
    from ..progress.engine import ProgressEngine


@dataclass(frozen=True)
class BadgeContext:
    """What a badge check gets to look at."""

    state: AppState
    now: datetime

    @property
    def progress(self):
        return self.state.user_progress

    def completed_today(self) -> bool:
        today = self.now.date().isoformat()
        return any(t.completed_date == today for t in self.state.tasks)


@dataclass(frozen=True)
class BadgeDef:
    id: str
    label: str
    description: str
    check: Callable[[BadgeContext], bool] | None = field(
        default=None, repr=False, compare=False,
    )


# ── checks ───────────────────────────────────────────────────────────────


def _busiest_day_minutes(ctx: BadgeContext) -> int:
    per_day: dict[str, int] = defaultdict(int)
    for task in ctx.state.tasks:
        if task.completed and task.completed_date:
            per_day[task.completed_date] += task.duration
    return max(per_day.values(), default=0)


def _rewards_redeemed(ctx: BadgeContext) -> int:
    return sum(1 for r in ctx.state.rewards if r.is_unlocked)


BADGES: list[BadgeDef] = [
    BadgeDef(
        "early-bird", "Early Bird", "Complete a task before 7 AM",
        lambda c: c.now.hour < 7 and c.completed_today(),
    ),
    BadgeDef(
        "focused-session", "Deep Focus", "60+ minutes of focus",
        lambda c: c.progress.total_focus_minutes >= 60,
    ),
    BadgeDef(
        "streak-master", "Consistent", "Maintain a 7-day streak",
        lambda c: c.progress.current_streak >= 7,
    ),
    BadgeDef(
        "task-crusher", "Crusher", "Complete 100 total tasks",
        lambda c: c.progress.total_tasks_completed >= 100,
    ),
    BadgeDef(
        "top-performer", "Elite", "Reach Level 20",
        lambda c: c.progress.current_level >= 20,
    ),
    BadgeDef(
        "reward-seeker", "Achiever", "Redeem 10 rewards",
        lambda c: _rewards_redeemed(c) >= 10,
    ),
    BadgeDef(
        "night-owl", "Night Owl", "Focus after 11 PM",
        lambda c: c.now.hour >= 23 and c.completed_today(),
    ),
    BadgeDef("social-butterfly", "Connector", "Interact with 5 friends"),
    BadgeDef(
        "mega-focus", "Zen Master", "4 hours of focus in one day",
        lambda c: _busiest_day_minutes(c) >= 240,
    ),
    BadgeDef("perfect-week", "God Mode", "Complete all goals for 7 days"),
    BadgeDef(
        "budget-king", "Thrifty", "Save 5000 XP without spending",
        lambda c: c.progress.total_xp >= 5000 and _rewards_redeemed(c) == 0,
    ),
    BadgeDef(
        "iron-will", "Unstoppable", "Maintain a 30-day streak",
        lambda c: c.progress.current_streak >= 30,
    ),
]

_BADGE_MAP: dict[str, BadgeDef] = {b.id: b for b in BADGES}


def get_badge_def(badge_id: str) -> BadgeDef | None:
    """Return the BadgeDef for *badge_id*, or ``None``."""
    return _BADGE_MAP.get(badge_id)


def badge_board(earned_badges) -> list[dict]:
    """Every catalog badge with an ``unlocked`` flag, in catalog order."""
    earned = set(earned_badges)
    return [
        {
            "id": b.id,
            "label": b.label,
            "description": b.description,
            "unlocked": b.id in earned,
        }
        for b in BADGES
    ]


# ── manager ─────────────────────────────────────────────────────────────


class BadgeManager:
    """Evaluates badge checks and records newly earned badges."""

    def __init__(self, badges: list[BadgeDef] | None = None) -> None:
        self._badges = BADGES if badges is None else badges

    def eligible(self, state: AppState, now: datetime | None = None) -> list[BadgeDef]:
        """Badges whose check passes for *state*, earned or not."""
        ctx = BadgeContext(state=state, now=now or datetime.now())
        return [b for b in self._badges if b.check is not None and b.check(ctx)]

    def check_and_award(
        self, engine: ProgressEngine, now: datetime | None = None,
    ) -> list[dict]:
        """Award everything the player has earned but hasn't received yet.

        Returns a list of ``{"id", "label"}`` dicts for newly earned
        badges so the UI can show notifications.
        """
        already = set(engine.progress.earned_badges)
        new_badges: list[dict] = []
        for badge in self.eligible(engine.state, now):
            if badge.id in already:
                continue
            engine.add_badge(badge.id)
            new_badges.append({"id": badge.id, "label": badge.label})
        return new_badges
