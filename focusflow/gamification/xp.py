"""XP and leveling rules for FocusFlow.

XP Awards
---------
A task's XP is cached on the task when it is created or edited::

    xp = round(duration_minutes x multiplier)

    Easy    x1
    Medium  x2
    Hard    x4
    Elite   x8

Leveling Curve
--------------
Flat: every level costs 500 XP, so ``level = floor(total_xp / 500) + 1``.
The level is derived from the *spendable* balance, which means a large
redemption followed by a completion can land the player on a lower level
than before.

Milestones
----------
Fixed XP landmarks shown on the progress page (100 "First Steps" up to
50 000 "Grandmaster").
"""

from __future__ import annotations

import math
from dataclasses import dataclass


# ── constants (easy to adjust) ───────────────────────────────────────────

XP_PER_LEVEL = 500

DIFFICULTY_MULTIPLIERS: dict[str, int] = {
    "Easy": 1,
    "Medium": 2,
    "Hard": 4,
    "Elite": 8,
}


# ── task XP ──────────────────────────────────────────────────────────────


def round_half_up(value: float) -> int:
    """Nearest integer, with .5 going up (``round()`` rounds halves to even)."""
    return math.floor(value + 0.5)


def calculate_xp(duration: int, difficulty: str) -> int:
    """XP a task of *duration* minutes is worth at *difficulty*.

    *difficulty* may be a plain name or a ``Difficulty`` member.
    """
    name = getattr(difficulty, "value", difficulty)
    return round_half_up(duration * DIFFICULTY_MULTIPLIERS[name])


# ── level math ───────────────────────────────────────────────────────────


def level_for_xp(total_xp: int) -> int:
    """Return the level a player is at given their XP balance."""
    return max(total_xp, 0) // XP_PER_LEVEL + 1


def xp_for_level(level: int) -> int:
    """Balance required to *reach* the given level.

    ``xp_for_level(1)`` is 0 (you start at level 1 with zero XP).
    """
    if level <= 1:
        return 0
    return (level - 1) * XP_PER_LEVEL


def xp_in_current_level(total_xp: int) -> tuple[int, int]:
    """Return ``(earned_in_level, needed_for_level)``."""
    return max(total_xp, 0) % XP_PER_LEVEL, XP_PER_LEVEL


def xp_to_next_level(total_xp: int) -> int:
    """XP still needed to reach the next level."""
    earned, needed = xp_in_current_level(total_xp)
    return needed - earned


def level_progress_percent(total_xp: int) -> float:
    """0.0 → 100.0 progress through the current level."""
    earned, needed = xp_in_current_level(total_xp)
    return earned / needed * 100


# ── milestones ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Milestone:
    xp: int
    label: str
    reward: str


MILESTONES: list[Milestone] = [
    Milestone(100, "First Steps", "Complete your first task"),
    Milestone(500, "Getting Started", "Reach Level 2"),
    Milestone(1000, "Momentum", "Unlock custom rewards"),
    Milestone(2500, "On Fire", "Reach Level 5"),
    Milestone(5000, "Dedicated", "Reach Level 10"),
    Milestone(10000, "Legendary", "Reach Level 20"),
    Milestone(25000, "Master", "Reach Level 50"),
    Milestone(50000, "Grandmaster", "Reach Level 100"),
]


def next_milestone(total_xp: int) -> tuple[Milestone | None, float]:
    """Return the first milestone above *total_xp* and the percent of the
    way there.  Once every milestone is passed: ``(None, 100.0)``."""
    for milestone in MILESTONES:
        if total_xp < milestone.xp:
            return milestone, max(total_xp, 0) / milestone.xp * 100
    return None, 100.0
