"""Gamification package."""

from .xp import (
    XP_PER_LEVEL,
    DIFFICULTY_MULTIPLIERS,
    MILESTONES,
    Milestone,
    calculate_xp,
    round_half_up,
    level_for_xp,
    xp_for_level,
    xp_in_current_level,
    xp_to_next_level,
    level_progress_percent,
    next_milestone,
)
from .badges import (
    BADGES,
    BadgeDef,
    BadgeContext,
    BadgeManager,
    badge_board,
    get_badge_def,
)
from .stats import (
    PeriodStats,
    period_stats,
    category_breakdown,
    difficulty_breakdown,
    activity_heatmap,
    format_focus_time,
)

__all__ = [
    "XP_PER_LEVEL",
    "DIFFICULTY_MULTIPLIERS",
    "MILESTONES",
    "Milestone",
    "calculate_xp",
    "round_half_up",
    "level_for_xp",
    "xp_for_level",
    "xp_in_current_level",
    "xp_to_next_level",
    "level_progress_percent",
    "next_milestone",
    "BADGES",
    "BadgeDef",
    "BadgeContext",
    "BadgeManager",
    "badge_board",
    "get_badge_def",
    "PeriodStats",
    "period_stats",
    "category_breakdown",
    "difficulty_breakdown",
    "activity_heatmap",
    "format_focus_time",
]
