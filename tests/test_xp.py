"""Tests for the FocusFlow XP and leveling rules.

Covers: task XP by difficulty, rounding, the flat 500-XP leveling curve,
progress-within-level helpers, and milestones.
"""

import pytest

from focusflow.gamification.xp import (
    XP_PER_LEVEL,
    DIFFICULTY_MULTIPLIERS,
    MILESTONES,
    calculate_xp,
    level_for_xp,
    xp_for_level,
    xp_in_current_level,
    xp_to_next_level,
    level_progress_percent,
    next_milestone,
)
from focusflow.progress.records import Difficulty


# ═══════════════════════════════════════════════════════════════════════════
#  TASK XP
# ═══════════════════════════════════════════════════════════════════════════


class TestCalculateXP:

    def test_multipliers(self):
        assert DIFFICULTY_MULTIPLIERS == {"Easy": 1, "Medium": 2, "Hard": 4, "Elite": 8}

    @pytest.mark.parametrize("duration", [1, 5, 25, 45, 90, 240])
    def test_every_difficulty(self, duration):
        for name, mult in DIFFICULTY_MULTIPLIERS.items():
            assert calculate_xp(duration, name) == duration * mult

    def test_hard_45(self):
        assert calculate_xp(45, "Hard") == 180

    def test_accepts_enum(self):
        assert calculate_xp(30, Difficulty.ELITE) == 240

    def test_fractional_duration_rounds_half_up(self):
        assert calculate_xp(2.5, "Easy") == 3
        assert calculate_xp(3.5, "Easy") == 4
        assert calculate_xp(2.4, "Easy") == 2

    def test_zero_duration(self):
        assert calculate_xp(0, "Elite") == 0

    def test_unknown_difficulty_raises(self):
        with pytest.raises(KeyError):
            calculate_xp(10, "Legendary")


# ═══════════════════════════════════════════════════════════════════════════
#  LEVELING CURVE
# ═══════════════════════════════════════════════════════════════════════════


class TestLevelingCurve:

    def test_level_for_xp_zero(self):
        assert level_for_xp(0) == 1

    def test_just_below_boundary(self):
        assert level_for_xp(499) == 1

    def test_at_boundary(self):
        assert level_for_xp(500) == 2

    def test_high(self):
        assert level_for_xp(10_000) == 21

    def test_formula_holds(self):
        for total in range(0, 5000, 37):
            assert level_for_xp(total) == total // 500 + 1

    def test_negative_clamps_to_level_1(self):
        assert level_for_xp(-20) == 1

    def test_xp_for_level(self):
        assert xp_for_level(1) == 0
        assert xp_for_level(0) == 0
        assert xp_for_level(2) == XP_PER_LEVEL
        assert xp_for_level(5) == 2000

    def test_roundtrip_level(self):
        for total_xp in [0, 100, 499, 500, 1000, 5000, 50000]:
            level = level_for_xp(total_xp)
            assert xp_for_level(level) <= total_xp
            assert xp_for_level(level + 1) > total_xp

    def test_xp_in_current_level(self):
        assert xp_in_current_level(0) == (0, 500)
        assert xp_in_current_level(730) == (230, 500)

    def test_xp_to_next_level(self):
        assert xp_to_next_level(0) == 500
        assert xp_to_next_level(730) == 270
        assert xp_to_next_level(1000) == 500

    def test_level_progress_percent(self):
        assert level_progress_percent(0) == 0.0
        assert level_progress_percent(250) == 50.0
        assert level_progress_percent(1125) == 25.0


# ═══════════════════════════════════════════════════════════════════════════
#  MILESTONES
# ═══════════════════════════════════════════════════════════════════════════


class TestMilestones:

    def test_ascending(self):
        xps = [m.xp for m in MILESTONES]
        assert xps == sorted(xps)
        assert len(MILESTONES) == 8

    def test_first_milestone(self):
        milestone, pct = next_milestone(0)
        assert milestone.label == "First Steps"
        assert pct == 0.0

    def test_partway(self):
        milestone, pct = next_milestone(750)
        assert milestone.xp == 1000
        assert milestone.label == "Momentum"
        assert pct == 75.0

    def test_exactly_on_milestone_targets_next(self):
        milestone, _ = next_milestone(500)
        assert milestone.label == "Momentum"

    def test_all_passed(self):
        assert next_milestone(50_000) == (None, 100.0)
