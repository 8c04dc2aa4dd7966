"""FocusFlow: tasks, XP, levels, streaks and rewards."""

__version__ = "0.1.0"
