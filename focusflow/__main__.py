"""Allow running FocusFlow as a module: python -m focusflow."""

import logging

from .database.db import init_db
from .gamification.badges import BadgeManager
from .gamification.stats import (
    PERIOD_DAYS,
    activity_heatmap,
    format_focus_time,
    period_stats,
)
from .gamification.xp import xp_to_next_level
from .progress.engine import ProgressEngine
from .progress.store import StateStore
from .settings import load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    settings = load_settings()

    engine = ProgressEngine(store=StateStore())

    # One streak check per session.
    engine.update_streak()
    if settings.auto_award_badges:
        for badge in BadgeManager().check_and_award(engine):
            print(f"Badge earned: {badge['label']}")

    period = settings.stats_period
    if period not in PERIOD_DAYS:
        logger.warning("Unknown stats_period %r; using 'week'", period)
        period = "week"
    weeks = max(settings.heatmap_weeks, 1)

    p = engine.progress
    pending = sum(1 for t in engine.tasks if not t.completed)
    stats = period_stats(engine.tasks, period)
    active_days = sum(
        1 for row in activity_heatmap(engine.tasks, weeks=weeks)
        for cell in row if cell["count"] > 0
    )

    print("FocusFlow ready!")
    print(
        f"Level {p.current_level} · {p.total_xp} XP "
        f"({xp_to_next_level(p.total_xp)} to next) · "
        f"streak {p.current_streak}d (best {p.longest_streak}d)"
    )
    print(
        f"{p.total_tasks_completed} tasks done · "
        f"{format_focus_time(p.total_focus_minutes)} focused · "
        f"{pending} pending"
    )
    print(
        f"This {period}: {stats.tasks_completed} tasks · "
        f"{stats.xp_earned} XP · {stats.completion_rate}% complete"
    )
    print(f"Active on {active_days} of the last {weeks * 7} days")


if __name__ == "__main__":
    main()
