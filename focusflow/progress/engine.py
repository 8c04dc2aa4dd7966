"""The progress engine: tasks, rewards and the XP ledger.

Every change to FocusFlow's data goes through one of the engine's
operations.  Each operation runs to completion synchronously, swaps in new
immutable records, bumps ``revision`` and writes the whole state to the
store.

Soft failures
-------------
Routine refusals are reported by return value, never raised:

* ``complete_task`` on an unknown or already-completed task returns
  ``{"leveled_up": False, "new_level": <unchanged>}``.
* ``redeem_reward`` on an unknown, already-unlocked or unaffordable reward
  returns ``False``.
* ``update_task`` / ``delete_task`` / ``delete_reward`` on an unknown id do
  nothing.

Persistence failures
--------------------
A failed write does not roll back memory.  The engine logs it, keeps the
exception in ``last_persist_error`` and emits ``persist_failed``; the next
successful write clears it.

Streaks
-------
``complete_task`` stamps ``last_active_date`` but does not touch the
streak.  The application calls ``update_streak`` itself, once per session.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy.exc import SQLAlchemyError

from ..gamification.xp import calculate_xp, level_for_xp
from .records import AppState, Category, Difficulty, Reward, Task, UserProgress
from .store import StateStore

logger = logging.getLogger(__name__)

# Fields update_task applies; anything else is dropped.
EDITABLE_TASK_FIELDS = frozenset(
    {"title", "duration", "difficulty", "category", "due_date"}
)


def _new_id() -> str:
    return uuid.uuid4().hex


class ProgressEngine(QObject):
    """Single-writer owner of tasks, rewards and user progress.

    Signals
    -------
    state_changed()
        Emitted after every mutation.
    task_completed(data: dict)
        Keys: ``task_id``, ``xp``, ``duration``, ``total_xp``, ``level``.
    level_up(data: dict)
        Keys: ``old_level``, ``new_level``.
    reward_redeemed(data: dict)
        Keys: ``reward_id``, ``xp_cost``, ``total_xp``.
    streak_updated(current_streak: int, longest_streak: int)
    badge_earned(badge_id: str)
    persist_failed(message: str)
    """

    state_changed = pyqtSignal()
    task_completed = pyqtSignal(object)
    level_up = pyqtSignal(object)
    reward_redeemed = pyqtSignal(object)
    streak_updated = pyqtSignal(int, int)
    badge_earned = pyqtSignal(str)
    persist_failed = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        store: StateStore | None = None,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)

        self._store = store
        self._today = today
        self._now = now

        if store is not None:
            state = store.load(today())
            self._revision = store.revision
        else:
            state = AppState(user_progress=UserProgress.fresh(today()))
            self._revision = 0

        self._tasks: list[Task] = list(state.tasks)
        self._rewards: list[Reward] = list(state.rewards)
        self._progress: UserProgress = state.user_progress

        self.last_persist_error: Exception | None = None

    # ══════════════════════════════════════════════════════════════════
    #  READS
    # ══════════════════════════════════════════════════════════════════

    @property
    def tasks(self) -> tuple[Task, ...]:
        """All tasks, newest first."""
        return tuple(self._tasks)

    @property
    def rewards(self) -> tuple[Reward, ...]:
        """All rewards, newest first."""
        return tuple(self._rewards)

    @property
    def progress(self) -> UserProgress:
        return self._progress

    @property
    def state(self) -> AppState:
        """A snapshot of everything the engine owns."""
        return AppState(
            tasks=tuple(self._tasks),
            rewards=tuple(self._rewards),
            user_progress=self._progress,
        )

    @property
    def revision(self) -> int:
        """Number of mutations applied since the store was created."""
        return self._revision

    def get_task(self, task_id: str) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def get_reward(self, reward_id: str) -> Reward | None:
        return next((r for r in self._rewards if r.id == reward_id), None)

    # ══════════════════════════════════════════════════════════════════
    #  TASKS
    # ══════════════════════════════════════════════════════════════════

    def add_task(
        self,
        title: str,
        duration: int,
        difficulty: Difficulty | str,
        category: Category | str,
        due_date: str,
    ) -> Task:
        """Create a pending task and put it at the front of the list."""
        difficulty = Difficulty(difficulty)
        task = Task(
            id=_new_id(),
            title=title,
            duration=duration,
            difficulty=difficulty,
            category=Category(category),
            xp=calculate_xp(duration, difficulty),
            due_date=due_date,
            created_date=self._now().isoformat(),
        )
        self._tasks.insert(0, task)
        logger.debug("Added task %s (%d XP)", task.id, task.xp)
        self._commit()
        return task

    def update_task(self, task_id: str, **changes) -> None:
        """Apply *changes* to a task.

        XP is recomputed from the merged values only when ``duration`` or
        ``difficulty`` is among the changes.  Completion fields, ``xp``
        and identity fields are ignored; a call with no editable field
        changes nothing and is not persisted.
        """
        index = self._task_index(task_id)
        if index is None:
            return

        ignored = set(changes) - EDITABLE_TASK_FIELDS
        if ignored:
            logger.debug(
                "update_task(%s) ignoring fields: %s",
                task_id, ", ".join(sorted(ignored)),
            )
        updates = {k: v for k, v in changes.items() if k in EDITABLE_TASK_FIELDS}
        if not updates:
            return
        if "difficulty" in updates:
            updates["difficulty"] = Difficulty(updates["difficulty"])
        if "category" in updates:
            updates["category"] = Category(updates["category"])

        task = replace(self._tasks[index], **updates)
        if "duration" in updates or "difficulty" in updates:
            task = replace(task, xp=calculate_xp(task.duration, task.difficulty))

        self._tasks[index] = task
        self._commit()

    def delete_task(self, task_id: str) -> None:
        index = self._task_index(task_id)
        if index is None:
            return
        del self._tasks[index]
        self._commit()

    def complete_task(self, task_id: str) -> dict:
        """Complete a task and credit its XP.

        Returns ``{"leveled_up": bool, "new_level": int}``.  Unknown or
        already-completed tasks leave everything untouched.
        """
        progress = self._progress
        index = self._task_index(task_id)
        if index is None or self._tasks[index].completed:
            return {"leveled_up": False, "new_level": progress.current_level}

        task = self._tasks[index]
        today = self._today().isoformat()
        new_total = progress.total_xp + task.xp
        new_level = level_for_xp(new_total)
        old_level = progress.current_level
        leveled_up = new_level > old_level

        # ── one state transition ─────────────────────────────────────
        self._tasks[index] = replace(task, completed=True, completed_date=today)
        self._progress = replace(
            progress,
            total_xp=new_total,
            current_level=new_level,
            total_tasks_completed=progress.total_tasks_completed + 1,
            total_focus_minutes=progress.total_focus_minutes + task.duration,
            last_active_date=today,
        )
        self._commit()

        logger.info(
            "Completed task %s: +%d XP (total %d, level %d)",
            task.id, task.xp, new_total, new_level,
        )
        self.task_completed.emit({
            "task_id": task.id,
            "xp": task.xp,
            "duration": task.duration,
            "total_xp": new_total,
            "level": new_level,
        })
        if leveled_up:
            self.level_up.emit({"old_level": old_level, "new_level": new_level})

        return {"leveled_up": leveled_up, "new_level": new_level}

    # ══════════════════════════════════════════════════════════════════
    #  REWARDS
    # ══════════════════════════════════════════════════════════════════

    def add_reward(self, title: str, xp_cost: int) -> Reward:
        reward = Reward(
            id=_new_id(),
            title=title,
            xp_cost=xp_cost,
            created_date=self._now().isoformat(),
        )
        self._rewards.insert(0, reward)
        self._commit()
        return reward

    def redeem_reward(self, reward_id: str) -> bool:
        """Spend XP on a reward.  ``False`` means nothing changed."""
        index = self._reward_index(reward_id)
        if index is None:
            return False
        reward = self._rewards[index]
        progress = self._progress
        if reward.is_unlocked or progress.total_xp < reward.xp_cost:
            return False

        self._rewards[index] = replace(
            reward, is_unlocked=True, redeemed_date=self._today().isoformat(),
        )
        self._progress = replace(progress, total_xp=progress.total_xp - reward.xp_cost)
        self._commit()

        logger.info(
            "Redeemed reward %s for %d XP (balance %d)",
            reward.id, reward.xp_cost, self._progress.total_xp,
        )
        self.reward_redeemed.emit({
            "reward_id": reward.id,
            "xp_cost": reward.xp_cost,
            "total_xp": self._progress.total_xp,
        })
        return True

    def delete_reward(self, reward_id: str) -> None:
        """Remove a reward.  Spent XP is not refunded."""
        index = self._reward_index(reward_id)
        if index is None:
            return
        del self._rewards[index]
        self._commit()

    # ══════════════════════════════════════════════════════════════════
    #  PROGRESS
    # ══════════════════════════════════════════════════════════════════

    def update_streak(self) -> None:
        """Advance, keep or restart the daily streak based on the gap
        since ``last_active_date``.

        ======  =======================================
        gap     effect on current_streak
        ======  =======================================
        0       unchanged (already counted today)
        1       +1
        > 1     reset to 1 (today starts a new streak)
        < 0     unchanged (clock moved backwards)
        ======  =======================================
        """
        progress = self._progress
        today = self._today()
        streak = progress.current_streak

        last = _parse_date(progress.last_active_date)
        if last is None:
            streak = 1
        else:
            gap = (today - last).days
            if gap == 1:
                streak += 1
            elif gap > 1:
                streak = 1
            elif gap < 0:
                logger.warning(
                    "last_active_date %s is after today (%s); streak left at %d",
                    last, today, streak,
                )

        self._progress = replace(
            progress,
            current_streak=streak,
            longest_streak=max(progress.longest_streak, streak),
            last_active_date=today.isoformat(),
        )
        self._commit()
        self.streak_updated.emit(
            self._progress.current_streak, self._progress.longest_streak,
        )

    def add_badge(self, badge_id: str) -> None:
        """Record a badge.  Already-earned badges are ignored."""
        progress = self._progress
        if badge_id in progress.earned_badges:
            return
        self._progress = replace(
            progress, earned_badges=progress.earned_badges + (badge_id,),
        )
        self._commit()
        logger.info("Badge earned: %s", badge_id)
        self.badge_earned.emit(badge_id)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _task_index(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _reward_index(self, reward_id: str) -> int | None:
        for i, reward in enumerate(self._rewards):
            if reward.id == reward_id:
                return i
        return None

    def _commit(self) -> None:
        """Bump the revision, persist, and announce the change."""
        self._revision += 1
        if self._store is not None:
            self._persist()
        self.state_changed.emit()

    def _persist(self) -> None:
        try:
            self._store.save(self.state, self._revision)
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Failed to persist state at revision %d", self._revision)
            self.last_persist_error = exc
            self.persist_failed.emit(str(exc))
        else:
            self.last_persist_error = None


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.warning("Unparseable last_active_date %r", value)
        return None
