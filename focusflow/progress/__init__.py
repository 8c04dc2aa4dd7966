"""Progress package."""

from .records import (
    AppState,
    Category,
    Difficulty,
    Reward,
    Task,
    UserProgress,
)
from .engine import ProgressEngine, EDITABLE_TASK_FIELDS
from .store import (
    StateStore,
    STORAGE_KEY,
    SCHEMA_VERSION,
    MIGRATIONS,
    migrate,
    backup_document,
    export_backup,
)
from .views import (
    filter_tasks,
    tasks_due_today,
    upcoming_tasks,
    recently_completed,
    group_by_due_date,
)

__all__ = [
    "AppState",
    "Category",
    "Difficulty",
    "Reward",
    "Task",
    "UserProgress",
    "ProgressEngine",
    "EDITABLE_TASK_FIELDS",
    "StateStore",
    "STORAGE_KEY",
    "SCHEMA_VERSION",
    "MIGRATIONS",
    "migrate",
    "backup_document",
    "export_backup",
    "filter_tasks",
    "tasks_due_today",
    "upcoming_tasks",
    "recently_completed",
    "group_by_due_date",
]
