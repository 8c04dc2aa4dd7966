"""Durable storage for the engine's state.

The whole state lives in one JSON document under a fixed storage key::

    {"tasks": [...], "rewards": [...], "userProgress": {...}}

It is read once at startup and overwritten after every mutation.  Each
write records ``SCHEMA_VERSION`` next to the payload; on load, older
documents are upgraded one version at a time through ``MIGRATIONS``.

Version history
---------------
0   Browser-store envelope ``{"state": {...}, "version": 0}``.
1   Bare ``{tasks, rewards, userProgress}`` document.

Backups
-------
:func:`export_backup` dumps ``{progress, tasks, rewards, exportDate}`` to
``focusflow-backup-YYYY-MM-DD.json``.  Backups are never read back.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from ..database.db import read_state_blob, write_state_blob
from .records import AppState, UserProgress

logger = logging.getLogger(__name__)

STORAGE_KEY = "focusflow-storage"
SCHEMA_VERSION = 1


# ── migrations ────────────────────────────────────────────────────────────


def _unwrap_envelope(data: dict) -> dict:
    """v0 → v1: lift the state out of the browser-store envelope."""
    state = data.get("state", data)
    if not isinstance(state, dict):
        raise ValueError("v0 envelope has no state object")
    return state


# version → function producing the next version's document
MIGRATIONS: dict[int, Callable[[dict], dict]] = {
    0: _unwrap_envelope,
}


def migrate(data: dict, from_version: int) -> dict:
    """Upgrade *data* from *from_version* to ``SCHEMA_VERSION``."""
    if from_version > SCHEMA_VERSION:
        raise ValueError(
            f"stored state is version {from_version}, "
            f"newer than supported {SCHEMA_VERSION}"
        )
    version = from_version
    while version < SCHEMA_VERSION:
        data = MIGRATIONS[version](data)
        version += 1
    return data


# ── store ─────────────────────────────────────────────────────────────────


class StateStore:
    """Loads and saves an :class:`AppState` under one storage key."""

    def __init__(self, storage_key: str = STORAGE_KEY) -> None:
        self.storage_key = storage_key
        self.revision = 0

    def empty_state(self, today: date | None = None) -> AppState:
        return AppState(user_progress=UserProgress.fresh(today or date.today()))

    def load(self, today: date | None = None) -> AppState:
        """Return the stored state, or the empty defaults when nothing is
        stored or the stored document cannot be decoded."""
        row = read_state_blob(self.storage_key)
        if row is None:
            logger.info("No stored state under %r; starting fresh", self.storage_key)
            return self.empty_state(today)

        schema_version, revision, payload = row
        try:
            data = json.loads(payload)
            if not isinstance(data, dict):
                raise ValueError("stored state is not a JSON object")
            state = AppState.from_dict(migrate(data, schema_version))
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning(
                "Stored state under %r is unreadable (%s); starting fresh",
                self.storage_key, exc,
            )
            return self.empty_state(today)

        self.revision = revision
        logger.debug(
            "Loaded state rev=%d: %d tasks, %d rewards",
            revision, len(state.tasks), len(state.rewards),
        )
        return state

    def save(self, state: AppState, revision: int) -> None:
        """Overwrite the stored document.  Errors propagate to the caller."""
        payload = json.dumps(state.to_dict())
        write_state_blob(self.storage_key, SCHEMA_VERSION, revision, payload)
        self.revision = revision


# ── backup export ─────────────────────────────────────────────────────────


def backup_document(state: AppState, exported_at: datetime | None = None) -> dict:
    """The one-way backup bundle for *state*."""
    exported_at = exported_at or datetime.now()
    data = state.to_dict()
    return {
        "progress": data["userProgress"],
        "tasks": data["tasks"],
        "rewards": data["rewards"],
        "exportDate": exported_at.isoformat(),
    }


def export_backup(
    state: AppState, directory: Path, exported_at: datetime | None = None,
) -> Path:
    """Write a backup of *state* into *directory* and return its path."""
    exported_at = exported_at or datetime.now()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"focusflow-backup-{exported_at.date().isoformat()}.json"
    path.write_text(
        json.dumps(backup_document(state, exported_at), indent=2) + "\n",
        encoding="utf-8",
    )
    logger.info("Exported backup to %s", path)
    return path
