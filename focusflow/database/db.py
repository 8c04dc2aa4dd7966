"""Database connection and session management."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base, StoredState

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "FocusFlow"
DB_PATH = APP_SUPPORT_DIR / "focusflow.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def _run_migrations(engine) -> None:
    """Schema migrations for existing databases.

    Runs after ``create_all`` so new columns exist in fresh installs.
    Each migration is idempotent and safe to run repeatedly.
    """
    insp = inspect(engine)
    table_names = set(insp.get_table_names())

    with engine.connect() as conn:
        # ── M1: add revision column to app_state ───────────────────────
        if "app_state" in table_names:
            columns = {c["name"] for c in insp.get_columns("app_state")}
            if "revision" not in columns:
                conn.execute(text(
                    "ALTER TABLE app_state "
                    "ADD COLUMN revision INTEGER NOT NULL DEFAULT 0"
                ))

        conn.commit()


def init_db() -> None:
    """Create all tables and run migrations."""
    engine = _get_engine()
    Base.metadata.create_all(engine)
    _run_migrations(engine)


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── state blob helpers ────────────────────────────────────────────────────


def read_state_blob(storage_key: str) -> tuple[int, int, str] | None:
    """Return ``(schema_version, revision, payload)`` for *storage_key*,
    or ``None`` when nothing has been stored yet."""
    with get_session() as db:
        row = db.query(StoredState).filter_by(storage_key=storage_key).first()
        if row is None:
            return None
        return row.schema_version, row.revision, row.payload


def write_state_blob(
    storage_key: str, schema_version: int, revision: int, payload: str,
) -> None:
    """Insert or overwrite the blob stored under *storage_key*."""
    with get_session() as db:
        row = db.query(StoredState).filter_by(storage_key=storage_key).first()
        if row is None:
            row = StoredState(storage_key=storage_key)
            db.add(row)
        row.schema_version = schema_version
        row.revision = revision
        row.payload = payload
        row.updated_at = datetime.utcnow()
