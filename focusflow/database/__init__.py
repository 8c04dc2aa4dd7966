"""Database package."""

from .db import get_session, init_db, read_state_blob, write_state_blob
from .models import StoredState

__all__ = [
    "get_session",
    "init_db",
    "read_state_blob",
    "write_state_blob",
    "StoredState",
]
