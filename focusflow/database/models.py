"""SQLAlchemy ORM models for FocusFlow."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StoredState(Base):
    """One serialized state blob per storage key.

    The payload is the whole ``{tasks, rewards, userProgress}`` document,
    overwritten wholesale after every engine mutation.
    """

    __tablename__ = "app_state"

    id = Column(Integer, primary_key=True, autoincrement=True)
    storage_key = Column(String(64), nullable=False, unique=True)
    schema_version = Column(Integer, nullable=False, default=1)
    revision = Column(Integer, nullable=False, default=0)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<StoredState key={self.storage_key} "
            f"v={self.schema_version} rev={self.revision}>"
        )
