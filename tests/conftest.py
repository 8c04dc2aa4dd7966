"""Shared pytest fixtures for FocusFlow tests."""

import sys
from datetime import date

import pytest

from PyQt6.QtCore import QCoreApplication

from focusflow.database.db import configure_engine, init_db
from focusflow.progress.engine import ProgressEngine
from focusflow.progress.store import StateStore

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    """A controllable clock starting on 2026-03-10 at 10:00."""
    return FakeClock(date(2026, 3, 10), hour=10)


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def engine(qapp, store, clock):
    """Fresh ProgressEngine persisting to the in-memory database."""
    return ProgressEngine(parent=None, store=store, today=clock.today, now=clock.now)


@pytest.fixture
def engine_no_db(qapp, clock):
    """Fresh ProgressEngine with no store (pure state tests)."""
    return ProgressEngine(parent=None, store=None, today=clock.today, now=clock.now)
