"""Pytest fixtures for paliers tests."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

from paliers.db.connection import DatabaseConnection, set_db
from paliers.persistence.store import StateStore
from paliers.tracking.controller import Tracker


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def store(temp_db):
    """State store on the temporary database."""
    return StateStore(temp_db)


@pytest.fixture
def tracker(store):
    """Tracker set up with 85 kg on 2024-01-01, goal 70 kg, 5 kg paliers."""
    tracker = Tracker.open(store)
    tracker.setup(date(2024, 1, 1), 85.0, 70.0, 5.0)
    return tracker


@pytest.fixture
def cli_db(temp_db):
    """Point the CLI at the temporary database."""
    set_db(temp_db)
    yield temp_db
    set_db(None)
