"""Shared fixtures for the history tests."""

from datetime import datetime

import pytest

from database import Database
from history_manager import HistoryManager
from models import HistoryEntry


@pytest.fixture
def db(tmp_path):
    """A fresh SQLite history database in a temp directory."""
    return Database(db_path=str(tmp_path / "history.db"))


@pytest.fixture
def history(db):
    return HistoryManager(db)


@pytest.fixture
def make_entry():
    """Build detached HistoryEntry values for grouping tests."""
    counter = {"id": 0}

    def _make(timestamp, expression="1+1", result="2", memo=""):
        counter["id"] += 1
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return HistoryEntry(id=counter["id"], expression=expression,
                            result=result, timestamp=timestamp, memo=memo)

    return _make
