"""
History Manager for Calculator 3
Records calculations, enforces the retention cap and groups history by day
"""
import logging
from itertools import groupby

import config
from database import Database, PersistenceFailure
from models import HistoryGroup

logger = logging.getLogger(__name__)


def group_by_day(entries):
    """Partition entries by local calendar day.

    Groups come newest day first, and each group's entries newest first.
    """
    ordered = sorted(entries, key=lambda e: (e.timestamp, e.id), reverse=True)
    return [
        HistoryGroup(date=day, entries=list(day_entries))
        for day, day_entries in groupby(ordered, key=lambda e: e.local_date)
    ]


def open_history(db_path=config.DB_PATH, limit=config.MAX_HISTORY_ITEMS):
    """Open the history store, or return None if the database is unusable."""
    try:
        return HistoryManager(Database(db_path=db_path), limit=limit)
    except PersistenceFailure as e:
        logger.error(f"History disabled, cannot open database: {e}")
        return None


class HistoryManager:
    def __init__(self, db, limit=config.MAX_HISTORY_ITEMS):
        self.db = db
        self.limit = limit

    def add_calculation(self, expression, result):
        """Record a finished calculation and prune to the newest entries in one step"""
        return self.db.record_calculation(expression, result, keep=self.limit)

    def prune_to_most_recent(self, limit=None):
        """Delete the oldest entries beyond the cap. Returns how many were removed."""
        if limit is None:
            limit = self.limit
        removed = self.db.delete_oldest_beyond(limit)
        if removed:
            logger.debug(f"Pruned {removed} history entries beyond {limit}")
        return removed

    def get_history(self):
        """All entries, newest first"""
        return self.db.get_entries()

    def get_grouped_history(self):
        return group_by_day(self.get_history())

    def get_entry(self, entry_id):
        return self.db.get_entry(entry_id)

    def delete_entry(self, entry_id):
        """Remove an entry; deleting one that is already gone is fine"""
        return self.db.delete_entry(entry_id)

    def update_memo(self, entry_id, text):
        """Save a memo on an entry.

        Returns False when the entry does not exist or the write failed;
        failures are logged, never raised.
        """
        try:
            updated = self.db.update_memo(entry_id, text)
            self.db.save()
        except PersistenceFailure as e:
            logger.error(f"Failed to save memo for entry {entry_id}: {e}")
            return False
        if not updated:
            logger.warning(f"Memo not saved: no history entry with id {entry_id}")
        return updated
