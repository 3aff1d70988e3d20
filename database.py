"""
Database Manager for Calculator 3
Handles SQLite storage of calculation history
"""
import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone

import config
from models import HistoryEntry

logger = logging.getLogger(__name__)

# Timestamps are stored as UTC text in this format so they sort as instants
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class PersistenceFailure(Exception):
    """A read or write against the history database failed."""


def _utcnow():
    return datetime.now(timezone.utc)


def _to_utc(timestamp):
    """Aware datetimes are converted; naive ones are taken as local time."""
    return timestamp.astimezone(timezone.utc)


def _row_to_entry(row):
    timestamp = datetime.strptime(row["timestamp"], TIMESTAMP_FORMAT)
    return HistoryEntry(
        id=row["id"],
        expression=row["expression"],
        result=row["result"],
        memo=row["memo"] or "",
        timestamp=timestamp.replace(tzinfo=timezone.utc),
    )


class Database:
    def __init__(self, db_path=config.DB_PATH):
        self.db_path = db_path
        self.init_database()

    def get_connection(self):
        """Create and return a database connection"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def connection(self):
        """Yield a connection, commit on success and always close it.

        Nothing is committed if the block raises. Any sqlite3 error surfaces
        as PersistenceFailure.
        """
        conn = None
        try:
            conn = self.get_connection()
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            if conn is not None:
                conn.rollback()
            raise PersistenceFailure(f"{self.db_path}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def init_database(self):
        """Create the data directory and tables"""
        directory = os.path.dirname(self.db_path)
        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                raise PersistenceFailure(f"{self.db_path}: {e}") from e

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS history_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    expression TEXT NOT NULL,
                    result TEXT NOT NULL,
                    memo TEXT NOT NULL DEFAULT '',
                    timestamp TEXT NOT NULL
                )
            ''')
            cursor.execute(
                'CREATE INDEX IF NOT EXISTS idx_history_timestamp ON history_entries(timestamp)'
            )

            # Migration: databases created before memos existed
            cursor.execute("PRAGMA table_info(history_entries)")
            columns = [column[1] for column in cursor.fetchall()]
            if 'memo' not in columns:
                cursor.execute("ALTER TABLE history_entries ADD COLUMN memo TEXT NOT NULL DEFAULT ''")
                logger.info("Database migrated: added memo column to history_entries")

    def record_calculation(self, expression, result, keep=None, timestamp=None):
        """Store a calculation and, if keep is given, prune to the newest `keep` entries.

        Insert and prune run in one transaction: if pruning fails the new row
        is not kept either.
        """
        timestamp = _utcnow() if timestamp is None else _to_utc(timestamp)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO history_entries (expression, result, timestamp)
                VALUES (?, ?, ?)
            ''', (expression, result, timestamp.strftime(TIMESTAMP_FORMAT)))
            entry_id = cursor.lastrowid
            if keep is not None:
                self._prune(conn, keep)
        return HistoryEntry(id=entry_id, expression=expression, result=result,
                            timestamp=timestamp)

    def _prune(self, conn, keep):
        cursor = conn.execute('''
            DELETE FROM history_entries WHERE id NOT IN (
                SELECT id FROM history_entries
                ORDER BY timestamp DESC, id DESC LIMIT ?
            )
        ''', (keep,))
        return cursor.rowcount

    def get_entries(self):
        """Return entries newest first"""
        with self.connection() as conn:
            rows = conn.execute(
                'SELECT * FROM history_entries ORDER BY timestamp DESC, id DESC'
            ).fetchall()
        return [_row_to_entry(row) for row in rows]

    def get_entry(self, entry_id):
        with self.connection() as conn:
            row = conn.execute(
                'SELECT * FROM history_entries WHERE id = ?', (entry_id,)
            ).fetchone()
        return _row_to_entry(row) if row else None

    def delete_entry(self, entry_id):
        """Delete an entry by id. Returns False if it was already gone."""
        with self.connection() as conn:
            cursor = conn.execute('DELETE FROM history_entries WHERE id = ?', (entry_id,))
            return cursor.rowcount > 0

    def update_memo(self, entry_id, memo):
        """Set the memo of one entry. Returns False if the id is unknown."""
        with self.connection() as conn:
            cursor = conn.execute(
                'UPDATE history_entries SET memo = ? WHERE id = ?', (memo, entry_id)
            )
            return cursor.rowcount > 0

    def delete_oldest_beyond(self, limit):
        """Keep the newest `limit` entries and delete the rest. Returns rows removed."""
        with self.connection() as conn:
            return self._prune(conn, limit)

    def save(self):
        """Flush pending writes. Every method commits before returning, so nothing is pending."""
