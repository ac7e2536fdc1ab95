"""
SQLite storage handle and simple migration system.

The ``Database`` class owns the single connection used by the
application.  ``create_app`` constructs it, the startup hook calls
``connect`` (which also applies pending migrations) and the shutdown
hook calls ``close``.  Routes receive the handle through the
``get_db`` dependency and pass it to the services explicitly; there is
no module‑level connection.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from fastapi import Request

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

# Append new migrations with an incremented version number.
MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'student'
                CHECK (role IN ('student', 'staff', 'admin')),
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            type TEXT NOT NULL CHECK (type IN ('lost', 'found')),
            name TEXT,
            category TEXT,
            color TEXT,
            date TEXT,
            location TEXT,
            description TEXT,
            image_url TEXT,
            status TEXT NOT NULL DEFAULT 'open'
                CHECK (status IN ('open', 'matched', 'returned')),
            posted_by INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            FOREIGN KEY(posted_by) REFERENCES users(id)
        );

        CREATE INDEX IF NOT EXISTS idx_items_type_status ON items(type, status);
        CREATE INDEX IF NOT EXISTS idx_items_created_at ON items(created_at);

        CREATE TABLE IF NOT EXISTS pickups (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            item_id INTEGER NOT NULL,
            requester_id INTEGER NOT NULL,
            owner_id INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'accepted', 'completed')),
            meeting_spot TEXT,
            meeting_time TEXT,
            created_at TEXT NOT NULL,
            FOREIGN KEY(item_id) REFERENCES items(id),
            FOREIGN KEY(requester_id) REFERENCES users(id),
            FOREIGN KEY(owner_id) REFERENCES users(id)
        );

        CREATE INDEX IF NOT EXISTS idx_pickups_requester ON pickups(requester_id);
        CREATE INDEX IF NOT EXISTS idx_pickups_owner ON pickups(owner_id);
        """,
    ),
]


class Database:
    """Explicitly managed SQLite connection.

    Parameters
    ----------
    url : str
        Path to the database file, or ``":memory:"`` for a private
        in‑memory database (used by the tests).  Relative paths are
        resolved against the current working directory.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def path(self) -> str:
        if self.url == MEMORY or os.path.isabs(self.url):
            return self.url
        return os.path.abspath(self.url)

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the connection and apply pending migrations."""
        if self._conn is not None:
            return
        # The connection is created on the startup thread but used from
        # the event loop thread, hence check_same_thread=False.
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        # SQLite ignores REFERENCES clauses unless enabled per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        self._conn = conn
        logger.info("Opened database %s", self.path)
        self.migrate()

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Closed database %s", self.path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor; commit on success, roll back on any error.

        All statements executed through the cursor form a single
        transaction.
        """
        conn = self.connection
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            cursor.close()

    def migrate(self) -> None:
        """Apply migrations that have not been recorded yet."""
        conn = self.connection
        conn.execute(
            "CREATE TABLE IF NOT EXISTS migrations ("
            "version INTEGER PRIMARY KEY, applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current = row["version"] or 0
        for version, script in MIGRATIONS:
            if version <= current:
                continue
            logger.info("Applying migration %s", version)
            conn.executescript(script)
            conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            conn.commit()

    def schema_version(self) -> int:
        row = self.connection.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        return row["version"] or 0


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's database handle."""
    return request.app.state.db
