"""
SQLite storage and a simple migration system.

``Database`` wraps the path of a SQLite file.  Every operation opens
its own connection (``connect``/``cursor``), so requests share no
in-process state; the store's own constraints (``UNIQUE``, ``CHECK``)
are the only serialization points.  ``init`` applies the versioned
schema migrations and is called once at application startup.

Ordered string lists (skills, availability) are stored as JSON text;
``dump_list``/``load_list`` convert between the two forms.
"""

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .config import Settings

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            name TEXT NOT NULL DEFAULT '',
            location TEXT NOT NULL DEFAULT '',
            profile_photo TEXT,
            skills_offered TEXT NOT NULL DEFAULT '[]',
            skills_wanted TEXT NOT NULL DEFAULT '[]',
            availability TEXT NOT NULL DEFAULT '[]',
            is_public INTEGER NOT NULL DEFAULT 1,
            is_admin INTEGER NOT NULL DEFAULT 0,
            is_banned INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS swap_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            requester_id INTEGER NOT NULL,
            responder_id INTEGER NOT NULL,
            skill_offered_by_requester TEXT NOT NULL,
            skill_wanted_by_requester TEXT NOT NULL,
            message TEXT NOT NULL DEFAULT '',
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'accepted', 'rejected', 'cancelled')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(requester_id) REFERENCES users(id),
            FOREIGN KEY(responder_id) REFERENCES users(id)
        );

        -- swap_request_id is UNIQUE: one feedback record per swap.
        CREATE TABLE IF NOT EXISTS feedback (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            swap_request_id INTEGER NOT NULL UNIQUE,
            giver_id INTEGER NOT NULL,
            receiver_id INTEGER NOT NULL,
            rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
            comment TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(swap_request_id) REFERENCES swap_requests(id),
            FOREIGN KEY(giver_id) REFERENCES users(id),
            FOREIGN KEY(receiver_id) REFERENCES users(id)
        );
        """,
    ),
    # Migration 2: indices for the participant and receiver lookups
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_swap_requests_requester ON swap_requests(requester_id);
        CREATE INDEX IF NOT EXISTS idx_swap_requests_responder ON swap_requests(responder_id);
        CREATE INDEX IF NOT EXISTS idx_feedback_receiver ON feedback(receiver_id);
        """,
    ),
]


class Database:
    """Handle on the SQLite file backing the application."""

    def __init__(self, path: str) -> None:
        self.path = path

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from ``settings.database_url``.

        Absolute paths are used as is; relative paths are resolved
        against the ``skill_swap_api`` package directory.
        """
        db_url = settings.database_url
        if os.path.isabs(db_url):
            return cls(db_url)
        base_dir = Path(__file__).resolve().parent.parent.parent
        return cls(str((base_dir / db_url).resolve()))

    def connect(self) -> sqlite3.Connection:
        """Open a new connection with name-addressable rows and FK checks."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success, roll back on error, always close."""
        conn = self.connect()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init(self) -> None:
        """Create the database file if needed and apply pending migrations."""
        with self.cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    cursor.executescript(sql)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    logger.info("Applied migration %s to %s", version, self.path)
                    current_version = version


def dump_list(values: Optional[Iterable[str]]) -> str:
    return json.dumps(list(values or []))


def load_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return list(json.loads(raw))
