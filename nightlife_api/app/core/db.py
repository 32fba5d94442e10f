"""
SQLite database integration and simple migration system.

This module provides the connection lifecycle used by every service:

* ``connection`` acquires one of ``settings.db_pool_size`` slots, opens a
  SQLite connection and always closes it and releases the slot on exit.
* ``transaction`` wraps a connection in an explicit ``BEGIN`` /
  ``COMMIT`` and rolls back on any error.  ``sqlite3.Error`` raised inside
  the block is re-raised as :class:`StorageError`.
* ``init_db`` applies pending migrations on application start.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import StorageError


logger = logging.getLogger(__name__)

# Bounded set of connection slots shared by all requests.
_pool_slots = threading.BoundedSemaphore(settings.db_pool_size)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            user_id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password_hash TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS venues (
            venue_id INTEGER PRIMARY KEY AUTOINCREMENT,
            venue_yelp_id TEXT NOT NULL UNIQUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS users_venues (
            user_id INTEGER NOT NULL,
            venue_id INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(user_id, venue_id),
            FOREIGN KEY(user_id) REFERENCES users(user_id),
            FOREIGN KEY(venue_id) REFERENCES venues(venue_id)
        );
        """,
    ),
    # Migration 2: speed up attendee counts per venue
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_users_venues_venue_id ON users_venues(venue_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # nightlife_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection runs in autocommit mode (``isolation_level=None``) so
    that transactions are only ever opened explicitly by
    :func:`transaction`.  Rows are returned as ``sqlite3.Row`` and
    foreign key constraints are enforced.
    """
    conn = sqlite3.connect(get_database_path(), isolation_level=None)
    conn.row_factory = sqlite3.Row
    # Foreign key support is disabled by default in SQLite and must be
    # turned on per connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def connection() -> Iterator[sqlite3.Connection]:
    """Acquire a pool slot and yield a connection, releasing both on exit."""
    _pool_slots.acquire()
    try:
        conn = get_connection()
        try:
            yield conn
        finally:
            conn.close()
    finally:
        _pool_slots.release()


@contextmanager
def transaction(immediate: bool = True) -> Iterator[sqlite3.Cursor]:
    """Run the enclosed statements inside a single transaction.

    ``BEGIN IMMEDIATE`` takes the write lock up front so that two
    concurrent writers serialise instead of failing on commit.  Any
    exception rolls the transaction back; SQLite errors are re-raised as
    :class:`StorageError`, everything else propagates unchanged.
    """
    with connection() as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            yield cursor
            cursor.execute("COMMIT")
        except Exception as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            if isinstance(exc, sqlite3.Error):
                raise StorageError(str(exc)) from exc
            raise


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield an autocommit cursor for reads and one-off statements."""
    with connection() as conn:
        try:
            yield conn.cursor()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any migrations from
    ``MIGRATIONS`` with a higher version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying database migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
