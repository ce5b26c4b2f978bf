"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and helpers for the timestamp format shared by every
table.

Timestamps are stored as naive UTC strings of the form
``YYYY-MM-DDTHH:MM:SS``.  Because the format is fixed width, lexical
comparison in SQL equals chronological comparison, which the venue
overlap query relies on.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .config import settings

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

_NOW_SQL = "(strftime('%Y-%m-%dT%H:%M:%S', 'now'))"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: accounts, catalogue and bookings
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            phone TEXT,
            created_at TEXT NOT NULL DEFAULT {_NOW_SQL}
        );

        CREATE TABLE IF NOT EXISTS organizers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            phone TEXT,
            created_at TEXT NOT NULL DEFAULT {_NOW_SQL}
        );

        CREATE TABLE IF NOT EXISTS venues (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            address TEXT,
            city TEXT,
            state TEXT,
            zip_code TEXT,
            country TEXT NOT NULL DEFAULT 'Bangladesh',
            latitude REAL,
            longitude REAL,
            capacity INTEGER,
            area REAL,
            venue_type TEXT,
            price_per_day REAL NOT NULL,
            minimum_days INTEGER NOT NULL DEFAULT 1,
            security_deposit REAL,
            facilities TEXT NOT NULL DEFAULT '[]',
            amenities TEXT NOT NULL DEFAULT '[]',
            images TEXT NOT NULL DEFAULT '[]',
            catering_allowed INTEGER NOT NULL DEFAULT 1,
            decoration_allowed INTEGER NOT NULL DEFAULT 1,
            alcohol_allowed INTEGER NOT NULL DEFAULT 0,
            smoking_allowed INTEGER NOT NULL DEFAULT 0,
            pet_friendly INTEGER NOT NULL DEFAULT 0,
            contact_person TEXT,
            contact_phone TEXT,
            contact_email TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            rating REAL,
            total_reviews INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT {_NOW_SQL},
            updated_at TEXT NOT NULL DEFAULT {_NOW_SQL}
        );

        CREATE TABLE IF NOT EXISTS meals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT,
            type TEXT NOT NULL,
            cuisine TEXT,
            serving_style TEXT,
            price_per_person REAL NOT NULL,
            minimum_guests INTEGER NOT NULL DEFAULT 1,
            special_dietary TEXT NOT NULL DEFAULT '[]',
            beverages TEXT NOT NULL DEFAULT '[]',
            images TEXT NOT NULL DEFAULT '[]',
            staff_included INTEGER NOT NULL DEFAULT 0,
            equipment_included INTEGER NOT NULL DEFAULT 0,
            is_active INTEGER NOT NULL DEFAULT 1,
            is_popular INTEGER NOT NULL DEFAULT 0,
            rating REAL,
            total_reviews INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT {_NOW_SQL},
            updated_at TEXT NOT NULL DEFAULT {_NOW_SQL}
        );

        CREATE TABLE IF NOT EXISTS events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            venue_id INTEGER NOT NULL,
            meal_id INTEGER,
            event_type TEXT NOT NULL,
            people_count INTEGER NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            total_cost REAL NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            created_at TEXT NOT NULL DEFAULT {_NOW_SQL},
            updated_at TEXT NOT NULL DEFAULT {_NOW_SQL},
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
            FOREIGN KEY(venue_id) REFERENCES venues(id) ON DELETE RESTRICT,
            FOREIGN KEY(meal_id) REFERENCES meals(id) ON DELETE RESTRICT
        );

        CREATE TABLE IF NOT EXISTS payments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            event_id INTEGER NOT NULL,
            amount REAL NOT NULL,
            method TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            transaction_id TEXT,
            created_at TEXT NOT NULL DEFAULT {_NOW_SQL},
            updated_at TEXT NOT NULL DEFAULT {_NOW_SQL},
            FOREIGN KEY(event_id) REFERENCES events(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: lookup indices for the availability check and histories
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_events_venue_time ON events(venue_id, start_time, end_time);
        CREATE INDEX IF NOT EXISTS idx_events_user_id ON events(user_id);
        CREATE INDEX IF NOT EXISTS idx_events_created_at ON events(created_at);
        CREATE INDEX IF NOT EXISTS idx_payments_event_id ON payments(event_id);
        CREATE INDEX IF NOT EXISTS idx_payments_transaction_id ON payments(transaction_id);
        """,
    ),
    # Migration 3: venue names are unique regardless of case
    (
        3,
        """
        CREATE UNIQUE INDEX IF NOT EXISTS idx_venues_name_nocase ON venues(name COLLATE NOCASE);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name and
    enables foreign key enforcement, which SQLite leaves off by
    default.  Deleting a venue or meal that is still referenced by an
    event therefore fails with ``sqlite3.IntegrityError``.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def as_naive_utc(value: datetime) -> datetime:
    """Convert aware datetimes to naive UTC; naive ones are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


def to_db_time(value: datetime) -> str:
    """Normalise a datetime to the stored naive-UTC string form."""
    return as_naive_utc(value).strftime(TIMESTAMP_FORMAT)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def check_connection() -> bool:
    """Return ``True`` when a trivial query succeeds against the database."""
    try:
        with get_cursor() as cursor:
            cursor.execute("SELECT 1").fetchone()
        return True
    except sqlite3.Error as exc:
        logger.error("Database connectivity check failed: %s", exc)
        return False


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  New migrations must be appended with an
    incremented version number.
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
