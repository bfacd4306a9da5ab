"""
db.py
SQLite helpers + initialization (creates DB/tables).
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager

import config

logger = logging.getLogger(__name__)


@contextmanager
def get_conn():
    # One connection per call; safe to use from the loader's worker threads
    conn = sqlite3.connect(config.DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def execute_rowcount(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.rowcount


def fetch_one(sql: str, params: tuple = ()):
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def fetch_all(sql: str, params: tuple = ()) -> list[sqlite3.Row]:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchall()


def _create_tables() -> None:
    execute(
        """
        CREATE TABLE IF NOT EXISTS members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            membership_type TEXT NOT NULL CHECK(membership_type IN ('Annual','Monthly','Walk-in')),
            membership_expiry_date TEXT NOT NULL,
            membership_renewal TEXT NOT NULL,
            annual_membership TEXT NOT NULL DEFAULT 'No' CHECK(annual_membership IN ('Yes','No')),
            notes1 TEXT NOT NULL DEFAULT '',
            notes2 TEXT NOT NULL DEFAULT '',
            notes3 TEXT NOT NULL DEFAULT '',
            length INTEGER NOT NULL DEFAULT 1 CHECK(length >= 1),
            created_at TEXT NOT NULL
        )
        """
    )

    # No foreign key: payments may outlive their member ("Unknown Member")
    execute(
        """
        CREATE TABLE IF NOT EXISTS payments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            member_id INTEGER NOT NULL,
            amount REAL NOT NULL CHECK(amount >= 0),
            date TEXT NOT NULL,
            type TEXT NOT NULL CHECK(type IN ('Annual','Monthly','Walk-in')),
            expiry TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
        """
    )


def init_db() -> None:
    """
    Initialize the database (idempotent).
    """
    _create_tables()
    logger.info("Database ready at %s", config.DB_FILE)
