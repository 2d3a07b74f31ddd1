"""SQLite database connection and schema management."""

from __future__ import annotations

import logging
import sqlite3

from ..common.config import Settings

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS items (
    item_id TEXT PRIMARY KEY,
    name TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL DEFAULT '',
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS price_points (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    item_id TEXT NOT NULL,
    recorded_at TEXT NOT NULL,
    price REAL NOT NULL,
    unit_price REAL NOT NULL,
    platform TEXT NOT NULL,
    is_valid INTEGER NOT NULL DEFAULT 1,
    FOREIGN KEY (item_id) REFERENCES items(item_id)
);

CREATE INDEX IF NOT EXISTS idx_price_points_item_date
    ON price_points(item_id, recorded_at);

CREATE INDEX IF NOT EXISTS idx_price_points_valid_date
    ON price_points(is_valid, recorded_at);
"""


def get_connection(
    settings: Settings | None = None,
    read_only: bool = False,
) -> sqlite3.Connection:
    """Open the price history database with the Row factory enabled.

    Read-only connections open the file in `mode=ro` and never create it;
    a missing database surfaces as `sqlite3.OperationalError`.
    """
    settings = settings or Settings()
    db_path = settings.database_abs_path

    if read_only:
        conn = sqlite3.connect(f"{db_path.as_uri()}?mode=ro", uri=True)
        conn.row_factory = sqlite3.Row
        return conn

    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(settings: Settings | None = None) -> None:
    """Create the items / price_points schema if missing."""
    settings = settings or Settings()
    conn = get_connection(settings)
    try:
        conn.executescript(_SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized at %s", settings.database_abs_path)
    finally:
        conn.close()
