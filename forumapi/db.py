"""SQLite connection and schema for the forum database."""

from __future__ import annotations

import sqlite3

from .logger import get_logger

DEFAULT_PATH = "../forum.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS discussions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    user_id INTEGER NOT NULL,
    create_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    discussion_id INTEGER NOT NULL,
    content TEXT NOT NULL,
    create_at TEXT NOT NULL
);
"""


def sqlite_connection(path=DEFAULT_PATH) -> sqlite3.Connection:
    """Open the database at ``path`` and check that it answers."""
    log = get_logger()
    try:
        conn = sqlite3.connect(path, check_same_thread=False)
    except sqlite3.Error as exc:
        log.critical("Ошибка подключения к базе данных", extra={"error": str(exc)})
        raise
    try:
        conn.execute("SELECT 1").fetchone()
    except sqlite3.Error as exc:
        log.critical("Ошибка отключка от базы данных", extra={"error": str(exc)})
        conn.close()
        raise
    log.info("Успешное подключение к SQLite")
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the forum tables if they do not exist yet."""
    with conn:
        conn.executescript(_SCHEMA)