import os
import sqlite3
import logging
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)

# Default database file. LIBRARY_DB_FILE is read at call time so tests can point
# each run at its own file.
DATABASE_FILE = settings.database_file


def resolve_db_file(db_file: Optional[str] = None) -> str:
    return db_file or os.environ.get("LIBRARY_DB_FILE") or DATABASE_FILE


def get_db_connection(db_file: Optional[str] = None) -> sqlite3.Connection:
    """Establishes a connection to the SQLite database."""
    conn = sqlite3.connect(resolve_db_file(db_file))
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(db_file: Optional[str] = None) -> None:
    """Creates the users and contact_messages tables if they don't exist.

    The CHECK constraints repeat the validation rules so rows written around the
    API still obey them.
    """
    conn = get_db_connection(db_file)
    try:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                full_name TEXT NOT NULL CHECK(length(full_name) BETWEEN 2 AND 50),
                email TEXT UNIQUE NOT NULL,
                phone TEXT NOT NULL CHECK(length(phone) = 10),
                role TEXT NOT NULL CHECK(role IN ('Admin', 'User', 'Guest')),
                password TEXT NOT NULL CHECK(length(password) >= 8)
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS contact_messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                subject TEXT NOT NULL,
                message TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
    finally:
        conn.close()


def initialize_database(db_file: Optional[str] = None) -> str:
    """Initializes the database and returns the file it lives in."""
    path = resolve_db_file(db_file)
    create_tables(path)
    logger.info(f"Database ready: {path}")
    return path
