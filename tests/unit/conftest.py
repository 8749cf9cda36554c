"""
Shared fixtures for unit tests.
"""

import sqlite3

import pytest
from ff_query import Driver


@pytest.fixture()
def sqlite_path(tmp_path):
    """Create a database file with a small users table."""
    db_path = tmp_path / "app.db"
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                age INTEGER,
                active INTEGER DEFAULT 1,
                avatar BLOB
            );
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                user_id INTEGER NOT NULL,
                total REAL NOT NULL
            );
            INSERT INTO users (id, name, age, active) VALUES
                (1, 'Ada', 36, 1),
                (2, 'Bo', 30, 1),
                (3, 'Cy', 17, 0);
            INSERT INTO orders (id, user_id, total) VALUES
                (1, 1, 120.0),
                (2, 1, 40.0),
                (3, 2, 15.5);
            """
        )
        conn.commit()
    finally:
        conn.close()
    return str(db_path)


@pytest.fixture()
def file_db(sqlite_path):
    """Driver backend opened on the sample database file."""
    db = Driver.file(sqlite_path)
    yield db
    db.close()
