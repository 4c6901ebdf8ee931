"""
Database connection management for the API.

Provides a get_db() dependency that opens a per-request SQLite connection and
closes it after the response is sent.  The database path is resolved once at
startup from the APP_DB_PATH environment variable (default: insights.sqlite);
create_app(db_path=...) overrides it.
"""

import logging
import os
import sqlite3
from collections.abc import Generator
from pathlib import Path

from fastapi import HTTPException

from utils.database import INSIGHTS_TABLE, get_table_count, register_functions, table_exists

logger = logging.getLogger(__name__)

_DB_PATH: Path = Path(os.getenv("APP_DB_PATH", "insights.sqlite"))


def get_db_path() -> Path:
    """Return the configured database path."""
    return _DB_PATH


def _make_conn(db_path: Path) -> sqlite3.Connection:
    """Open a read-only SQLite connection with standard pragmas and SQL functions."""
    uri = f"file:{db_path}?mode=ro"
    conn = sqlite3.connect(uri, uri=True, check_same_thread=False, timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA busy_timeout=5000")
    register_functions(conn)
    return conn


def store_revision() -> tuple[str, int]:
    """Identify the current store contents as ``(path, mtime_ns)``.

    Reseeding rewrites the file (or its WAL), so the revision changes and
    cached derivations such as distinct filter values are recomputed.
    """
    mtime = _DB_PATH.stat().st_mtime_ns if _DB_PATH.exists() else 0
    wal = _DB_PATH.with_name(_DB_PATH.name + "-wal")
    if wal.exists():
        mtime = max(mtime, wal.stat().st_mtime_ns)
    return str(_DB_PATH), mtime


def check_database() -> tuple[bool, int]:
    """Return ``(connected, record_count)`` for the health endpoint."""
    if not _DB_PATH.exists():
        return False, 0
    try:
        conn = _make_conn(_DB_PATH)
    except sqlite3.Error as e:
        logger.warning("Database connection failed: %s", e)
        return False, 0
    try:
        if not table_exists(conn, INSIGHTS_TABLE):
            return False, 0
        return True, get_table_count(conn)
    except sqlite3.Error as e:
        logger.warning("Database health query failed: %s", e)
        return False, 0
    finally:
        conn.close()


def get_db() -> Generator[sqlite3.Connection, None, None]:
    """FastAPI dependency: yield a SQLite connection, close on exit.

    Raises HTTP 503 with a friendly message if the database file is missing,
    instead of a cryptic SQLite error.

    Usage in a route::

        from api.database import get_db
        from fastapi import Depends

        @router.get("/example")
        def example(conn=Depends(get_db)):
            ...
    """
    if not _DB_PATH.exists():
        raise HTTPException(
            status_code=503,
            detail=(
                f"Database not found at '{_DB_PATH}'. "
                "Run 'python build_insights_db.py' to seed it."
            ),
        )
    conn = _make_conn(_DB_PATH)
    try:
        yield conn
    finally:
        conn.close()
