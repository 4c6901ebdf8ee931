"""Database utilities for the insights store.

Provides reusable functions for:
- Connection pragmas and custom SQL functions
- Batch insert operations
- Small introspection helpers used by the API health check
"""

import sqlite3
from typing import Any, Callable, Dict, List

from utils.strings import fold_text

INSIGHTS_TABLE = "insights"


def init_pragmas(conn: sqlite3.Connection) -> None:
    """Initialize SQLite performance and reliability pragmas.

    - WAL mode so the API can read while the seed script writes
    - NORMAL synchronous mode for speed without data loss
    - Memory temp store for sorting/grouping
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA temp_store=MEMORY")


def register_functions(conn: sqlite3.Connection) -> None:
    """Register the SQL functions the query builders emit.

    - ``py_casefold(text)``: Unicode case folding for the free-text search
    """
    conn.create_function("py_casefold", 1, fold_text, deterministic=True)


def batch_insert(conn: sqlite3.Connection, query: str, rows: List[tuple],
                 batch_size: int = 1000,
                 on_batch: Callable[[int, int], None] | None = None) -> int:
    """Execute batch insert operations, committing after each batch.

    Args:
        conn: SQLite connection
        query: SQL INSERT query with ? placeholders
        rows: List of tuples to insert
        batch_size: Number of rows per batch (default: 1000)
        on_batch: Optional callback ``(inserted_so_far, total)`` after each batch

    Returns:
        Total number of rows inserted
    """
    total_inserted = 0
    for i in range(0, len(rows), batch_size):
        batch = rows[i:i + batch_size]
        conn.executemany(query, batch)
        conn.commit()
        total_inserted += len(batch)
        if on_batch is not None:
            on_batch(total_inserted, len(rows))
    return total_inserted


def get_table_count(conn: sqlite3.Connection, table: str = INSIGHTS_TABLE) -> int:
    """Get row count for a table."""
    result = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
    return result[0] if result else 0


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    """Check if a table exists in the database."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table,)
    )
    return cursor.fetchone() is not None


def query_to_dicts(conn: sqlite3.Connection, query: str,
                   params: tuple | list = ()) -> List[Dict[str, Any]]:
    """Execute query and return results as list of dicts.

    Works with or without ``sqlite3.Row`` as the row factory.
    """
    cursor = conn.execute(query, params)
    names = [d[0] for d in cursor.description]
    return [dict(zip(names, row)) for row in cursor.fetchall()]
