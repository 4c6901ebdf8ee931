"""Read queries against the insights store.

Shared by the JSON API routes and the server-rendered dashboard so both see
the same filtered record set, distinct values and statistics.
"""

import sqlite3
from typing import Any

from utils.config import FILTER_FIELDS, INSIGHT_FIELDS, NUMERIC_FIELDS
from utils.database import INSIGHTS_TABLE, query_to_dicts
from utils.filters import FilterState
from utils.query import build_limit_clause, build_order_clause, build_where_clause

# Internal bookkeeping columns are never returned to clients.
_SELECT_COLUMNS = ", ".join(("id",) + INSIGHT_FIELDS)

DISTRIBUTION_LIMIT = 10


def _and(where: str, condition: str) -> str:
    return f"{where} AND {condition}" if where else f"WHERE {condition}"


def fetch_insights(
    conn: sqlite3.Connection,
    filters: FilterState | None = None,
    limit: int | None = None,
    skip: int | None = None,
) -> list[dict[str, Any]]:
    """Return insight records matching *filters*, newest ``added`` first."""
    where, params = build_where_clause(filters)
    limit_sql, limit_params = build_limit_clause(limit, skip)
    sql = (
        f"SELECT {_SELECT_COLUMNS} FROM {INSIGHTS_TABLE} {where} "
        f"{build_order_clause('added', 'desc')} {limit_sql}"
    )
    return query_to_dicts(conn, sql, params + limit_params)


def sort_distinct(values: list[Any], numeric: bool = False) -> list[Any]:
    """Drop null/blank values and sort numerically or case-insensitively."""
    kept = [v for v in values if v is not None and v != ""]
    if numeric:
        return sorted(kept)
    return sorted((str(v) for v in kept), key=lambda s: (s.casefold(), s))


def distinct_filter_values(conn: sqlite3.Connection) -> dict[str, list[Any]]:
    """Return the sorted distinct observed values of every filter field."""
    options: dict[str, list[Any]] = {}
    for field in FILTER_FIELDS:
        rows = conn.execute(
            f"SELECT DISTINCT {field} FROM {INSIGHTS_TABLE} "
            f"WHERE {field} IS NOT NULL AND {field} != ''"
        ).fetchall()
        options[field] = sort_distinct([r[0] for r in rows], numeric=field in NUMERIC_FIELDS)
    return options


def _distribution(
    conn: sqlite3.Connection, field: str, where: str, params: list[Any],
) -> list[dict[str, Any]]:
    where = _and(where, f"{field} IS NOT NULL AND {field} != ''")
    return query_to_dicts(
        conn,
        f"SELECT {field} AS name, COUNT(*) AS count FROM {INSIGHTS_TABLE} "
        f"{where} GROUP BY {field} ORDER BY count DESC, name ASC LIMIT ?",
        params + [DISTRIBUTION_LIMIT],
    )


def collect_stats(conn: sqlite3.Connection, filters: FilterState | None = None) -> dict[str, Any]:
    """Aggregate statistics: totals/averages plus top sectors and regions.

    Averages ignore missing scores and are ``None`` when no record has one.
    """
    where, params = build_where_clause(filters)
    row = conn.execute(
        f"SELECT COUNT(*), AVG(intensity), AVG(likelihood), AVG(relevance) "
        f"FROM {INSIGHTS_TABLE} {where}",
        params,
    ).fetchone()
    return {
        "stats": {
            "total_records": row[0],
            "avg_intensity": row[1],
            "avg_likelihood": row[2],
            "avg_relevance": row[3],
        },
        "sector_distribution": _distribution(conn, "sector", where, params),
        "region_distribution": _distribution(conn, "region", where, params),
    }
