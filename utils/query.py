"""Shared SQL query builder utilities for the insights API.

Provides the WHERE, ORDER BY and LIMIT/OFFSET construction used by
api/routes/data.py, api/routes/charts.py and api/routes/frontend.py.
"""

from typing import Any

from utils.config import SEARCH_FIELDS, YEAR_FIELDS
from utils.filters import FilterState
from utils.strings import fold_text

_ALLOWED_SORTS_DEFAULT = {
    "id", "added", "published", "end_year", "start_year",
    "intensity", "likelihood", "relevance", "impact",
}


def build_where_clause(filters: FilterState | None) -> tuple[str, list[Any]]:
    """Build a SQL WHERE clause from a FilterState.

    Year filters bind their numeric value (non-numeric selections are
    dropped).  Text filters are exact matches.  The search term becomes an
    OR of literal substring matches across SEARCH_FIELDS, both sides
    case-folded by ``py_casefold`` (see ``utils.database.register_functions``),
    so the connection must have that function registered.

    Returns:
        Tuple of (where_clause_string, params_list). The where_clause_string
        starts with "WHERE " if any conditions exist, or is "" if none.
    """
    if filters is None:
        return "", []

    conditions: list[str] = []
    params: list[Any] = []

    for name, value in filters.selections().items():
        if name in YEAR_FIELDS:
            year = filters.year_value(name)
            if year is None:
                continue
            conditions.append(f"{name} = ?")
            params.append(year)
        else:
            conditions.append(f"{name} = ?")
            params.append(value)

    term = filters.search_term
    if term:
        needle = fold_text(term)
        matches = " OR ".join(
            f"instr(py_casefold({col}), ?) > 0" for col in SEARCH_FIELDS
        )
        conditions.append(f"({matches})")
        params.extend([needle] * len(SEARCH_FIELDS))

    where = "WHERE " + " AND ".join(conditions) if conditions else ""
    return where, params


def build_order_clause(
    sort_by: str = "added",
    sort_dir: str = "desc",
    allowed_sorts: set[str] | None = None,
    default_sort: str = "added",
) -> str:
    """Build a safe SQL ORDER BY clause with ``id`` as the tie-breaker.

    Returns:
        ORDER BY clause string, e.g. "ORDER BY added DESC, id ASC".
    """
    if allowed_sorts is None:
        allowed_sorts = _ALLOWED_SORTS_DEFAULT
    col = sort_by if sort_by in allowed_sorts else default_sort
    direction = "DESC" if sort_dir.lower() == "desc" else "ASC"
    if col == "id":
        return f"ORDER BY id {direction}"
    return f"ORDER BY {col} {direction}, id ASC"


def build_limit_clause(limit: int | None, skip: int | None) -> tuple[str, list[Any]]:
    """Build LIMIT/OFFSET from optional skip/limit.

    ``None``, zero or negative ``limit`` means no limit; ``None`` or negative
    ``skip`` means no offset.
    """
    has_limit = limit is not None and limit > 0
    has_skip = skip is not None and skip > 0
    if not has_limit and not has_skip:
        return "", []
    # SQLite needs a LIMIT before OFFSET; -1 means unbounded.
    return "LIMIT ? OFFSET ?", [limit if has_limit else -1, skip if has_skip else 0]
