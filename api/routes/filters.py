"""
GET /api/filters endpoint.

Returns the sorted distinct values of every filterable field so clients can
populate their dropdowns.  Results are cached per store revision, so a reseed
is picked up on the next request after the file changes.
"""

import sqlite3

from fastapi import APIRouter, Depends

from api.database import get_db, store_revision
from api.models import STORE_ERROR_RESPONSE, FiltersResponse
from utils.cache import TTLCache
from utils.config import AppConfig
from utils.store import distinct_filter_values

router = APIRouter(prefix="/filters", tags=["filters"])

_filters_cache: TTLCache = TTLCache(
    maxsize=8, ttl_seconds=AppConfig.from_env().filters_cache_ttl,
)


def cached_filter_options(conn: sqlite3.Connection) -> dict:
    """Distinct filter values for the current store revision, cached."""
    return _filters_cache.get_or_compute(
        ("filters", store_revision()), lambda: distinct_filter_values(conn),
    )


@router.get(
    "",
    response_model=FiltersResponse,
    summary="Distinct values for every filter dropdown",
    responses={503: STORE_ERROR_RESPONSE},
)
def list_filters(conn: sqlite3.Connection = Depends(get_db)) -> dict:
    """Return distinct non-blank values per filter field.

    Years sort numerically; text values sort case-insensitively.
    """
    return {"success": True, "filters": cached_filter_options(conn)}
