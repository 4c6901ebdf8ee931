"""
GET /api/data endpoint.

Returns the stored insight records matching the dropdown filters and the
free-text search, most recently added first, with optional skip/limit.
"""

import logging
import sqlite3

from fastapi import APIRouter, Depends

from api.database import get_db
from api.models import STORE_ERROR_RESPONSE, VALIDATION_ERROR_RESPONSE, DataResponse
from api.params import filter_params, paging_params
from utils.filters import FilterState
from utils.store import fetch_insights

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["data"])


@router.get(
    "",
    response_model=DataResponse,
    summary="List insight records",
    responses={
        422: VALIDATION_ERROR_RESPONSE,
        503: STORE_ERROR_RESPONSE,
    },
)
def list_data(
    filters: FilterState = Depends(filter_params),
    paging: tuple[int | None, int | None] = Depends(paging_params),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict:
    """Return filtered insight records sorted by ``added`` descending."""
    limit, skip = paging
    records = fetch_insights(conn, filters, limit=limit, skip=skip)
    logger.debug("data query %s returned %d records", filters.to_query_params(), len(records))
    return {"success": True, "count": len(records), "data": records}
