"""GET /api/stats endpoint.

Aggregate statistics: record total, mean intensity/likelihood/relevance and the
top-10 sector and region distributions.  Accepts the same filters as
/api/data; with none given the whole store is summarised.
"""

import sqlite3

from fastapi import APIRouter, Depends

from api.database import get_db
from api.models import STORE_ERROR_RESPONSE, VALIDATION_ERROR_RESPONSE, StatsResponse
from api.params import filter_params
from utils.filters import FilterState
from utils.store import collect_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get(
    "",
    response_model=StatsResponse,
    summary="Aggregate statistics over the insights store",
    responses={422: VALIDATION_ERROR_RESPONSE, 503: STORE_ERROR_RESPONSE},
)
def get_stats(
    filters: FilterState = Depends(filter_params),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict:
    """Return totals, score averages and top sector/region counts."""
    return {"success": True, **collect_stats(conn, filters)}
