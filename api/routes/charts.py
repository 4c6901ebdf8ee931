"""
Chart endpoints.

    GET /api/charts/projections          → every dashboard series as JSON
    GET /api/charts/year-intensity.svg   → average intensity per year (SVG)
    GET /api/charts/distribution.svg     → record count per field value (SVG)

All three accept the /api/data filters and compute over the matching records.
An empty result set yields empty series and an empty SVG document body.
"""

import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from api.database import get_db
from api.models import (
    STORE_ERROR_RESPONSE,
    VALIDATION_ERROR_RESPONSE,
    ErrorResponse,
    ProjectionsResponse,
)
from api.params import filter_params
from dashboard.projections import build_projections
from dashboard.svg_bar import render_year_bar_chart
from dashboard.svg_pie import render_distribution_chart
from utils.config import TEXT_FIELDS, YEAR_FIELDS
from utils.filters import FilterState
from utils.store import fetch_insights

router = APIRouter(prefix="/charts", tags=["charts"])

SVG_MEDIA_TYPE = "image/svg+xml"

# Long free-text columns make meaningless slices.
_DISTRIBUTION_FIELDS = sorted(
    (set(TEXT_FIELDS) | set(YEAR_FIELDS)) - {"insight", "url", "title", "added", "published"}
)


@router.get(
    "/projections",
    response_model=ProjectionsResponse,
    summary="Chart-ready series for the dashboard",
    responses={422: VALIDATION_ERROR_RESPONSE, 503: STORE_ERROR_RESPONSE},
)
def projections(
    filters: FilterState = Depends(filter_params),
    conn: sqlite3.Connection = Depends(get_db),
) -> dict:
    """Return KPIs, trends, sector/topic/region/PESTLE/country series and year bars."""
    records = fetch_insights(conn, filters)
    return {"success": True, "count": len(records), "projections": build_projections(records)}


@router.get(
    "/year-intensity.svg",
    response_class=Response,
    summary="SVG bar chart of average intensity per year",
    responses={
        200: {"content": {SVG_MEDIA_TYPE: {}}},
        422: VALIDATION_ERROR_RESPONSE,
        503: STORE_ERROR_RESPONSE,
    },
)
def year_intensity_svg(
    width: int = Query(600, ge=200, le=2000, description="Chart width in px"),
    height: int = Query(350, ge=150, le=1200, description="Chart height in px"),
    filters: FilterState = Depends(filter_params),
    conn: sqlite3.Connection = Depends(get_db),
) -> Response:
    records = fetch_insights(conn, filters)
    svg = render_year_bar_chart(records, width=width, height=height)
    return Response(content=svg, media_type=SVG_MEDIA_TYPE)


@router.get(
    "/distribution.svg",
    response_class=Response,
    summary="SVG pie/donut chart of record counts per field value",
    responses={
        200: {"content": {SVG_MEDIA_TYPE: {}}},
        400: {"model": ErrorResponse, "description": "Unsupported field"},
        422: VALIDATION_ERROR_RESPONSE,
        503: STORE_ERROR_RESPONSE,
    },
)
def distribution_svg(
    field: str = Query("sector", description=f"One of: {', '.join(_DISTRIBUTION_FIELDS)}"),
    limit: int = Query(8, ge=1, le=50, description="Number of slices"),
    doughnut: bool = Query(True, description="Render a donut with a centre total"),
    width: int = Query(400, ge=150, le=2000, description="Chart width in px"),
    height: int = Query(300, ge=150, le=2000, description="Chart height in px"),
    filters: FilterState = Depends(filter_params),
    conn: sqlite3.Connection = Depends(get_db),
) -> Response:
    if field not in _DISTRIBUTION_FIELDS:
        raise HTTPException(
            status_code=400,
            detail=f"field must be one of: {_DISTRIBUTION_FIELDS}",
        )
    records = fetch_insights(conn, filters)
    svg = render_distribution_chart(
        records, field=field, limit=limit, doughnut=doughnut, width=width, height=height,
    )
    return Response(content=svg, media_type=SVG_MEDIA_TYPE)
