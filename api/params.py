"""
Shared query-parameter dependencies for the insights routes.

Every filter is accepted as a plain string so that malformed values degrade to
"filter not applied" instead of a 422: a non-numeric year is ignored and a
blank value means "All".
"""

from fastapi import Query

from utils.filters import FilterState
from utils.strings import to_int_or_null


def filter_params(
    end_year: str | None = Query(None, description="Exact end year, e.g. 2027"),
    start_year: str | None = Query(None, description="Exact start year, e.g. 2017"),
    topic: str | None = Query(None, description="Exact topic"),
    sector: str | None = Query(None, description="Exact sector"),
    region: str | None = Query(None, description="Exact region"),
    pestle: str | None = Query(None, description="Exact PESTLE category"),
    source: str | None = Query(None, description="Exact source"),
    swot: str | None = Query(None, description="Exact SWOT category"),
    country: str | None = Query(None, description="Exact country"),
    city: str | None = Query(None, description="Exact city"),
    search: str | None = Query(
        None,
        description=(
            "Case-insensitive literal substring matched against title, insight, "
            "topic, sector, region, country and source"
        ),
    ),
) -> FilterState:
    """FastAPI dependency: collect the filter query params into a FilterState."""
    return FilterState.from_mapping({
        "end_year": end_year,
        "start_year": start_year,
        "topic": topic,
        "sector": sector,
        "region": region,
        "pestle": pestle,
        "source": source,
        "swot": swot,
        "country": country,
        "city": city,
        "search": search,
    })


def paging_params(
    limit: str | None = Query(None, description="Maximum records to return; 0 or blank means no limit"),
    skip: str | None = Query(None, description="Number of records to skip"),
) -> tuple[int | None, int | None]:
    """FastAPI dependency: coerce limit/skip, dropping non-numeric values."""
    return to_int_or_null(limit), to_int_or_null(skip)
