"""
Pydantic response models for the insights API.

Optional fields default to None so that records with missing scores or years
serialise as ``null``.  Field() descriptions and examples feed the OpenAPI docs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ── Insight record ────────────────────────────────────────────────────────────

class InsightOut(BaseModel):
    """A single stored insight record."""
    id: int = Field(..., description="Unique row ID", examples=[17])
    end_year: int | float | None = Field(None, description="Year the insight's horizon ends", examples=[2027])
    start_year: int | float | None = Field(None, description="Year the insight's horizon starts", examples=[2017])
    intensity: float | None = Field(None, description="Intensity score", examples=[6])
    likelihood: float | None = Field(None, description="Likelihood score", examples=[3])
    relevance: float | None = Field(None, description="Relevance score", examples=[2])
    impact: float | None = Field(None, description="Impact score")
    sector: str = Field("", description="Industry sector", examples=["Energy"])
    topic: str = Field("", description="Topic keyword", examples=["oil"])
    insight: str = Field("", description="Short insight text")
    url: str = Field("", description="Link to the source article")
    region: str = Field("", description="World region", examples=["Northern America"])
    country: str = Field("", description="Country", examples=["United States of America"])
    city: str = Field("", description="City")
    pestle: str = Field("", description="PESTLE category", examples=["Industries"])
    source: str = Field("", description="Publisher of the source article", examples=["EIA"])
    swot: str = Field("", description="SWOT category")
    title: str = Field("", description="Source article title")
    added: str = Field("", description="Date the record was added", examples=["January, 20 2017 03:51:25"])
    published: str = Field("", description="Publication date of the source article")


class DataResponse(BaseModel):
    """Response body for GET /api/data."""
    success: bool = Field(True, description="Always true on a 200 response")
    count: int = Field(..., description="Number of records in this response", examples=[1000])
    data: list[InsightOut] = Field(..., description="Matching records, most recently added first")


# ── Filter options ────────────────────────────────────────────────────────────

class FiltersResponse(BaseModel):
    """Response body for GET /api/filters."""
    success: bool = Field(True, description="Always true on a 200 response")
    filters: dict[str, list[Any]] = Field(
        ..., description="Sorted distinct values per filterable field, blanks removed",
    )


# ── Statistics ────────────────────────────────────────────────────────────────

class StatsOut(BaseModel):
    """Totals and score averages over the store."""
    total_records: int = Field(..., description="Number of stored records", examples=[1000])
    avg_intensity: float | None = Field(None, description="Mean intensity of records that have one")
    avg_likelihood: float | None = Field(None, description="Mean likelihood of records that have one")
    avg_relevance: float | None = Field(None, description="Mean relevance of records that have one")


class DistributionRow(BaseModel):
    """One category and its record count."""
    name: str = Field(..., description="Category value", examples=["Energy"])
    count: int = Field(..., description="Number of records in this category", examples=[296])


class StatsResponse(BaseModel):
    """Response body for GET /api/stats."""
    success: bool = Field(True, description="Always true on a 200 response")
    stats: StatsOut
    sector_distribution: list[DistributionRow] = Field(..., description="Top 10 sectors by record count")
    region_distribution: list[DistributionRow] = Field(..., description="Top 10 regions by record count")


# ── Chart projections ─────────────────────────────────────────────────────────

class ProjectionsResponse(BaseModel):
    """Response body for GET /api/charts/projections."""
    success: bool = Field(True, description="Always true on a 200 response")
    count: int = Field(..., description="Number of records the projections were computed from")
    projections: dict[str, Any] = Field(..., description="Chart-ready series keyed by chart name")


# ── Error model ───────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Standard error response body."""
    success: bool = Field(False, description="Always false")
    message: str = Field(..., description="Short error message", examples=["Endpoint not found"])
    error: str | None = Field(None, description="Extended error detail")


# ``responses=`` entries shared by the store-backed routes; both errors use
# the ErrorResponse envelope produced by the app's exception handlers.
VALIDATION_ERROR_RESPONSE = {"model": ErrorResponse, "description": "Invalid request parameters"}
STORE_ERROR_RESPONSE = {"model": ErrorResponse, "description": "Database not seeded"}
