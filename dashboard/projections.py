"""Chart-ready projections of the filtered insight records.

Every function takes a list of cleaned records (see ``utils.records``) and
returns plain lists/dicts that the templates, the SVG renderers and the
``/api/charts/projections`` endpoint serialise directly.

Missing scores count as 0 in sums, and averages divide by the number of
records in the group (not the number that had a score).  Averages are rounded
half-up to one decimal unless a function says otherwise.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from utils.formatting import round_half_up

Record = dict[str, Any]

YEAR_MIN_EXCLUSIVE = 1990
YEAR_MAX_INCLUSIVE = 2100


def _score(record: Record, field: str) -> float:
    return record.get(field) or 0


def _group(records: Iterable[Record], key: Callable[[Record], Any]) -> dict[Any, list[Record]]:
    """Group records by ``key(record)`` in first-seen order; ``None`` keys are skipped."""
    groups: dict[Any, list[Record]] = {}
    for record in records:
        k = key(record)
        if k is None:
            continue
        groups.setdefault(k, []).append(record)
    return groups


def _avg(rows: list[Record], field: str, digits: int = 1) -> float:
    return round_half_up(sum(_score(r, field) for r in rows) / len(rows), digits)


def _year_of(record: Record) -> int | None:
    return record.get("end_year") or record.get("start_year") or None


def _label(field: str, fallback: str) -> Callable[[Record], str]:
    return lambda record: record.get(field) or fallback


def intensity_trends(records: list[Record]) -> list[dict[str, Any]]:
    """Average intensity and likelihood per year (end year, else start year)."""
    groups = _group(records, _year_of)
    return [
        {
            "year": year,
            "intensity": _avg(rows, "intensity"),
            "likelihood": _avg(rows, "likelihood"),
        }
        for year, rows in sorted(groups.items())
    ]


def sector_analysis(records: list[Record], limit: int = 10) -> list[dict[str, Any]]:
    """Average intensity and relevance per sector, highest intensity first."""
    rows = [
        {
            "name": name,
            "intensity": _avg(group, "intensity"),
            "relevance": _avg(group, "relevance"),
        }
        for name, group in _group(records, _label("sector", "Unspecified")).items()
    ]
    rows.sort(key=lambda r: r["intensity"], reverse=True)
    return rows[:limit]


def topic_scatter(records: list[Record], limit: int = 20) -> list[dict[str, Any]]:
    """Per-topic averages as scatter points: x intensity, y likelihood, z relevance.

    Topics whose average intensity or likelihood is not positive are dropped.
    """
    points = [
        {
            "name": name,
            "x": _avg(group, "intensity"),
            "y": _avg(group, "likelihood"),
            "z": _avg(group, "relevance"),
        }
        for name, group in _group(records, _label("topic", "Unspecified")).items()
    ]
    return [p for p in points if p["x"] > 0 and p["y"] > 0][:limit]


def region_stats(records: list[Record], limit: int = 6) -> list[dict[str, Any]]:
    """Record count per region, most records first."""
    rows = [
        {"name": name, "value": len(group)}
        for name, group in _group(records, _label("region", "Unknown")).items()
    ]
    rows.sort(key=lambda r: r["value"], reverse=True)
    return rows[:limit]


def pestle_radar(records: list[Record], full_mark: int = 10) -> list[dict[str, Any]]:
    """Average intensity per PESTLE factor; records without one are left out."""
    return [
        {"subject": subject, "value": _avg(group, "intensity"), "full_mark": full_mark}
        for subject, group in _group(records, _label("pestle", "Other")).items()
        if subject != "Other"
    ]


def country_stats(records: list[Record], limit: int = 8) -> list[dict[str, Any]]:
    """Cumulative intensity per country, largest first."""
    rows = [
        {
            "name": name,
            "value": round_half_up(sum(_score(r, "intensity") for r in group)),
        }
        for name, group in _group(records, _label("country", "Unknown")).items()
    ]
    rows.sort(key=lambda r: r["value"], reverse=True)
    return rows[:limit]


def kpis(records: list[Record]) -> dict[str, Any]:
    """Headline numbers for the KPI cards; averages are 0 when there are no records."""
    total = len(records)
    if not total:
        return {"total": 0, "avg_intensity": 0, "avg_likelihood": 0, "avg_relevance": 0}
    return {
        "total": total,
        "avg_intensity": _avg(records, "intensity"),
        "avg_likelihood": _avg(records, "likelihood"),
        "avg_relevance": _avg(records, "relevance"),
    }


def year_intensity(records: list[Record]) -> list[dict[str, Any]]:
    """Average intensity (2 dp) and record count per plausible year.

    Years outside (1990, 2100] and years whose average intensity is not
    positive are dropped.
    """
    def in_range(record: Record) -> int | None:
        year = _year_of(record)
        if year is not None and YEAR_MIN_EXCLUSIVE < year <= YEAR_MAX_INCLUSIVE:
            return year
        return None

    rows = [
        {"year": year, "intensity": _avg(group, "intensity", digits=2), "count": len(group)}
        for year, group in sorted(_group(records, in_range).items())
    ]
    return [r for r in rows if r["intensity"] > 0]


def field_distribution(records: list[Record], field: str, limit: int = 8) -> list[dict[str, Any]]:
    """Record count per distinct value of *field*, most common first.

    Missing, blank and literal ``"Unknown"`` values are not counted.
    """
    def label(record: Record) -> str | None:
        value = str(record.get(field) or "Unknown")
        if value == "Unknown" or not value.strip():
            return None
        return value

    rows = [{"name": name, "value": len(group)} for name, group in _group(records, label).items()]
    rows.sort(key=lambda r: r["value"], reverse=True)
    return rows[:limit]


def build_projections(records: list[Record]) -> dict[str, Any]:
    """Every dashboard projection keyed by chart name."""
    return {
        "kpis": kpis(records),
        "intensity_trends": intensity_trends(records),
        "sector_analysis": sector_analysis(records),
        "topic_scatter": topic_scatter(records),
        "region_stats": region_stats(records),
        "pestle_radar": pestle_radar(records),
        "country_stats": country_stats(records),
        "year_intensity": year_intensity(records),
        "sector_distribution": field_distribution(records, "sector"),
    }
