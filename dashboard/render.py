"""Assemble the dashboard page: projections, Chart.js configs and SVG charts.

``build_dashboard_context`` produces everything ``templates/dashboard.html``
needs from a list of filtered records.  The API's ``/dashboard`` route renders
it through FastAPI's ``Jinja2Templates``; ``render_dashboard_html`` renders the
same template with a plain Jinja2 environment for the static generator.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from dashboard.projections import build_projections
from dashboard.svg_bar import render_year_bar_chart
from dashboard.svg_pie import pie_legend, render_distribution_chart
from utils.config import DASHBOARD_FILTERS
from utils.filters import FilterState
from utils.formatting import format_count, format_number, truncate_text

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

COLORS = {
    "primary": "#7367F0",
    "secondary": "#A8AAAE",
    "success": "#28C76F",
    "danger": "#EA5455",
    "warning": "#FF9F43",
    "info": "#00CFE8",
    "dark": "#4B4B4B",
    "grey": "#EBE9F1",
    "purple_light": "#E8E7FD",
    "bar_background": "#F8F8F8",
}

DONUT_COLORS = [
    COLORS["primary"], COLORS["warning"], COLORS["success"],
    COLORS["info"], COLORS["danger"], COLORS["secondary"],
]

# Bubble areas in px^2 for the smallest and largest relevance.
BUBBLE_AREA_RANGE = (60, 400)


def _rgba(hex_color: str, alpha: float) -> str:
    h = hex_color.lstrip("#")
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha})"


def _bubble_radius(z: float, z_min: float, z_max: float) -> float:
    lo, hi = BUBBLE_AREA_RANGE
    area = lo if z_max == z_min else lo + (z - z_min) / (z_max - z_min) * (hi - lo)
    return round(math.sqrt(area / math.pi), 2)


def _axis(**extra: Any) -> dict[str, Any]:
    axis = {
        "grid": {"color": COLORS["grey"], "borderDash": [3, 3]},
        "border": {"display": False},
        "ticks": {"color": COLORS["secondary"], "font": {"size": 12}},
    }
    axis.update(extra)
    return axis


def chart_configs(projections: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Chart.js configurations keyed by canvas id."""
    trends = projections["intensity_trends"]
    sectors = projections["sector_analysis"]
    topics = projections["topic_scatter"]
    regions = projections["region_stats"]
    pestle = projections["pestle_radar"]
    countries = projections["country_stats"]

    z_values = [p["z"] for p in topics] or [0]
    z_min, z_max = min(z_values), max(z_values)

    return {
        "intensity-trend": {
            "type": "line",
            "data": {
                "labels": [t["year"] for t in trends],
                "datasets": [
                    {
                        "label": "Intensity",
                        "data": [t["intensity"] for t in trends],
                        "borderColor": COLORS["primary"],
                        "backgroundColor": _rgba(COLORS["primary"], 0.15),
                        "borderWidth": 3,
                        "fill": True,
                        "tension": 0.4,
                    },
                    {
                        "label": "Likelihood",
                        "data": [t["likelihood"] for t in trends],
                        "borderColor": COLORS["info"],
                        "backgroundColor": _rgba(COLORS["info"], 0.15),
                        "borderWidth": 3,
                        "fill": True,
                        "tension": 0.4,
                    },
                ],
            },
            "options": {
                "maintainAspectRatio": False,
                "plugins": {"legend": {"labels": {"usePointStyle": True}}},
                "scales": {"x": _axis(grid={"display": False}), "y": _axis()},
            },
        },
        "pestle-radar": {
            "type": "radar",
            "data": {
                "labels": [p["subject"] for p in pestle],
                "datasets": [{
                    "label": "Intensity",
                    "data": [p["value"] for p in pestle],
                    "borderColor": COLORS["primary"],
                    "backgroundColor": _rgba(COLORS["primary"], 0.4),
                    "borderWidth": 2,
                }],
            },
            "options": {
                "maintainAspectRatio": False,
                "plugins": {"legend": {"display": False}},
                "scales": {"r": {
                    "suggestedMin": 0,
                    "suggestedMax": pestle[0]["full_mark"] if pestle else 10,
                    "grid": {"color": COLORS["grey"]},
                    "angleLines": {"color": COLORS["grey"]},
                    "ticks": {"display": False},
                    "pointLabels": {"color": COLORS["secondary"], "font": {"size": 11}},
                }},
            },
        },
        "sector-performance": {
            "type": "bar",
            "data": {
                "labels": [s["name"] for s in sectors],
                "datasets": [
                    {
                        "label": "Intensity",
                        "data": [s["intensity"] for s in sectors],
                        "backgroundColor": COLORS["primary"],
                        "borderRadius": 4,
                        "barThickness": 12,
                    },
                    {
                        "label": "Relevance",
                        "data": [s["relevance"] for s in sectors],
                        "backgroundColor": COLORS["warning"],
                        "borderRadius": 4,
                        "barThickness": 12,
                    },
                ],
            },
            "options": {
                "maintainAspectRatio": False,
                "scales": {
                    "x": _axis(grid={"display": False}, ticks={
                        "color": COLORS["secondary"], "font": {"size": 10},
                        "autoSkip": False, "maxRotation": 45, "minRotation": 45,
                    }),
                    "y": _axis(),
                },
            },
        },
        "topic-impact": {
            "type": "bubble",
            "data": {
                "datasets": [{
                    "label": "Topics",
                    "data": [
                        {"x": p["x"], "y": p["y"], "r": _bubble_radius(p["z"], z_min, z_max),
                         "name": p["name"], "z": p["z"]}
                        for p in topics
                    ],
                    "backgroundColor": _rgba(COLORS["danger"], 0.7),
                    "borderColor": COLORS["danger"],
                }],
            },
            "options": {
                "maintainAspectRatio": False,
                "plugins": {"legend": {"display": False}},
                "scales": {
                    "x": _axis(title={"display": True, "text": "Intensity", "color": COLORS["secondary"]}),
                    "y": _axis(title={"display": True, "text": "Likelihood", "color": COLORS["secondary"]}),
                },
            },
        },
        "regional-focus": {
            "type": "doughnut",
            "data": {
                "labels": [r["name"] for r in regions],
                "datasets": [{
                    "data": [r["value"] for r in regions],
                    "backgroundColor": [DONUT_COLORS[i % len(DONUT_COLORS)] for i in range(len(regions))],
                    "borderWidth": 0,
                    "spacing": 5,
                }],
            },
            "options": {
                "maintainAspectRatio": False,
                "cutout": "70%",
                "plugins": {"legend": {"display": False}},
            },
        },
        "country-impact": {
            "type": "bar",
            "data": {
                "labels": [c["name"] for c in countries],
                "datasets": [{
                    "label": "Cumulative Intensity",
                    "data": [c["value"] for c in countries],
                    "backgroundColor": [
                        COLORS["primary"] if i < 3 else COLORS["purple_light"]
                        for i in range(len(countries))
                    ],
                    "borderRadius": 4,
                    "barThickness": 20,
                }],
            },
            "options": {
                "indexAxis": "y",
                "maintainAspectRatio": False,
                "plugins": {"legend": {"display": False}},
                "scales": {"x": {"display": False}, "y": _axis(grid={"display": False})},
            },
        },
    }


def filter_dropdowns(filters: FilterState, options: dict[str, list[Any]]) -> list[dict[str, Any]]:
    """The filter bar's selects: field, label, options and current selection."""
    return [
        {
            "field": field,
            "label": label,
            "options": [str(v) for v in options.get(field, [])],
            "selected": getattr(filters, field),
        }
        for field, label in DASHBOARD_FILTERS
    ]


def build_dashboard_context(records: list[dict[str, Any]], filters: FilterState | None = None,
                            options: dict[str, list[Any]] | None = None,
                            action: str = "", static_page: bool = False) -> dict[str, Any]:
    """Template context for ``dashboard.html``.

    Args:
        records: The filtered records every chart is computed from.
        filters: Current selections, echoed back into the filter bar.
        options: Distinct values per filter field for the dropdowns.
        action: Form target; ``""`` submits to the current page.
        static_page: Render the filter bar read-only (standalone HTML export).
    """
    filters = filters or FilterState()
    projections = build_projections(records)
    regions = projections["region_stats"]
    sector_rows = projections["sector_distribution"]
    return {
        "filters": filters,
        "dropdowns": filter_dropdowns(filters, options or {}),
        "form_action": action,
        "static_page": static_page,
        "has_filters": not filters.is_empty(),
        "record_count": len(records),
        "kpis": projections["kpis"],
        "projections": projections,
        "charts": chart_configs(projections),
        "colors": COLORS,
        "region_count": len(regions),
        "region_legend": [
            {"name": r["name"], "color": DONUT_COLORS[i % len(DONUT_COLORS)]}
            for i, r in enumerate(regions[:4])
        ],
        "year_bar_svg": render_year_bar_chart(records),
        "sector_pie_svg": render_distribution_chart(records, field="sector", limit=8, doughnut=True),
        "sector_legend": pie_legend(sector_rows),
    }


def register_filters(env: Environment) -> None:
    """Install the number formatting filters the dashboard template uses."""
    env.filters["format_number"] = format_number
    env.filters["format_count"] = format_count
    env.filters["truncate_text"] = truncate_text


def make_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    register_filters(env)
    return env


def render_dashboard_html(context: dict[str, Any], templates_dir: Path = TEMPLATES_DIR) -> str:
    """Render ``dashboard.html`` to a string outside of a request."""
    return make_environment(templates_dir).get_template("dashboard.html").render(**context)
