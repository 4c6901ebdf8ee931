"""Server-rendered SVG pie/donut chart of record counts per field value."""

from __future__ import annotations

import html
from typing import Any

from dashboard.projections import field_distribution
from dashboard.scales import arc_path, fmt, pie_layout
from utils.formatting import format_count, format_percent

PALETTE = (
    "#7367F0", "#FF9F43", "#28C76F", "#00CFE8", "#EA5455",
    "#A8AAAE", "#9E95F5", "#FFB976", "#5BD193", "#4DD4E8",
)
PAD_ANGLE = 0.02
INNER_RATIO = 0.55
HOVER_GROWTH = 8
LEGEND_SIZE = 6
SLICE_DURATION_S = 0.8
SLICE_STAGGER_S = 0.1
SWEEP_FRAMES = 10
TEXT_COLOR = "#5D596C"
MUTED_COLOR = "#A5A3AE"


def _esc(text: Any) -> str:
    return html.escape(str(text))


def slice_color(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def pie_legend(rows: list[dict[str, Any]], size: int = LEGEND_SIZE) -> list[dict[str, Any]]:
    """Legend entries (name, value, color) for the first *size* slices."""
    return [
        {"name": row["name"], "value": row["value"], "color": slice_color(i)}
        for i, row in enumerate(rows[:size])
    ]


def _sweep_frames(inner: float, radius: float, start: float, end: float, pad: float) -> str:
    frames = [
        arc_path(inner, radius, start, start + (end - start) * k / SWEEP_FRAMES, pad)
        for k in range(1, SWEEP_FRAMES + 1)
    ]
    return ";".join(frames)


def render_distribution_chart(records: list[dict[str, Any]], field: str = "sector",
                              limit: int = 8, doughnut: bool = True,
                              width: int = 400, height: int = 300,
                              chart_id: str | None = None) -> str:
    """Render the count of records per *field* value as an SVG pie or donut.

    Returns ``""`` when no record has a usable value for *field*.
    """
    rows = field_distribution(records, field, limit=limit)
    if not rows:
        return ""

    size = min(width, height)
    radius = size / 2 - 20
    inner = radius * INNER_RATIO if doughnut else 0
    total = sum(r["value"] for r in rows)
    chart_id = chart_id or f"{field}-distribution"

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" class="d3-chart pie-chart" id="{_esc(chart_id)}" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'role="img" aria-label="Distribution by {_esc(field)}">',
        '<style>.slice{cursor:pointer;transition:filter .2s}'
        '.slice:hover{filter:brightness(1.1)}</style>',
        f'<g transform="translate({fmt(width / 2)},{fmt(height / 2)})">',
    ]

    for s in pie_layout(rows, pad_angle=PAD_ANGLE):
        name = s.data["name"]
        share = format_percent(s.value / total * 100, 1)
        tooltip = f"{name}|Count: {format_count(int(s.value))}|Share: {share}"
        delay = s.index * SLICE_STAGGER_S
        fade_total = delay + SLICE_DURATION_S
        d = arc_path(inner, radius, s.start_angle, s.end_angle, s.pad_angle)
        d_hover = arc_path(inner, radius + HOVER_GROWTH, s.start_angle, s.end_angle, s.pad_angle)
        parts.append(
            f'<path class="slice" d="{d}" data-hover-d="{d_hover}" '
            f'fill="{slice_color(s.index)}" data-tooltip="{_esc(tooltip)}" '
            f'data-color="{slice_color(s.index)}">'
            f'<title>{_esc(tooltip.replace("|", chr(10)))}</title>'
            f'<animate attributeName="opacity" dur="{fmt(fade_total)}s" fill="freeze" '
            f'values="0;0;1" keyTimes="0;{fmt(delay / fade_total)};1"/>'
            f'<animate attributeName="d" begin="{fmt(delay)}s" dur="{SLICE_DURATION_S}s" '
            f'fill="freeze" calcMode="discrete" '
            f'values="{_sweep_frames(inner, radius, s.start_angle, s.end_angle, s.pad_angle)}"/>'
            f'</path>'
        )

    if doughnut:
        parts.append(
            f'<text text-anchor="middle" dy="-0.2em" font-size="24" font-weight="700" '
            f'fill="{TEXT_COLOR}">{format_count(total)}</text>'
            f'<text text-anchor="middle" dy="1.2em" font-size="12" '
            f'fill="{MUTED_COLOR}">Total</text>'
        )
    parts.append('</g></svg>')
    return "".join(parts)
