"""Server-rendered SVG bar chart of average intensity per year."""

from __future__ import annotations

import html
from typing import Any

from dashboard.projections import year_intensity
from dashboard.scales import BandScale, LinearScale, fmt
from utils.formatting import format_count, format_number
from utils.patterns import UNSAFE_ID_CHARS

MARGIN = {"top": 20, "right": 30, "bottom": 60, "left": 50}
BAR_COLOR_TOP = "#7367F0"
BAR_COLOR_BOTTOM = "#9E95F5"
BAR_HOVER = "#5E50EE"
AXIS_COLOR = "#DBDADE"
GRID_COLOR = "#EBE9F1"
LABEL_COLOR = "#A8AAAE"
TITLE_COLOR = "#A5A3AE"
Y_TICKS = 5
BAR_DURATION_S = 0.8
BAR_STAGGER_S = 0.05


def _esc(text: Any) -> str:
    return html.escape(str(text))


def _grow(attr: str, start: float, end: float, delay: float) -> str:
    """SMIL animation holding *start* for *delay* seconds, then easing to *end*."""
    total = delay + BAR_DURATION_S
    hold = delay / total
    return (
        f'<animate attributeName="{attr}" dur="{fmt(total)}s" fill="freeze" '
        f'values="{fmt(start)};{fmt(start)};{fmt(end)}" keyTimes="0;{fmt(hold)};1" '
        f'calcMode="spline" keySplines="0 0 1 1;0.25 0.1 0.25 1"/>'
    )


def render_year_bar_chart(records: list[dict[str, Any]], width: int = 600,
                          height: int = 350, chart_id: str = "year-intensity") -> str:
    """Render average intensity per year as an SVG string.

    Returns ``""`` when no year has a positive average intensity, so callers
    can show their own empty-state message.
    """
    data = year_intensity(records)
    if not data:
        return ""

    inner_w = width - MARGIN["left"] - MARGIN["right"]
    inner_h = height - MARGIN["top"] - MARGIN["bottom"]
    gradient_id = UNSAFE_ID_CHARS.sub("-", f"{chart_id}-gradient")

    x = BandScale([str(d["year"]) for d in data], (0, inner_w), padding=0.3)
    y = LinearScale((0, max(d["intensity"] for d in data) or 10), (inner_h, 0)).nice()
    tick_values = y.ticks(Y_TICKS)
    tick_label = y.tick_format(Y_TICKS)

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" class="d3-chart bar-chart" id="{_esc(chart_id)}" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'role="img" aria-label="Average intensity by year">',
        f'<style>.bar{{cursor:pointer;transition:fill .2s}}'
        f'.bar:hover{{fill:{BAR_HOVER}}}</style>',
        f'<defs><linearGradient id="{gradient_id}" x1="0%" y1="0%" x2="0%" y2="100%">'
        f'<stop offset="0%" stop-color="{BAR_COLOR_TOP}"/>'
        f'<stop offset="100%" stop-color="{BAR_COLOR_BOTTOM}"/>'
        f'</linearGradient></defs>',
        f'<g transform="translate({MARGIN["left"]},{MARGIN["top"]})">',
    ]

    # Grid
    parts.append('<g class="grid">')
    for t in tick_values:
        parts.append(
            f'<line x1="0" x2="{fmt(inner_w)}" y1="{fmt(y(t))}" y2="{fmt(y(t))}" '
            f'stroke="{GRID_COLOR}" stroke-dasharray="3,3"/>'
        )
    parts.append('</g>')

    # X axis
    parts.append(
        f'<g class="x-axis" transform="translate(0,{fmt(inner_h)})" font-size="11">'
        f'<path d="M0,6V0H{fmt(inner_w)}V6" fill="none" stroke="{AXIS_COLOR}"/>'
    )
    for d in data:
        cx = x(str(d["year"])) + x.bandwidth / 2
        parts.append(
            f'<g class="tick" transform="translate({fmt(cx)},0)">'
            f'<line y2="6" stroke="{AXIS_COLOR}"/>'
            f'<text fill="{LABEL_COLOR}" y="9" dx="-0.5em" dy="0.5em" '
            f'text-anchor="end" transform="rotate(-45)">{d["year"]}</text></g>'
        )
    parts.append('</g>')

    # Y axis
    parts.append('<g class="y-axis" font-size="11">')
    for t in tick_values:
        parts.append(
            f'<g class="tick" transform="translate(0,{fmt(y(t))})">'
            f'<line x2="-6" stroke="{AXIS_COLOR}" stroke-dasharray="3,3"/>'
            f'<text fill="{LABEL_COLOR}" x="-9" dy="0.32em" text-anchor="end">'
            f'{tick_label(t)}</text></g>'
        )
    parts.append('</g>')

    # Bars
    for i, d in enumerate(data):
        bar_y = y(d["intensity"])
        bar_h = inner_h - bar_y
        delay = i * BAR_STAGGER_S
        tooltip = (
            f'Year: {d["year"]}|Avg Intensity: {format_number(d["intensity"], 2)}'
            f'|Records: {format_count(d["count"])}'
        )
        parts.append(
            f'<rect class="bar" x="{fmt(x(str(d["year"])))}" y="{fmt(bar_y)}" '
            f'width="{fmt(x.bandwidth)}" height="{fmt(bar_h)}" rx="4" ry="4" '
            f'fill="url(#{gradient_id})" data-tooltip="{_esc(tooltip)}">'
            f'<title>{_esc(tooltip.replace("|", chr(10)))}</title>'
            f'{_grow("y", inner_h, bar_y, delay)}{_grow("height", 0, bar_h, delay)}'
            f'</rect>'
        )

    # Y-axis label
    parts.append(
        f'<text transform="rotate(-90)" y="{-MARGIN["left"] + 15}" x="{fmt(-inner_h / 2)}" '
        f'text-anchor="middle" font-size="12" fill="{TITLE_COLOR}">Average Intensity</text>'
    )
    parts.append('</g></svg>')
    return "".join(parts)
