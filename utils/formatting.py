"""Output formatting utilities for the insights dashboard.

Provides reusable functions for:
- Half-up rounding of chart values
- Formatting counts, scores and percentages for tooltips and KPI cards
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def round_half_up(value: float, digits: int = 1) -> float:
    """Round *value* to *digits* decimals, ties away from zero.

    Python's ``round`` uses banker's rounding (``round(0.25, 1) == 0.2``);
    dashboard values round ties up (``0.25 -> 0.3``).  The float's exact
    binary value is used, so ``1.005`` still rounds to ``1.0`` at 2 digits.

    Examples:
        round_half_up(0.25) -> 0.3
        round_half_up(0.125, 2) -> 0.13
        round_half_up(7) -> 7.0
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: Optional[float], precision: int = 1) -> str:
    """Format a score with a fixed number of decimals.

    Examples:
        format_number(6.25) -> "6.3"
        format_number(3, precision=2) -> "3.00"
        format_number(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{round_half_up(value, precision):.{precision}f}"


def format_percent(value: Optional[float], precision: int = 1) -> str:
    """Format a percentage for display.

    Examples:
        format_percent(42.5) -> "42.5%"
        format_percent(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{format_number(value, precision)}%"


def format_count(value: Optional[int]) -> str:
    """Format a count with thousands separator.

    Examples:
        format_count(1234567) -> "1,234,567"
        format_count(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:,}"


def truncate_text(text: str, max_length: int = 40, suffix: str = "…") -> str:
    """Truncate *text* for axis labels and legends.

    Example:
        truncate_text("Information Technology", 12) -> "Information…"
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)].rstrip() + suffix
