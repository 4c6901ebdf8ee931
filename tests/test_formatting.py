"""Tests for utils/formatting.py number formatting helpers."""

import pytest

from utils.formatting import (
    format_count,
    format_number,
    format_percent,
    round_half_up,
    truncate_text,
)


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,digits,expected", [
        (0.25, 1, 0.3),
        (0.35, 1, 0.3),    # 0.35 is stored just below .35
        (0.125, 2, 0.13),
        (7, 1, 7.0),
        (6.666666, 1, 6.7),
        (-0.25, 1, -0.3),
    ])
    def test_values(self, value, digits, expected):
        assert round_half_up(value, digits) == expected

    def test_differs_from_builtin_round(self):
        assert round(0.25, 1) == 0.2
        assert round_half_up(0.25, 1) == 0.3


class TestFormatNumber:
    def test_default_precision(self):
        assert format_number(6.25) == "6.3"

    def test_padding(self):
        assert format_number(3, precision=2) == "3.00"

    def test_none(self):
        assert format_number(None) == "-"


def test_format_percent():
    assert format_percent(42.5) == "42.5%"
    assert format_percent(None) == "-"


def test_format_count():
    assert format_count(1234567) == "1,234,567"
    assert format_count(0) == "0"
    assert format_count(None) == "-"


class TestTruncateText:
    def test_short_text_unchanged(self):
        assert truncate_text("Energy", 12) == "Energy"

    def test_long_text_truncated(self):
        assert truncate_text("Information Technology", 12) == "Information…"
        assert len(truncate_text("x" * 100, 40)) == 40
