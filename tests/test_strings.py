"""Tests for utils/strings.py value coercion helpers."""

import pytest

from utils.strings import (
    fold_text,
    to_int_or_null,
    to_number_or_null,
    to_text,
    to_year_or_null,
)


class TestToNumberOrNull:
    @pytest.mark.parametrize("raw,expected", [
        (6, 6.0),
        (2.5, 2.5),
        ("7", 7.0),
        (" 2.5 ", 2.5),
        ("-3", -3.0),
    ])
    def test_numeric(self, raw, expected):
        assert to_number_or_null(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "n/a", True, False,
                                     float("nan"), float("inf"), "NaN"])
    def test_missing(self, raw):
        assert to_number_or_null(raw) is None


class TestToIntOrNull:
    def test_int_string(self):
        assert to_int_or_null("2025") == 2025

    def test_float_truncates(self):
        assert to_int_or_null(2025.0) == 2025
        assert to_int_or_null("7.9") == 7

    def test_missing(self):
        assert to_int_or_null("") is None
        assert to_int_or_null("abc") is None


class TestToYearOrNull:
    def test_integral_values_become_int(self):
        for raw in ("2016", 2016, 2016.0, " 2016.0 "):
            year = to_year_or_null(raw)
            assert year == 2016
            assert isinstance(year, int)

    def test_non_integral_kept(self):
        assert to_year_or_null("2016.7") == 2016.7
        assert to_year_or_null(2016.5) == 2016.5

    def test_missing(self):
        assert to_year_or_null("") is None
        assert to_year_or_null("soon") is None
        assert to_year_or_null(None) is None


def test_to_text():
    assert to_text(None) == ""
    assert to_text("Energy") == "Energy"
    assert to_text(2025) == "2025"


class TestFoldText:
    def test_unicode_case_folded(self):
        assert fold_text("Élan") == "élan"
        assert fold_text("ÇA VA DÉJÀ") == "ça va déjà"
        assert fold_text("Straße") == "strasse"

    def test_missing_and_numbers(self):
        assert fold_text(None) == ""
        assert fold_text(2025) == "2025"
