"""
Tests for utils/query.py: WHERE, ORDER BY and LIMIT clause builders.
"""

from utils.config import SEARCH_FIELDS
from utils.filters import FilterState
from utils.query import build_limit_clause, build_order_clause, build_where_clause


class TestBuildWhereClause:
    def test_none_filters(self):
        assert build_where_clause(None) == ("", [])

    def test_empty_filters(self):
        assert build_where_clause(FilterState()) == ("", [])

    def test_text_filter(self):
        where, params = build_where_clause(FilterState(sector="Energy"))
        assert where == "WHERE sector = ?"
        assert params == ["Energy"]

    def test_year_filter_binds_number(self):
        where, params = build_where_clause(FilterState(end_year="2025"))
        assert where == "WHERE end_year = ?"
        assert params == [2025.0]

    def test_non_numeric_year_dropped(self):
        assert build_where_clause(FilterState(end_year="soon")) == ("", [])

    def test_multiple_filters_anded(self):
        where, params = build_where_clause(FilterState(sector="Energy", region="Europe"))
        assert where == "WHERE sector = ? AND region = ?"
        assert params == ["Energy", "Europe"]

    def test_search_ors_every_search_field(self):
        where, params = build_where_clause(FilterState(search="oil"))
        assert where.startswith("WHERE (")
        assert where.count("instr(py_casefold(") == len(SEARCH_FIELDS)
        assert params == ["oil"] * len(SEARCH_FIELDS)

    def test_search_binds_literal_term(self):
        _, params = build_where_clause(FilterState(search="100%"))
        assert params[0] == "100%"

    def test_search_term_case_folded(self):
        _, params = build_where_clause(FilterState(search="ÉLAN Straße"))
        assert params[0] == "élan strasse"

    def test_search_trimmed(self):
        _, params = build_where_clause(FilterState(search="  gas "))
        assert params[0] == "gas"


class TestBuildOrderClause:
    def test_default(self):
        assert build_order_clause() == "ORDER BY added DESC, id ASC"

    def test_ascending(self):
        assert build_order_clause("intensity", "asc") == "ORDER BY intensity ASC, id ASC"

    def test_unknown_column_falls_back(self):
        assert build_order_clause("1; DROP TABLE insights", "desc") == "ORDER BY added DESC, id ASC"

    def test_id_has_no_tie_breaker(self):
        assert build_order_clause("id", "desc") == "ORDER BY id DESC"


class TestBuildLimitClause:
    def test_no_paging(self):
        assert build_limit_clause(None, None) == ("", [])

    def test_zero_limit_is_unlimited(self):
        assert build_limit_clause(0, None) == ("", [])

    def test_limit_only(self):
        assert build_limit_clause(10, None) == ("LIMIT ? OFFSET ?", [10, 0])

    def test_skip_only(self):
        assert build_limit_clause(None, 5) == ("LIMIT ? OFFSET ?", [-1, 5])

    def test_negative_values_ignored(self):
        assert build_limit_clause(-3, -1) == ("", [])
