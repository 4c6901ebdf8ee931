"""Shared utilities for the insights dashboard tools."""

# Pattern definitions
from utils.patterns import UNSAFE_ID_CHARS

# String utilities
from utils.strings import (
    to_number_or_null,
    to_int_or_null,
    to_text,
    to_year_or_null,
    fold_text,
)

# Database utilities
from utils.database import (
    INSIGHTS_TABLE,
    init_pragmas,
    register_functions,
    batch_insert,
    get_table_count,
    table_exists,
    query_to_dicts,
)

# Output formatting
from utils.formatting import (
    round_half_up,
    format_number,
    format_percent,
    format_count,
    truncate_text,
)

# Configuration
from utils.config import (
    AppConfig,
    NUMERIC_FIELDS,
    YEAR_FIELDS,
    TEXT_FIELDS,
    INSIGHT_FIELDS,
    FILTER_FIELDS,
    SEARCH_FIELDS,
    DASHBOARD_FILTERS,
)

# Records, filters and queries
from utils.records import clean_record, clean_records, load_json_records
from utils.filters import FilterState, apply_filters
from utils.query import build_where_clause, build_order_clause, build_limit_clause
from utils.store import fetch_insights, distinct_filter_values, collect_stats, sort_distinct

# Caching
from utils.cache import TTLCache

# HTTP utilities
from utils.http import RetryStrategy, SessionManager, get_json

__all__ = [
    # Patterns
    "UNSAFE_ID_CHARS",
    # Strings
    "to_number_or_null",
    "to_int_or_null",
    "to_text",
    "to_year_or_null",
    "fold_text",
    # Database
    "INSIGHTS_TABLE",
    "init_pragmas",
    "register_functions",
    "batch_insert",
    "get_table_count",
    "table_exists",
    "query_to_dicts",
    # Formatting
    "round_half_up",
    "format_number",
    "format_percent",
    "format_count",
    "truncate_text",
    # Config
    "AppConfig",
    "NUMERIC_FIELDS",
    "YEAR_FIELDS",
    "TEXT_FIELDS",
    "INSIGHT_FIELDS",
    "FILTER_FIELDS",
    "SEARCH_FIELDS",
    "DASHBOARD_FILTERS",
    # Records / filters / queries
    "clean_record",
    "clean_records",
    "load_json_records",
    "FilterState",
    "apply_filters",
    "build_where_clause",
    "build_order_clause",
    "build_limit_clause",
    "fetch_insights",
    "distinct_filter_values",
    "collect_stats",
    "sort_distinct",
    # Cache
    "TTLCache",
    # HTTP
    "RetryStrategy",
    "SessionManager",
    "get_json",
]
