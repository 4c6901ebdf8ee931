"""Configuration management utilities for the insights dashboard.

Provides reusable pieces for:
- Field catalogues for insight records (numeric, text, filterable, searchable)
- Environment-driven application settings (AppConfig)
"""

import os as _os
from pathlib import Path


# ── Insight field catalogue ──────────────────────────────────────────────────
# Canonical source for every module that reads or writes insight records.

NUMERIC_FIELDS = (
    "end_year", "start_year", "intensity", "likelihood", "relevance", "impact",
)

# Year fields are stored as integers; the score fields keep their precision.
YEAR_FIELDS = ("end_year", "start_year")

TEXT_FIELDS = (
    "sector", "topic", "insight", "url", "region", "country", "city",
    "pestle", "source", "swot", "title", "added", "published",
)

INSIGHT_FIELDS = NUMERIC_FIELDS + TEXT_FIELDS

# Dropdown filters, in the order the distinct-values endpoint reports them.
FILTER_FIELDS = (
    "end_year", "start_year", "topic", "sector", "region", "pestle",
    "source", "swot", "country", "city",
)

# Free-text search is a case-insensitive substring match on these columns.
SEARCH_FIELDS = (
    "title", "insight", "topic", "sector", "region", "country", "source",
)

# Fields the dashboard filter bar renders, with their labels.
DASHBOARD_FILTERS = (
    ("end_year", "Year"),
    ("topic", "Topic"),
    ("sector", "Sector"),
    ("region", "Region"),
    ("pestle", "PESTLE"),
    ("source", "Source"),
    ("country", "Country"),
)


def _env_flag(name: str, default: str) -> bool:
    return _os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_DB_PATH: Path to the SQLite store (default: insights.sqlite)
        APP_PORT: API server port (default: 5000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        RATE_LIMIT_DEFAULT: Max requests per minute per IP (default: 120)
        APP_FILTERS_CACHE_TTL: Seconds to cache distinct filter values (default: 300)
        APP_API_URL: Base URL the dashboard data service calls
            (default: http://localhost:5000/api)
        APP_USE_BACKEND: Whether the data service calls the API at all (default: true)
        APP_LOCAL_DATA: JSON file backing the in-memory fallback dataset
            (default: data/jsondata.json)
        APP_HTTP_TIMEOUT: Data service request timeout in seconds (default: 10)
    """

    def __init__(self) -> None:
        self.db_path = Path(_os.getenv("APP_DB_PATH", "insights.sqlite"))
        self.api_port = int(_os.getenv("APP_PORT", "5000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.rate_limit_default = int(_os.getenv("RATE_LIMIT_DEFAULT", "120"))
        self.filters_cache_ttl = float(_os.getenv("APP_FILTERS_CACHE_TTL", "300"))
        self.api_url = _os.getenv("APP_API_URL", "http://localhost:5000/api").rstrip("/")
        self.use_backend = _env_flag("APP_USE_BACKEND", "true")
        self.local_data_path = Path(_os.getenv("APP_LOCAL_DATA", "data/jsondata.json"))
        self.http_timeout = float(_os.getenv("APP_HTTP_TIMEOUT", "10"))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
