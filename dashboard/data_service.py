"""Client-side data access for the dashboard.

``DataService`` asks the insights API for records and filter options and falls
back to an in-memory copy of the dataset whenever the API is disabled,
unreachable, or answers with an error.  The fallback applies the same
``FilterState`` rules as the server, so a dashboard rendered from either
source shows the same records.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import requests

from utils.config import AppConfig, FILTER_FIELDS, INSIGHT_FIELDS, NUMERIC_FIELDS
from utils.filters import FilterState, apply_filters
from utils.http import SessionManager, get_json
from utils.records import clean_records, load_json_records
from utils.store import sort_distinct

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The API answered, but not with a usable payload."""


def build_query_string(filters: FilterState) -> str:
    """URL-encode the non-blank filter values (empty string when none)."""
    return urlencode(filters.to_query_params())


class DataService:
    """Fetch insight records and filter options, remote first.

    Args:
        config: Application settings; read from the environment when omitted.
        session: ``requests.Session``-like object used for API calls; a
            retrying session is created lazily when omitted.
        local_records: Pre-cleaned fallback records; when omitted they are
            loaded from ``config.local_data_path`` on first use.
    """

    def __init__(self, config: AppConfig | None = None, session=None,
                 local_records: list[dict[str, Any]] | None = None):
        self.config = config or AppConfig.from_env()
        self._session = session
        self._session_manager: SessionManager | None = None
        self._local_records = local_records

    # ── plumbing ──────────────────────────────────────────────────────────────

    @property
    def session(self):
        if self._session is None:
            self._session_manager = SessionManager()
            self._session = self._session_manager.session
        return self._session

    def close(self) -> None:
        if self._session_manager is not None:
            self._session_manager.close()
            self._session_manager = None
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def health_url(self) -> str:
        base = self.config.api_url
        if base.endswith("/api"):
            base = base[: -len("/api")]
        return f"{base}/health"

    def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return get_json(self.session, f"{self.config.api_url}{path}",
                        params=params, timeout=self.config.http_timeout)

    # ── local dataset ─────────────────────────────────────────────────────────

    @property
    def local_records(self) -> list[dict[str, Any]]:
        """The cleaned fallback dataset, loaded once on first access.

        A missing or unreadable file logs an error and yields an empty dataset.
        """
        if self._local_records is None:
            path = Path(self.config.local_data_path)
            try:
                self._local_records = load_json_records(path)
                logger.info("Loaded %d local records from %s", len(self._local_records), path)
            except (OSError, ValueError) as e:
                logger.error("Local dataset unavailable (%s); fallback is empty", e)
                self._local_records = []
        return self._local_records

    def fetch_local(self, filters: FilterState | None = None) -> list[dict[str, Any]]:
        return apply_filters(self.local_records, filters or FilterState())

    def get_unique_values(self, field: str) -> list[Any]:
        """Sorted distinct non-empty values of *field* in the local dataset."""
        if field not in INSIGHT_FIELDS:
            raise ValueError(f"Unknown field: {field}")
        values = {r.get(field) for r in self.local_records}
        return sort_distinct(list(values), numeric=field in NUMERIC_FIELDS)

    def local_filter_options(self) -> dict[str, list[Any]]:
        return {field: self.get_unique_values(field) for field in FILTER_FIELDS}

    # ── public API ────────────────────────────────────────────────────────────

    def fetch_data(self, filters: FilterState | None = None) -> list[dict[str, Any]]:
        """Records matching *filters*, from the API or the local fallback."""
        filters = filters or FilterState()
        if not self.config.use_backend:
            return self.fetch_local(filters)
        try:
            result = self._get("/data", params=filters.to_query_params())
            if not isinstance(result, dict) or not result.get("success"):
                message = result.get("message") if isinstance(result, dict) else None
                raise ApiError(message or "API error")
            return clean_records(result.get("data") or [])
        except (requests.RequestException, ValueError, ApiError) as e:
            logger.warning("API failed, using local data: %s", e)
            return self.fetch_local(filters)

    def get_filter_options(self) -> dict[str, list[Any]]:
        """Distinct values per filter field, from the API or the local fallback."""
        if not self.config.use_backend:
            return self.local_filter_options()
        try:
            result = self._get("/filters")
            options = result.get("filters") if isinstance(result, dict) else None
            if not isinstance(options, dict):
                raise ApiError("filters missing from response")
            return {field: list(options.get(field) or []) for field in FILTER_FIELDS}
        except (requests.RequestException, ValueError, ApiError) as e:
            logger.warning("Filter options unavailable from API, using local data: %s", e)
            return self.local_filter_options()

    def check_api_health(self) -> bool:
        """True only if the API's health endpoint reports ``status == "ok"``."""
        try:
            result = get_json(self.session, self.health_url, timeout=self.config.http_timeout)
        except (requests.RequestException, ValueError) as e:
            logger.debug("Health check failed: %s", e)
            return False
        return isinstance(result, dict) and result.get("status") == "ok"
