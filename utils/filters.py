"""Filter state shared by the API and the dashboard data service.

A ``FilterState`` holds the current dropdown selections plus an optional
free-text search term.  The server turns it into a SQL WHERE clause
(``utils.query.build_where_clause``); the client fallback path evaluates
``FilterState.matches`` against in-memory records.  Both apply the same rules:

- year filters are coerced to numbers; a non-numeric year filter is ignored
- every other dropdown is an exact string match
- ``search`` is a literal substring match on SEARCH_FIELDS after Unicode
  case folding (``utils.strings.fold_text``) of both sides
- blank (empty or whitespace-only) values are not applied
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from utils.config import FILTER_FIELDS, SEARCH_FIELDS, YEAR_FIELDS
from utils.strings import fold_text, to_number_or_null, to_text


@dataclass
class FilterState:
    """Dropdown selections plus free-text search; ``""`` means "All"."""

    end_year: str = ""
    start_year: str = ""
    topic: str = ""
    sector: str = ""
    region: str = ""
    pestle: str = ""
    source: str = ""
    swot: str = ""
    country: str = ""
    city: str = ""
    search: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> FilterState:
        """Build a FilterState from query params or a plain dict.

        Unknown keys are ignored; ``None`` values become ``""``.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: to_text(v) for k, v in data.items() if k in known})

    def selections(self) -> dict[str, str]:
        """Return the non-blank dropdown selections (search excluded)."""
        return {
            name: getattr(self, name)
            for name in FILTER_FIELDS
            if getattr(self, name).strip()
        }

    @property
    def search_term(self) -> str:
        return self.search.strip()

    def year_value(self, field: str) -> float | None:
        """Numeric value of a year filter, or None when blank/non-numeric."""
        return to_number_or_null(getattr(self, field))

    def to_query_params(self) -> dict[str, str]:
        """Non-blank values only, ready for URL encoding."""
        params = dict(self.selections())
        if self.search_term:
            params["search"] = self.search
        return params

    def is_empty(self) -> bool:
        return not self.to_query_params()

    def matches(self, record: Mapping[str, Any]) -> bool:
        """Return True if *record* passes every active filter."""
        for name, value in self.selections().items():
            if name in YEAR_FIELDS:
                wanted = self.year_value(name)
                if wanted is None:
                    continue
                actual = record.get(name)
                if actual is None or float(actual) != wanted:
                    return False
            elif record.get(name) != value:
                return False

        term = fold_text(self.search_term)
        if term:
            return any(
                term in fold_text(record.get(field))
                for field in SEARCH_FIELDS
            )
        return True


def apply_filters(records: list[dict[str, Any]], filters: FilterState) -> list[dict[str, Any]]:
    """Return the records that match *filters*, preserving order."""
    return [r for r in records if filters.matches(r)]
