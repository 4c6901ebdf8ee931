"""Insight record cleaning and loading.

Raw records come from a JSON export where scores and years may be numbers,
numeric strings or empty strings.  ``clean_record`` normalises one record to
the stored shape; ``load_json_records`` reads and cleans a whole export.
"""

import json
from pathlib import Path
from typing import Any

from utils.config import NUMERIC_FIELDS, TEXT_FIELDS, YEAR_FIELDS
from utils.strings import to_number_or_null, to_text, to_year_or_null


def clean_record(item: dict[str, Any]) -> dict[str, Any]:
    """Return a cleaned copy of a raw insight record.

    Numeric fields become ``float`` (integral years become ``int``) or
    ``None``; text fields become ``str`` with missing values mapped to ``""``.
    Keys outside the insight field catalogue are dropped, except ``id`` which
    is kept so records fetched from the API round-trip unchanged.
    """
    cleaned: dict[str, Any] = {}
    if item.get("id") is not None:
        cleaned["id"] = item["id"]
    for field in NUMERIC_FIELDS:
        if field in YEAR_FIELDS:
            cleaned[field] = to_year_or_null(item.get(field))
        else:
            cleaned[field] = to_number_or_null(item.get(field))
    for field in TEXT_FIELDS:
        cleaned[field] = to_text(item.get(field))
    return cleaned


def clean_records(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [clean_record(item) for item in items]


def load_json_records(path: Path) -> list[dict[str, Any]]:
    """Load a JSON array of raw insight records and clean every entry.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file does not hold a JSON array.
    """
    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of records in {path}")
    return clean_records(data)
