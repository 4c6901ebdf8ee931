"""
Shared pytest fixtures for the insights dashboard test suite.

Provides:
  - SAMPLE_RAW: five raw insight records shaped like the JSON export
    (numeric strings, empty strings and missing keys included)
  - sample_records: the same records after utils.records.clean_records
  - sample_json: the raw records written to a temporary jsondata.json
  - seeded_db: a module-scoped SQLite store seeded from SAMPLE_RAW

Expected values used across the tests:
  - ``added`` descending order is R1, R2, R3, R4, R5
  - R4 has no scores and no tags; R3 has a start year but no end year
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

SAMPLE_RAW = [
    {   # R1
        "end_year": 2025, "start_year": "2020", "intensity": 6, "likelihood": 3,
        "relevance": 2, "impact": "", "sector": "Energy", "topic": "oil",
        "insight": "Annual Energy Outlook", "url": "http://example.com/r1",
        "region": "Northern America", "country": "United States of America",
        "city": "", "pestle": "Industries", "source": "EIA", "swot": "",
        "title": "Oil output rises", "added": "2017-01-05", "published": "2017-01-01",
    },
    {   # R2
        "end_year": "2025", "start_year": "", "intensity": "10", "likelihood": 4,
        "relevance": 4, "impact": 2, "sector": "Energy", "topic": "gas",
        "insight": "Gas outlook", "url": "http://example.com/r2",
        "region": "Europe", "country": "Germany", "city": "Berlin",
        "pestle": "Economic", "source": "Reuters", "swot": "",
        "title": "Gas prices 100% higher", "added": "2017-01-04", "published": "",
    },
    {   # R3
        "end_year": "", "start_year": 2018, "intensity": 2, "likelihood": 1,
        "relevance": 1, "sector": "Environment", "topic": "climate",
        "insight": "Emissions", "url": "http://example.com/r3",
        "region": "Asia", "country": "China", "pestle": "Environmental",
        "source": "BBC", "title": "Climate_Change report", "added": "2017-01-03",
    },
    {   # R4
        "end_year": 2030, "start_year": "", "intensity": "", "likelihood": "",
        "relevance": "", "impact": "", "sector": "", "topic": "",
        "insight": "", "url": "", "region": "", "country": "", "city": "",
        "pestle": "", "source": "", "swot": "", "title": "Untagged",
        "added": "2017-01-02", "published": "",
    },
    {   # R5
        "end_year": 2030, "start_year": 2019, "intensity": 8, "likelihood": 2,
        "relevance": 3, "impact": "", "sector": "automotive", "topic": "oil",
        "insight": "EV share grows", "url": "http://example.com/r5",
        "region": "Europe", "country": "France", "city": "",
        "pestle": "Technological", "source": "Reuters", "swot": "Opportunity",
        "title": "Electric vehicles", "added": "2017-01-01", "published": "",
    },
]


@pytest.fixture()
def sample_raw():
    """A fresh copy of SAMPLE_RAW."""
    return [dict(r) for r in SAMPLE_RAW]


@pytest.fixture()
def sample_records():
    """The sample records after cleaning, in export order."""
    from utils.records import clean_records
    return clean_records([dict(r) for r in SAMPLE_RAW])


@pytest.fixture()
def sample_json(tmp_path):
    """SAMPLE_RAW written to a temporary jsondata.json."""
    path = tmp_path / "jsondata.json"
    path.write_text(json.dumps(SAMPLE_RAW), encoding="utf-8")
    return path


@pytest.fixture(scope="module")
def seeded_db(tmp_path_factory):
    """A SQLite store seeded from SAMPLE_RAW through build_insights_db."""
    from build_insights_db import seed_database

    tmp = tmp_path_factory.mktemp("store")
    json_path = tmp / "jsondata.json"
    json_path.write_text(json.dumps(SAMPLE_RAW), encoding="utf-8")
    db_path = tmp / "insights.sqlite"
    seed_database(json_path, db_path, verbose=False)
    return db_path


@pytest.fixture(autouse=True)
def _reset_rate_counters():
    """Clear the in-memory rate limit counters between tests."""
    import api.app as app_module
    app_module._rate_counters.clear()
    yield
    app_module._rate_counters.clear()
