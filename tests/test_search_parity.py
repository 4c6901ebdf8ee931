"""
Search parity between the API and the in-memory fallback.

The same FilterState must select the same records whether it runs as SQL
against the store (/api/data) or through utils.filters.apply_filters on the
cleaned records, including for non-ASCII text.
"""

import json

import pytest
from fastapi.testclient import TestClient

from utils.filters import FilterState, apply_filters
from utils.records import clean_records

UNICODE_RAW = [
    {"title": "Élan in Énergie", "sector": "Énergie", "region": "Europe",
     "added": "2017-02-03"},
    {"title": "Straße des Öls", "topic": "Öl", "region": "Europe",
     "added": "2017-02-02"},
    {"title": "ÇA VA DÉJÀ", "insight": "Über alles", "country": "France",
     "added": "2017-02-01"},
    {"title": "Plain ascii oil", "sector": "Energy", "added": "2017-01-31"},
]


@pytest.fixture(scope="module")
def client(tmp_path_factory):
    from api.app import create_app
    from build_insights_db import seed_database

    tmp = tmp_path_factory.mktemp("unicode_store")
    json_path = tmp / "jsondata.json"
    json_path.write_text(json.dumps(UNICODE_RAW), encoding="utf-8")
    db_path = tmp / "insights.sqlite"
    seed_database(json_path, db_path, verbose=False)
    with TestClient(create_app(db_path=db_path)) as c:
        yield c


@pytest.fixture(scope="module")
def local_records():
    return clean_records([dict(r) for r in UNICODE_RAW])


def _server_titles(client, filters):
    resp = client.get("/api/data", params=filters.to_query_params())
    assert resp.status_code == 200
    return sorted(r["title"] for r in resp.json()["data"])


def _local_titles(records, filters):
    return sorted(r["title"] for r in apply_filters(records, filters))


@pytest.mark.parametrize("search,expected", [
    ("élan", ["Élan in Énergie"]),
    ("ÉLAN", ["Élan in Énergie"]),
    ("énergie", ["Élan in Énergie"]),
    ("strasse", ["Straße des Öls"]),
    ("öl", ["Straße des Öls"]),
    ("déjà", ["ÇA VA DÉJÀ"]),
    ("ÜBER", ["ÇA VA DÉJÀ"]),
    ("OIL", ["Plain ascii oil"]),
    ("100%", []),
])
def test_search_matches_on_both_paths(client, local_records, search, expected):
    filters = FilterState(search=search)
    assert _server_titles(client, filters) == expected
    assert _local_titles(local_records, filters) == expected


def test_search_combined_with_dropdown(client, local_records):
    filters = FilterState(search="Ö", region="Europe")
    server = _server_titles(client, filters)
    assert server == _local_titles(local_records, filters)
    assert server == ["Straße des Öls"]
