"""
API endpoint tests.

Uses FastAPI TestClient (backed by httpx) with the seeded sample store.
Each test group covers one endpoint: happy path, filters, search, paging and
malformed parameters.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="module")
def client(seeded_db):
    """Create a FastAPI TestClient wired to the seeded sample store."""
    from api.app import create_app
    app = create_app(db_path=seeded_db)
    with TestClient(app) as c:
        yield c


def _titles(resp):
    return [r["title"] for r in resp.json()["data"]]


# ── / and /health ─────────────────────────────────────────────────────────────

class TestMeta:
    def test_root_lists_endpoints(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Data Visualization Dashboard API"
        assert body["version"] == "1.0.0"
        assert "/api/data" in body["endpoints"]
        assert "/health" in body["endpoints"]

    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": "connected", "records": 5}


# ── /api/data ─────────────────────────────────────────────────────────────────

class TestData:
    def test_returns_all_records_newest_first(self, client):
        resp = client.get("/api/data")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["count"] == 5
        assert _titles(resp) == [
            "Oil output rises", "Gas prices 100% higher", "Climate_Change report",
            "Untagged", "Electric vehicles",
        ]

    def test_records_are_cleaned(self, client):
        rows = {r["title"]: r for r in client.get("/api/data").json()["data"]}
        assert rows["Gas prices 100% higher"]["intensity"] == 10
        assert rows["Gas prices 100% higher"]["end_year"] == 2025
        assert rows["Untagged"]["intensity"] is None
        assert rows["Untagged"]["sector"] == ""
        assert rows["Climate_Change report"]["end_year"] is None
        assert "created_at" not in rows["Untagged"]

    def test_text_filter_is_exact(self, client):
        resp = client.get("/api/data", params={"sector": "Energy"})
        assert resp.json()["count"] == 2
        assert client.get("/api/data", params={"sector": "energy"}).json()["count"] == 0

    def test_combined_filters(self, client):
        resp = client.get("/api/data", params={"sector": "Energy", "region": "Europe"})
        assert _titles(resp) == ["Gas prices 100% higher"]

    def test_year_filter_is_numeric(self, client):
        resp = client.get("/api/data", params={"end_year": "2025"})
        assert resp.json()["count"] == 2

    def test_non_numeric_year_is_ignored(self, client):
        resp = client.get("/api/data", params={"end_year": "abc"})
        assert resp.status_code == 200
        assert resp.json()["count"] == 5

    def test_blank_filter_means_all(self, client):
        resp = client.get("/api/data", params={"sector": "", "topic": "   "})
        assert resp.json()["count"] == 5

    def test_unknown_value_returns_empty(self, client):
        resp = client.get("/api/data", params={"country": "Atlantis"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "count": 0, "data": []}

    def test_search_is_case_insensitive(self, client):
        resp = client.get("/api/data", params={"search": "OIL"})
        assert _titles(resp) == ["Oil output rises", "Electric vehicles"]

    def test_search_percent_is_literal(self, client):
        resp = client.get("/api/data", params={"search": "100%"})
        assert _titles(resp) == ["Gas prices 100% higher"]

    def test_search_underscore_is_literal(self, client):
        resp = client.get("/api/data", params={"search": "_"})
        assert _titles(resp) == ["Climate_Change report"]

    def test_search_regex_characters_are_literal(self, client):
        resp = client.get("/api/data", params={"search": "(.*"})
        assert resp.status_code == 200
        assert resp.json()["count"] == 0

    def test_search_combines_with_filters(self, client):
        resp = client.get("/api/data", params={"search": "oil", "region": "Europe"})
        assert _titles(resp) == ["Electric vehicles"]

    def test_limit(self, client):
        resp = client.get("/api/data", params={"limit": 2})
        assert _titles(resp) == ["Oil output rises", "Gas prices 100% higher"]

    def test_skip_and_limit(self, client):
        resp = client.get("/api/data", params={"skip": 1, "limit": 2})
        assert _titles(resp) == ["Gas prices 100% higher", "Climate_Change report"]

    def test_skip_without_limit(self, client):
        resp = client.get("/api/data", params={"skip": 3})
        assert _titles(resp) == ["Untagged", "Electric vehicles"]

    def test_zero_limit_means_no_limit(self, client):
        assert client.get("/api/data", params={"limit": 0}).json()["count"] == 5

    def test_malformed_paging_is_ignored(self, client):
        resp = client.get("/api/data", params={"limit": "ten", "skip": "x"})
        assert resp.status_code == 200
        assert resp.json()["count"] == 5


# ── /api/filters ──────────────────────────────────────────────────────────────

class TestFilters:
    def test_distinct_values(self, client):
        resp = client.get("/api/filters")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        f = body["filters"]
        assert f["end_year"] == [2025, 2030]
        assert f["start_year"] == [2018, 2019, 2020]
        assert f["topic"] == ["climate", "gas", "oil"]
        assert f["region"] == ["Asia", "Europe", "Northern America"]
        assert f["city"] == ["Berlin"]
        assert f["swot"] == ["Opportunity"]

    def test_text_values_sort_case_insensitively(self, client):
        f = client.get("/api/filters").json()["filters"]
        assert f["sector"] == ["automotive", "Energy", "Environment"]

    def test_every_filter_field_present(self, client):
        from utils.config import FILTER_FIELDS
        f = client.get("/api/filters").json()["filters"]
        assert list(f) == list(FILTER_FIELDS)

    def test_repeat_calls_are_stable(self, client):
        first = client.get("/api/filters").json()
        second = client.get("/api/filters").json()
        assert first == second


# ── /api/stats ────────────────────────────────────────────────────────────────

class TestStats:
    def test_totals_and_averages(self, client):
        resp = client.get("/api/stats")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        stats = body["stats"]
        assert stats["total_records"] == 5
        # Records without a score are not averaged in.
        assert stats["avg_intensity"] == pytest.approx(6.5)
        assert stats["avg_likelihood"] == pytest.approx(2.5)
        assert stats["avg_relevance"] == pytest.approx(2.5)

    def test_sector_distribution(self, client):
        rows = client.get("/api/stats").json()["sector_distribution"]
        assert rows[0] == {"name": "Energy", "count": 2}
        assert {r["name"] for r in rows} == {"Energy", "Environment", "automotive"}
        assert all(r["name"] for r in rows)

    def test_region_distribution(self, client):
        rows = client.get("/api/stats").json()["region_distribution"]
        assert rows == [
            {"name": "Europe", "count": 2},
            {"name": "Asia", "count": 1},
            {"name": "Northern America", "count": 1},
        ]

    def test_stats_accept_filters(self, client):
        body = client.get("/api/stats", params={"region": "Europe"}).json()
        assert body["stats"]["total_records"] == 2
        assert body["stats"]["avg_intensity"] == pytest.approx(9.0)

    def test_empty_selection_has_null_averages(self, client):
        body = client.get("/api/stats", params={"country": "Atlantis"}).json()
        assert body["stats"]["total_records"] == 0
        assert body["stats"]["avg_intensity"] is None
        assert body["sector_distribution"] == []
