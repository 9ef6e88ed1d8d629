"""
Endpoint tests for the REST API (api/routes/*).

Every test runs against the fixture catalog through FastAPI's TestClient;
JSON bodies use camelCase field names.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

API = "/api/v1"


# ── /compare ──────────────────────────────────────────────────────────────────

class TestCompareEndpoint:
    def test_explicit_unit(self, client):
        resp = client.get(f"{API}/compare", params={"budgetId": "defense", "unitId": "f35"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["budgetItem"]["id"] == "defense"
        assert data["budgetItem"]["fiscalYear"] == 2025
        assert data["unit"]["costPerUnit"] == 80_000_000
        assert data["unit"]["nameSingular"] == "F-35 Fighter Jet"
        assert data["comparison"]["count"] == 10525
        assert data["comparison"]["formatted"] == "10,525 F-35 Fighter Jets"
        assert data["comparison"]["formattedCount"] == "10,525"
        assert data["autoSelected"] is False
        assert data["shareId"] == "defense:f35"
        assert data["shareUrl"] == "https://example.test/compare/defense:f35"
        assert data["formula"] == "$842B ÷ $80M = 10,525 F-35 Fighter Jets"

    def test_auto_selected_unit(self, client):
        data = client.get(f"{API}/compare", params={"budgetId": "defense"}).json()
        assert data["autoSelected"] is True
        assert data["unit"]["id"] == "james-webb-telescope"

    def test_blank_unit_id_means_auto(self, client):
        data = client.get(f"{API}/compare", params={"budgetId": "defense", "unitId": " "}).json()
        assert data["autoSelected"] is True

    def test_missing_budget_id(self, client):
        resp = client.get(f"{API}/compare")
        assert resp.status_code == 400
        assert "budgetId" in resp.json()["detail"]

    def test_unknown_budget_item(self, client):
        resp = client.get(f"{API}/compare", params={"budgetId": "nope"})
        assert resp.status_code == 404

    def test_unknown_unit(self, client):
        resp = client.get(f"{API}/compare", params={"budgetId": "defense", "unitId": "nope"})
        assert resp.status_code == 404
        assert "nope" in resp.json()["detail"]

    def test_public_cache_headers(self, client):
        resp = client.get(f"{API}/compare", params={"budgetId": "defense", "unitId": "f35"})
        assert resp.headers["Cache-Control"].startswith("public")


class TestSharedComparison:
    def test_by_share_id(self, client):
        resp = client.get(f"{API}/comparisons/nasa:james-webb-telescope")
        assert resp.status_code == 200
        data = resp.json()
        assert data["comparison"]["formatted"] == "2.5 James Webb Space Telescopes"
        assert data["autoSelected"] is False

    def test_malformed_share_id(self, client):
        assert client.get(f"{API}/comparisons/defense").status_code == 400

    def test_unknown_share_id(self, client):
        assert client.get(f"{API}/comparisons/defense:ghost").status_code == 404


class TestAlternativesEndpoint:
    def test_lists_and_totals(self, client):
        resp = client.get(f"{API}/compare/alternatives",
                          params={"budgetId": "nasa", "unitId": "james-webb-telescope"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["totalSpending"] == 3
        assert data["totalUnits"] == 6
        assert data["spending"][0]["budgetItem"]["id"] == "f35-procurement"
        assert data["spending"][0]["interest"] == 90
        assert data["units"][0]["unit"]["id"] == "public-school"

    def test_limit(self, client):
        data = client.get(f"{API}/compare/alternatives",
                          params={"budgetId": "nasa", "unitId": "james-webb-telescope",
                                  "limit": 1}).json()
        assert len(data["spending"]) == 1
        assert len(data["units"]) == 1
        assert data["totalUnits"] == 6

    def test_unfunded_item(self, client):
        resp = client.get(f"{API}/compare/alternatives",
                          params={"budgetId": "zero-item", "unitId": "f35"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["totalSpending"] == 4
        assert data["spending"][0]["budgetItem"]["id"] == "defense"
        assert data["spending"][0]["ratio"] is None
        assert data["spending"][0]["count"] == 10525

    def test_invalid_limit(self, client):
        resp = client.get(f"{API}/compare/alternatives",
                          params={"budgetId": "nasa", "unitId": "f35", "limit": 0})
        assert resp.status_code == 422

    def test_unknown_ids(self, client):
        resp = client.get(f"{API}/compare/alternatives",
                          params={"budgetId": "nasa", "unitId": "ghost"})
        assert resp.status_code == 404

    def test_missing_params(self, client):
        assert client.get(f"{API}/compare/alternatives").status_code == 422


# ── /budget ───────────────────────────────────────────────────────────────────

class TestBudgetHierarchy:
    def test_latest_year_by_default(self, client):
        data = client.get(f"{API}/budget").json()
        assert data["fiscalYear"] == 2025
        assert data["total"] == 867e9
        assert [c["id"] for c in data["categories"]] == ["defense", "science"]
        assert data["categories"][0]["categoryType"] == "department"
        assert "subcategories" not in data["categories"][1]

    def test_level_one(self, client):
        data = client.get(f"{API}/budget", params={"fiscalYear": 2025, "level": 1}).json()
        assert all("subcategories" not in c for c in data["categories"])

    def test_level_two(self, client):
        data = client.get(f"{API}/budget", params={"level": 2}).json()
        navy = data["categories"][0]["subcategories"][0]
        assert navy["id"] == "navy"
        assert "subcategories" not in navy

    @pytest.mark.parametrize("level", ["0", "-2", "abc"])
    def test_invalid_level(self, client, level):
        resp = client.get(f"{API}/budget", params={"level": level})
        assert resp.status_code == 400

    @pytest.mark.parametrize("year", ["1999", "2101", "twenty"])
    def test_invalid_fiscal_year(self, client, year):
        resp = client.get(f"{API}/budget", params={"fiscalYear": year})
        assert resp.status_code == 400

    def test_unavailable_fiscal_year(self, client):
        resp = client.get(f"{API}/budget", params={"fiscalYear": 2024})
        assert resp.status_code == 404
        assert "2025" in resp.json()["detail"]


class TestBudgetSearch:
    def test_exact_match_first(self, client):
        data = client.get(f"{API}/budget/search", params={"q": "defense"}).json()
        assert data["results"][0] == {
            "id": "defense", "name": "Department of Defense",
            "amount": 842_000_000_000, "tier": "department", "score": 100,
        }
        assert data["total"] == len(data["results"])

    def test_empty_query(self, client):
        resp = client.get(f"{API}/budget/search", params={"q": ""})
        assert resp.status_code == 200
        assert resp.json() == {"results": [], "query": "", "total": 0}

    def test_missing_query(self, client):
        assert client.get(f"{API}/budget/search").json()["total"] == 0


class TestBudgetItems:
    def test_list_all(self, client):
        assert len(client.get(f"{API}/budget/items").json()) == 5

    def test_filter_by_tier(self, client):
        data = client.get(f"{API}/budget/items", params={"tier": "program"}).json()
        assert [i["id"] for i in data] == ["f35-procurement"]

    def test_filter_by_parent(self, client):
        data = client.get(f"{API}/budget/items", params={"parentId": "defense"}).json()
        assert [i["id"] for i in data] == ["f35-procurement"]

    def test_invalid_tier(self, client):
        assert client.get(f"{API}/budget/items", params={"tier": "agency"}).status_code == 400

    def test_item_detail(self, client):
        data = client.get(f"{API}/budget/items/f35-procurement").json()
        assert data["item"]["parentId"] == "defense"
        assert data["formattedAmount"] == "$12B"
        assert data["perCapita"] == "$35.82 per person"
        assert data["percentOfParent"] == pytest.approx(12 / 842 * 100)
        assert [a["id"] for a in data["ancestors"]] == ["defense"]
        assert data["children"] == []
        assert data["shareUrl"] == "https://example.test/budget/defense/f35-procurement"

    def test_root_detail(self, client):
        data = client.get(f"{API}/budget/items/defense").json()
        assert data["perCapita"] == "$2,513 per person"
        assert data["percentOfParent"] is None
        assert [c["id"] for c in data["children"]] == ["f35-procurement"]

    def test_unknown_item(self, client):
        assert client.get(f"{API}/budget/items/nope").status_code == 404


# ── /units ────────────────────────────────────────────────────────────────────

class TestUnitsEndpoints:
    def test_list(self, client):
        assert len(client.get(f"{API}/units").json()) == 7

    def test_list_by_category(self, client):
        data = client.get(f"{API}/units", params={"category": "vehicles"}).json()
        assert [u["id"] for u in data] == ["f35"]

    def test_categories(self, client):
        data = client.get(f"{API}/units/categories").json()
        assert {"category": "vehicles", "count": 1} in data
        assert sum(c["count"] for c in data) == 7

    def test_get_unit(self, client):
        data = client.get(f"{API}/units/teacher-salary").json()
        assert data["period"] == "annual"
        assert data["costPerUnit"] == 65_000

    def test_unknown_unit(self, client):
        assert client.get(f"{API}/units/nope").status_code == 404

    def test_search(self, client):
        data = client.get(f"{API}/units/search", params={"q": "Teacher"}).json()
        assert data["query"] == "teacher"
        assert data["total"] == 1
        assert data["count"] == 1
        assert data["units"][0]["id"] == "teacher-salary"

    def test_search_with_categories(self, client):
        data = client.get(f"{API}/units/search",
                          params={"q": "salary", "category": "education, healthcare"}).json()
        assert data["categories"] == ["education", "healthcare"]
        assert {u["id"] for u in data["units"]} == {"teacher-salary", "nurse-salary"}

    def test_search_empty_query(self, client):
        resp = client.get(f"{API}/units/search", params={"q": "  "})
        assert resp.status_code == 200
        assert resp.json()["units"] == []
        assert resp.json()["total"] == 0


# ── /featured ─────────────────────────────────────────────────────────────────

class TestFeaturedEndpoint:
    def test_display_order(self, client):
        data = client.get(f"{API}/featured").json()
        assert data["total"] == 3
        assert data["shuffled"] is False
        first = data["comparisons"][0]
        assert first["id"] == "defense-f35"
        assert first["formatted"] == "10,525 F-35 Fighter Jets"
        assert first["unitCount"] == 10525
        assert first["unit"]["id"] == "f35"
        assert first["headline"] == "A year of defense spending"

    def test_limit(self, client):
        data = client.get(f"{API}/featured", params={"limit": 2}).json()
        assert data["total"] == 2

    def test_random(self, client):
        data = client.get(f"{API}/featured", params={"random": "true"}).json()
        assert data["shuffled"] is True
        assert sorted(c["id"] for c in data["comparisons"]) == [
            "defense-f35", "education-teacher-salary", "nasa-james-webb-telescope",
        ]

    @pytest.mark.parametrize("limit", ["0", "-1", "many"])
    def test_invalid_limit(self, client, limit):
        resp = client.get(f"{API}/featured", params={"limit": limit})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid limit parameter. Must be a positive integer."


# ── /favorites ────────────────────────────────────────────────────────────────

class TestFavoritesEndpoints:
    def test_add_and_list(self, client):
        resp = client.post(f"{API}/favorites", json={"budgetId": "defense", "unitId": "f35"})
        assert resp.status_code == 201
        assert resp.json()["shareId"] == "defense:f35"

        data = client.get(f"{API}/favorites").json()
        assert data["total"] == 1
        assert data["maxItems"] == 50
        assert data["favorites"][0]["budgetId"] == "defense"

    def test_newest_first(self, client):
        client.post(f"{API}/favorites", json={"budgetId": "defense", "unitId": "f35"})
        client.post(f"{API}/favorites", json={"budgetId": "nasa", "unitId": "coffee"})
        data = client.get(f"{API}/favorites").json()
        assert [f["shareId"] for f in data["favorites"]] == ["nasa:coffee", "defense:f35"]

    def test_unknown_references(self, client):
        resp = client.post(f"{API}/favorites", json={"budgetId": "ghost", "unitId": "f35"})
        assert resp.status_code == 404
        resp = client.post(f"{API}/favorites", json={"budgetId": "defense", "unitId": "ghost"})
        assert resp.status_code == 404

    def test_invalid_body(self, client):
        resp = client.post(f"{API}/favorites", json={"budgetId": "", "unitId": "f35"})
        assert resp.status_code == 422

    def test_toggle(self, client):
        body = {"budgetId": "defense", "unitId": "f35"}
        assert client.post(f"{API}/favorites/toggle", json=body).json()["isFavorite"] is True
        assert client.post(f"{API}/favorites/toggle", json=body).json()["isFavorite"] is False

    def test_remove(self, client):
        client.post(f"{API}/favorites", json={"budgetId": "defense", "unitId": "f35"})
        params = {"budgetId": "defense", "unitId": "f35"}
        assert client.delete(f"{API}/favorites", params=params).status_code == 204
        assert client.delete(f"{API}/favorites", params=params).status_code == 404

    def test_clear(self, client, favorites_store):
        client.post(f"{API}/favorites", json={"budgetId": "defense", "unitId": "f35"})
        assert client.delete(f"{API}/favorites/all").status_code == 204
        assert len(favorites_store) == 0

    def test_never_publicly_cached(self, client):
        resp = client.get(f"{API}/favorites")
        assert resp.headers["Cache-Control"] == "private, no-cache"


# ── /wizard ───────────────────────────────────────────────────────────────────

class TestWizardEndpoint:
    def test_comparisons(self, client):
        resp = client.get(f"{API}/wizard", params={
            "priorities": "education,healthcare", "wasteful": "defense", "top": "healthcare",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["priorities"] == ["education", "healthcare"]
        assert data["topPriority"] == "healthcare"
        assert data["total"] == 4
        first = data["comparisons"][0]
        assert first["budgetItem"]["id"] == "defense"
        assert first["unit"]["id"] == "nurse-salary"
        assert first["isTopPriority"] is True
        assert first["formattedCount"] == "9,905,882"
        assert first["headline"] == "Department of Defense could fund 9,905,882 Nurse Salaries (annual)"

    def test_top_defaults_to_first_priority(self, client):
        data = client.get(f"{API}/wizard", params={
            "priorities": "Education, healthcare", "wasteful": "defense",
        }).json()
        assert data["topPriority"] == "education"
        assert data["comparisons"][0]["unit"]["id"] == "teacher-salary"

    @pytest.mark.parametrize("params", [
        {"wasteful": "defense"},
        {"priorities": "education"},
        {"priorities": " , ", "wasteful": "defense"},
        {"priorities": "astrology", "wasteful": "defense"},
        {"priorities": "education", "wasteful": "lasers"},
        {"priorities": "education", "wasteful": "defense", "top": "housing"},
    ])
    def test_bad_params(self, client, params):
        assert client.get(f"{API}/wizard", params=params).status_code == 400

    def test_no_matches_is_empty(self, client):
        data = client.get(f"{API}/wizard", params={
            "priorities": "housing", "wasteful": "other",
        }).json()
        assert data["comparisons"] == []
        assert data["total"] == 0

    def test_categories(self, client):
        data = client.get(f"{API}/wizard/categories").json()
        assert {"id": "science", "name": "Science & Research"} in data["priorities"]
        assert [c["id"] for c in data["wasteful"]][0] == "defense"


# ── /export ───────────────────────────────────────────────────────────────────

def _csv_records(text):
    import csv
    lines = [line for line in text.splitlines() if not line.startswith("#")]
    return list(csv.DictReader(lines))


class TestExportEndpoint:
    def test_units_csv(self, client):
        resp = client.get(f"{API}/export/units")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["X-Total-Count"] == "7"
        assert "units-export.csv" in resp.headers["Content-Disposition"]
        assert resp.text.startswith("# Source: Budget Comparisons")
        rows = _csv_records(resp.text)
        assert len(rows) == 7
        assert rows[0]["id"] == "f35"
        assert rows[0]["formattedCost"] == "$80,000,000"

    def test_budget_json(self, client):
        resp = client.get(f"{API}/export/budget", params={"format": "json"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["_metadata"]["total_records"] == 5
        by_id = {r["id"]: r for r in data["records"]}
        assert by_id["f35-procurement"]["level"] == 1
        assert by_id["defense"]["formattedAmount"] == "$842,000,000,000"

    def test_categories_csv(self, client):
        rows = _csv_records(client.get(f"{API}/export/categories").text)
        assert [(r["fiscalYear"], r["id"], r["parentName"]) for r in rows] == [
            ("2025", "defense", ""),
            ("2025", "navy", "Defense"),
            ("2025", "shipbuilding", "Navy"),
            ("2025", "science", ""),
        ]

    def test_featured(self, client):
        data = client.get(f"{API}/export/featured", params={"format": "json"}).json()
        titles = [r["title"] for r in data["records"]]
        assert titles == [
            "A year of defense spending",
            "NASA's budget could build 2.5 Webb telescopes",
            "Teachers on the education budget",
        ]
        assert data["records"][0]["comparisonText"] == "10,525 F-35 Fighter Jets"

    def test_single_comparison(self, client):
        resp = client.get(f"{API}/export/comparison",
                          params={"budgetId": "defense", "unitId": "f35"})
        assert resp.status_code == 200
        record = resp.json()["records"][0]
        assert record["title"] == "Custom Comparison"
        assert record["unitCount"] == 10525
        assert record["formattedAmount"] == "$842,000,000,000"

    def test_single_comparison_csv(self, client):
        resp = client.get(f"{API}/export/comparison",
                          params={"budgetId": "nasa", "unitId": "james-webb-telescope",
                                  "format": "csv"})
        rows = _csv_records(resp.text)
        assert rows[0]["comparisonText"] == "2.5 James Webb Space Telescopes"

    def test_unknown_comparison(self, client):
        resp = client.get(f"{API}/export/comparison",
                          params={"budgetId": "defense", "unitId": "ghost"})
        assert resp.status_code == 404

    def test_bad_dataset_or_format(self, client):
        assert client.get(f"{API}/export/secrets").status_code == 422
        assert client.get(f"{API}/export/units", params={"format": "xml"}).status_code == 422
