"""
Pytest fixtures for the budget comparisons tests.

Provides a small in-memory catalog built from raw records (so the loader's
normalization runs on every test session), an on-disk copy of the same
records for loader tests, and a TestClient over an app wired to that catalog
with an in-memory favorites store.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from catalog.loader import (
    Catalog,
    normalize_budget_item,
    normalize_category,
    normalize_featured,
    normalize_unit,
)
from stores.favorites import FavoritesStore, MemoryBackend
from utils.config import AppConfig

# ── Raw catalog records ───────────────────────────────────────────────────────
# Mixed key shapes on purpose: "cost" vs "costPerUnit", with and without
# nameSingular, and one pluralName record.

RAW_UNITS = [
    {"id": "f35", "name": "F-35 Fighter Jets", "nameSingular": "F-35 Fighter Jet",
     "costPerUnit": 80_000_000, "category": "vehicles", "icon": "Plane",
     "description": "Fifth-generation stealth fighter", "source": "GAO"},
    {"id": "james-webb-telescope", "name": "James Webb Space Telescopes",
     "nameSingular": "James Webb Space Telescope", "costPerUnit": 10_000_000_000,
     "category": "misc", "description": "Infrared space observatory", "source": "NASA"},
    {"id": "teacher-salary", "name": "Teacher Salaries (annual)",
     "nameSingular": "Teacher Salary (annual)", "costPerUnit": 65_000,
     "category": "education", "description": "Average public school teacher pay",
     "source": "NCES", "period": "annual"},
    {"id": "public-school", "name": "Public Schools", "costPerUnit": 50_000_000,
     "category": "buildings", "description": "New elementary school construction",
     "source": "NCES"},
    {"id": "city-bus", "name": "City Buses", "nameSingular": "City Bus",
     "cost": 500_000, "category": "transportation",
     "description": "Diesel transit bus"},
    {"id": "coffee", "name": "Cups of Coffee", "nameSingular": "Cup of Coffee",
     "costPerUnit": 5, "category": "everyday", "description": "A cafe latte"},
    {"id": "nurse-salary", "name": "Nurse Salary (annual)",
     "pluralName": "Nurse Salaries (annual)", "costPerUnit": 85_000,
     "category": "healthcare", "description": "Registered nurse pay"},
]

RAW_BUDGET_ITEMS = [
    {"id": "defense", "name": "Department of Defense", "amount": 842_000_000_000,
     "tier": "department", "fiscalYear": 2025, "relatedCategories": ["vehicles"],
     "description": "Military spending", "source": "OMB"},
    {"id": "nasa", "name": "NASA", "amount": 25_000_000_000, "tier": "department",
     "fiscalYear": 2025, "description": "Space agency", "source": "OMB"},
    {"id": "education", "name": "Department of Education", "amount": 80_000_000_000,
     "tier": "department", "fiscalYear": 2025, "relatedCategories": ["education"],
     "description": "Federal education programs", "source": "OMB"},
    {"id": "f35-procurement", "name": "F-35 Procurement", "amount": 12_000_000_000,
     "tier": "program", "fiscalYear": 2025, "parentId": "defense",
     "description": "Joint Strike Fighter buys", "source": "DoD"},
    {"id": "zero-item", "name": "Unfunded Initiative", "amount": 0,
     "tier": "current-event", "fiscalYear": 2025},
]

RAW_CATEGORIES = {
    "fiscalYear": 2025,
    "categories": [
        {"id": "defense", "name": "Defense", "allocated": 842e9, "spent": 800e9,
         "categoryType": "department",
         "subcategories": [
             {"id": "navy", "name": "Navy", "allocated": 250e9, "spent": 240e9,
              "categoryType": "agency",
              "subcategories": [
                  {"id": "shipbuilding", "name": "Shipbuilding", "allocated": 32e9,
                   "spent": 30e9, "categoryType": "program"},
              ]},
         ]},
        {"id": "science", "name": "Science", "allocated": 25e9, "spent": 24e9,
         "categoryType": "department"},
    ],
}

RAW_FEATURED = [
    {"budgetItemId": "nasa", "unitId": "james-webb-telescope",
     "headline": "NASA's budget could build 2.5 Webb telescopes", "displayOrder": 2},
    {"budgetItemId": "defense", "unitId": "f35",
     "headline": "A year of defense spending", "displayOrder": 1},
    {"budgetItemId": "education", "unitId": "teacher-salary",
     "headline": "Teachers on the education budget", "displayOrder": 3},
]


def build_catalog() -> Catalog:
    """Normalize the raw records above into a Catalog."""
    return Catalog(
        units=[normalize_unit(r) for r in RAW_UNITS],
        budget_items=[normalize_budget_item(r) for r in RAW_BUDGET_ITEMS],
        categories={
            RAW_CATEGORIES["fiscalYear"]:
                [normalize_category(r) for r in RAW_CATEGORIES["categories"]],
        },
        featured=sorted(
            (normalize_featured(r) for r in RAW_FEATURED),
            key=lambda f: f.display_order,
        ),
    )


@pytest.fixture()
def catalog():
    return build_catalog()


@pytest.fixture()
def units(catalog):
    return catalog.units


@pytest.fixture()
def budget_items(catalog):
    return catalog.budget_items


@pytest.fixture()
def catalog_dir(tmp_path):
    """Write the raw records to a catalog directory, in the wrapped JSON shape."""
    data_dir = tmp_path / "catalog"
    data_dir.mkdir()
    (data_dir / "units.json").write_text(json.dumps({"units": RAW_UNITS}))
    (data_dir / "budget_items.json").write_text(json.dumps({"items": RAW_BUDGET_ITEMS}))
    (data_dir / "budget_categories.json").write_text(json.dumps(RAW_CATEGORIES))
    (data_dir / "featured.json").write_text(json.dumps({"featured": RAW_FEATURED}))
    return data_dir


@pytest.fixture()
def app_config():
    config = AppConfig()
    config.base_url = "https://example.test"
    config.cors_origins = ["*"]
    config.trusted_proxies = set()
    return config


@pytest.fixture()
def favorites_store():
    return FavoritesStore(MemoryBackend())


@pytest.fixture()
def app(catalog, app_config, favorites_store):
    from api.app import create_app
    return create_app(catalog=catalog, config=app_config, favorites_store=favorites_store)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c
