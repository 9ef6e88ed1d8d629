"""Catalog loading and record normalization.

Raw catalog records arrive in a union of shapes:

- units carry their price as ``costPerUnit``, ``cost_per_unit`` or ``cost``
- ``pluralName`` (when present) is the plural display name and ``name`` is
  then the singular form
- ``nameSingular`` may be missing, in which case it is derived from ``name``
  by dropping a trailing "s"
- budget items use camelCase or snake_case keys

Every record passes through one ``normalize_*`` function here and comes out
as a canonical dataclass from ``catalog.models``.  Nothing downstream looks at
raw dicts.
"""

import json
import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Optional

from catalog.models import (
    BudgetCategory,
    BudgetItem,
    ComparisonUnit,
    FeaturedComparison,
)
from engine.errors import CatalogError, ComparisonError, InvalidUnitCostError
from utils.config import DEFAULT_CATALOG_DIR
from utils.patterns import TRAILING_S
from utils.strings import normalize_whitespace, parse_fiscal_year, safe_float

logger = logging.getLogger(__name__)

UNITS_FILE = "units.json"
BUDGET_ITEMS_FILE = "budget_items.json"
CATEGORIES_FILE = "budget_categories.json"
FEATURED_FILE = "featured.json"


def _first(record: dict, *keys: str, default: Any = None) -> Any:
    """Value of the first key present (and not None) in *record*."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def _require_mapping(record: Any, kind: str) -> dict:
    if not isinstance(record, dict):
        raise CatalogError(f"{kind} record must be an object, got {type(record).__name__}: {record!r}")
    return record


def _required_str(record: dict, key: str, kind: str) -> str:
    value = record.get(key)
    if value is None or not normalize_whitespace(str(value)):
        raise CatalogError(f"{kind} record is missing required field {key!r}: {record!r}")
    return normalize_whitespace(str(value))


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    result = safe_float(value, default=math.nan)
    return None if math.isnan(result) else result


# ── Record normalization ──────────────────────────────────────────────────────

def normalize_unit(record: dict) -> ComparisonUnit:
    """Normalize one raw unit record into a ``ComparisonUnit``.

    Raises:
        CatalogError: id, name or category is missing.
        InvalidUnitCostError: cost is missing, not finite, or not > 0.
    """
    _require_mapping(record, "Unit")
    unit_id = _required_str(record, "id", "Unit")
    raw_name = _required_str(record, "name", "Unit")
    plural_name = record.get("pluralName") or record.get("plural_name")

    if plural_name:
        name = normalize_whitespace(str(plural_name))
        fallback_singular = raw_name
    else:
        name = raw_name
        fallback_singular = TRAILING_S.sub("", raw_name)
    singular = _first(record, "nameSingular", "name_singular")
    name_singular = normalize_whitespace(str(singular)) if singular else fallback_singular

    raw_cost = _first(record, "costPerUnit", "cost_per_unit", "cost")
    cost = safe_float(raw_cost, default=math.nan)
    if not math.isfinite(cost) or cost <= 0:
        raise InvalidUnitCostError(unit_id, raw_cost)

    category = record.get("category")
    if not category:
        raise CatalogError(f"Unit {unit_id!r} has no category")

    return ComparisonUnit(
        id=unit_id,
        name=name,
        name_singular=name_singular,
        cost_per_unit=cost,
        category=str(category).strip().lower(),
        description=record.get("description"),
        icon=record.get("icon"),
        source=record.get("source"),
        period=record.get("period"),
    )


def normalize_budget_item(record: dict) -> BudgetItem:
    """Normalize one raw budget item record into a ``BudgetItem``.

    Raises:
        CatalogError: a required field is missing, the amount is negative or
            not finite, or the fiscal year cannot be parsed.
    """
    _require_mapping(record, "Budget item")
    item_id = _required_str(record, "id", "Budget item")
    name = _required_str(record, "name", "Budget item")

    raw_amount = record.get("amount")
    amount = safe_float(raw_amount, default=math.nan)
    if not math.isfinite(amount) or amount < 0:
        raise CatalogError(
            f"Budget item {item_id!r} has invalid amount {raw_amount!r}; "
            "amount must be a finite number >= 0"
        )

    tier = record.get("tier")
    if not tier:
        raise CatalogError(f"Budget item {item_id!r} has no tier")

    fiscal_year = parse_fiscal_year(_first(record, "fiscalYear", "fiscal_year"))
    if fiscal_year is None:
        raise CatalogError(f"Budget item {item_id!r} has no valid fiscal year")

    related = _first(record, "relatedCategories", "related_categories", default=())
    if isinstance(related, str):
        related = [related]

    return BudgetItem(
        id=item_id,
        name=name,
        amount=amount,
        tier=str(tier).strip().lower(),
        fiscal_year=fiscal_year,
        parent_id=_first(record, "parentId", "parent_id"),
        description=record.get("description"),
        source=record.get("source"),
        percent_of_parent=_optional_float(
            _first(record, "percentOfParent", "percent_of_parent")),
        year_over_year_change=_optional_float(
            _first(record, "yearOverYearChange", "year_over_year_change")),
        related_categories=tuple(str(c).strip().lower() for c in related),
    )


def normalize_category(record: dict) -> BudgetCategory:
    """Recursively normalize a budget category node and its subcategories."""
    _require_mapping(record, "Budget category")
    category_id = _required_str(record, "id", "Budget category")
    name = _required_str(record, "name", "Budget category")
    children = record.get("subcategories")
    return BudgetCategory(
        id=category_id,
        name=name,
        allocated=safe_float(record.get("allocated")),
        spent=safe_float(record.get("spent")),
        category_type=_first(record, "categoryType", "category_type", default="department"),
        description=record.get("description"),
        change_from_prior_year=_optional_float(
            _first(record, "changeFromPriorYear", "change_from_prior_year")),
        subcategories=(
            [normalize_category(child) for child in children]
            if children is not None else None
        ),
    )


def normalize_featured(record: dict) -> FeaturedComparison:
    _require_mapping(record, "Featured comparison")
    budget_item_id = _first(record, "budgetItemId", "budget_item_id")
    unit_id = _first(record, "unitId", "unit_id")
    if not budget_item_id or not unit_id:
        raise CatalogError(f"Featured comparison needs budgetItemId and unitId: {record!r}")
    raw_order = _first(record, "displayOrder", "display_order", default=0)
    try:
        display_order = int(raw_order)
    except (TypeError, ValueError):
        raise CatalogError(
            f"Featured comparison {budget_item_id}-{unit_id} has invalid displayOrder {raw_order!r}"
        ) from None
    return FeaturedComparison(
        budget_item_id=str(budget_item_id),
        unit_id=str(unit_id),
        headline=record.get("headline") or "",
        display_order=display_order,
        is_featured=bool(_first(record, "isFeatured", "is_featured", default=True)),
    )


def _normalize_all(records: Iterable[dict], normalize, kind: str, strict: bool) -> list:
    """Normalize *records*, rejecting duplicate ids.

    With ``strict=False`` malformed records are logged and skipped instead of
    aborting the load. Duplicate ids are always fatal.
    """
    result = []
    seen: set[str] = set()
    for record in records:
        try:
            obj = normalize(record)
        except ComparisonError as exc:
            if strict:
                raise
            logger.warning("Skipping invalid %s record: %s", kind, exc)
            continue
        obj_id = getattr(obj, "id", None)
        if obj_id is not None:
            if obj_id in seen:
                raise CatalogError(f"Duplicate {kind} id {obj_id!r}")
            seen.add(obj_id)
        result.append(obj)
    return result


# ── File loading ──────────────────────────────────────────────────────────────

def _read_records(path: Path, key: str) -> list[dict]:
    """Read a JSON table: either a bare list or ``{key: [...]}``."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise CatalogError(f"{path} does not contain a list of {key}")
    return data


def load_units(path: Path, strict: bool = True) -> list[ComparisonUnit]:
    return _normalize_all(_read_records(Path(path), "units"), normalize_unit, "unit", strict)


def load_budget_items(path: Path, strict: bool = True) -> list[BudgetItem]:
    return _normalize_all(
        _read_records(Path(path), "items"), normalize_budget_item, "budget item", strict)


def load_categories(path: Path) -> tuple[int, list[BudgetCategory]]:
    """Load the category hierarchy file.

    Returns:
        ``(fiscal_year, categories)``
    """
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise CatalogError(f"{path} must contain an object with fiscalYear and categories")
    fiscal_year = parse_fiscal_year(data.get("fiscalYear"))
    if fiscal_year is None:
        raise CatalogError(f"{path} has no valid fiscalYear")
    return fiscal_year, [normalize_category(r) for r in data.get("categories", [])]


def load_featured(path: Path, strict: bool = True) -> list[FeaturedComparison]:
    featured = _normalize_all(
        _read_records(Path(path), "featured"), normalize_featured, "featured comparison", strict)
    return sorted(featured, key=lambda f: f.display_order)


# ── Catalog ───────────────────────────────────────────────────────────────────

class Catalog:
    """In-memory, read-only view over the unit and budget item tables.

    Lookups by id return ``None`` on a miss; translating a miss into an HTTP
    status is the caller's job.
    """

    def __init__(self, units: Iterable[ComparisonUnit] = (),
                 budget_items: Iterable[BudgetItem] = (),
                 categories: Optional[dict[int, list[BudgetCategory]]] = None,
                 featured: Iterable[FeaturedComparison] = ()):
        self.units: list[ComparisonUnit] = list(units)
        self.budget_items: list[BudgetItem] = list(budget_items)
        self.categories: dict[int, list[BudgetCategory]] = dict(categories or {})
        self.featured: list[FeaturedComparison] = list(featured)

        self._units_by_id = self._index(self.units, "unit")
        self._items_by_id = self._index(self.budget_items, "budget item")

    @staticmethod
    def _index(records, kind: str) -> dict:
        index = {}
        for record in records:
            if record.id in index:
                raise CatalogError(f"Duplicate {kind} id {record.id!r}")
            index[record.id] = record
        return index

    def get_unit(self, unit_id: str) -> Optional[ComparisonUnit]:
        return self._units_by_id.get(unit_id)

    def get_item(self, item_id: str) -> Optional[BudgetItem]:
        return self._items_by_id.get(item_id)

    def units_by_category(self, category: str) -> list[ComparisonUnit]:
        category = category.strip().lower()
        return [u for u in self.units if u.category == category]

    def items_by_tier(self, tier: str) -> list[BudgetItem]:
        tier = tier.strip().lower()
        return [i for i in self.budget_items if i.tier == tier]

    def items_by_parent(self, parent_id: Optional[str]) -> list[BudgetItem]:
        return [i for i in self.budget_items if i.parent_id == parent_id]

    def unit_categories(self) -> list[str]:
        """Distinct unit categories in catalog order."""
        return list(dict.fromkeys(u.category for u in self.units))

    def fiscal_years(self) -> list[int]:
        return sorted(self.categories)

    def stats(self) -> dict[str, int]:
        return {
            "units": len(self.units),
            "budget_items": len(self.budget_items),
            "featured": len(self.featured),
            "fiscal_years": len(self.categories),
        }


def load_catalog(data_dir: Optional[Path] = None, strict: bool = False) -> Catalog:
    """Load every catalog table found in *data_dir*.

    Missing optional tables (categories, featured) load as empty.
    """
    data_dir = Path(data_dir) if data_dir is not None else DEFAULT_CATALOG_DIR
    units = load_units(data_dir / UNITS_FILE, strict=strict)
    items = load_budget_items(data_dir / BUDGET_ITEMS_FILE, strict=strict)

    categories: dict[int, list[BudgetCategory]] = {}
    categories_path = data_dir / CATEGORIES_FILE
    if categories_path.exists():
        year, tree = load_categories(categories_path)
        categories[year] = tree

    featured_path = data_dir / FEATURED_FILE
    featured = load_featured(featured_path, strict=strict) if featured_path.exists() else []

    logger.info(
        "Loaded catalog from %s: %d units, %d budget items, %d featured",
        data_dir, len(units), len(items), len(featured),
    )
    return Catalog(units, items, categories, featured)


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Return the packaged catalog, loading it on first use."""
    return load_catalog()
