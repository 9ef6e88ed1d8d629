"""
Pydantic request/response models for the API.

JSON field names are camelCase (``costPerUnit``, ``fiscalYear``) through an
alias generator; Python attributes stay snake_case. Optional fields default
to None so catalog records without metadata still validate.

Each ``from_*`` constructor converts an engine/catalog dataclass into its
wire model, keeping routes free of field-by-field copying.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.models import BudgetCategory, BudgetItem, ComparisonUnit, FormattedComparison


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Catalog records ───────────────────────────────────────────────────────────

class UnitOut(_CamelModel):
    """A comparison unit."""
    id: str = Field(..., description="Stable unit identifier", examples=["f35"])
    name: str = Field(..., description="Plural display name", examples=["F-35 Fighter Jets"])
    name_singular: str = Field(..., description="Singular display name", examples=["F-35 Fighter Jet"])
    category: str = Field(..., description="Unit category", examples=["vehicles"])
    cost_per_unit: float = Field(..., description="Cost of one unit in dollars", examples=[80000000])
    description: str | None = Field(None, description="Short description of the unit")
    icon: str | None = Field(None, description="Icon name for the UI", examples=["Plane"])
    source: str | None = Field(None, description="Where the unit cost comes from")
    period: str | None = Field(None, description="Recurrence of the cost, e.g. 'annual'")

    @classmethod
    def from_unit(cls, unit: ComparisonUnit) -> "UnitOut":
        return cls(
            id=unit.id, name=unit.name, name_singular=unit.name_singular,
            category=unit.category, cost_per_unit=unit.cost_per_unit,
            description=unit.description, icon=unit.icon,
            source=unit.source, period=unit.period,
        )


class BudgetItemOut(_CamelModel):
    """A federal budget line item."""
    id: str = Field(..., description="Stable budget item identifier", examples=["defense"])
    name: str = Field(..., description="Display name", examples=["Department of Defense"])
    amount: float = Field(..., description="Amount in dollars", examples=[842000000000])
    tier: str = Field(..., description="department | program | current-event", examples=["department"])
    fiscal_year: int = Field(..., description="Fiscal year", examples=[2025])
    parent_id: str | None = Field(None, description="Containing budget item, if any")
    description: str | None = Field(None, description="What the money pays for")
    source: str | None = Field(None, description="Source of the amount")
    percent_of_parent: float | None = Field(None, description="Share of the parent's amount (%)")
    year_over_year_change: float | None = Field(None, description="Change from prior year (%)")

    @classmethod
    def from_item(cls, item: BudgetItem) -> "BudgetItemOut":
        return cls(
            id=item.id, name=item.name, amount=item.amount, tier=item.tier,
            fiscal_year=item.fiscal_year, parent_id=item.parent_id,
            description=item.description, source=item.source,
            percent_of_parent=item.percent_of_parent,
            year_over_year_change=item.year_over_year_change,
        )


# ── Comparisons ───────────────────────────────────────────────────────────────

class ComparisonOut(_CamelModel):
    """A computed comparison. ``count`` is exact; the strings are rounded."""
    count: float = Field(..., description="amount / costPerUnit, unrounded", examples=[10525])
    formatted: str = Field(..., description="Count and unit name", examples=["10,525 F-35 Fighter Jets"])
    formatted_count: str = Field(..., description="Count formatted for display", examples=["10,525"])
    unit_name: str = Field(..., description="Unit name matching the count", examples=["F-35 Fighter Jets"])
    display_string: str = Field(..., description="Full display string", examples=["10,525 F-35 Fighter Jets"])
    icon: str | None = Field(None, description="Icon name for the unit")

    @classmethod
    def from_result(cls, result: FormattedComparison) -> "ComparisonOut":
        return cls(
            count=result.count,
            formatted=result.display_string,
            formatted_count=result.formatted_count,
            unit_name=result.unit_name,
            display_string=result.display_string,
            icon=result.icon,
        )


class CompareResponse(_CamelModel):
    """Response body of ``GET /api/v1/compare``."""
    budget_item: BudgetItemOut
    unit: UnitOut
    comparison: ComparisonOut
    auto_selected: bool = Field(..., description="True when the unit was chosen by the selector")
    share_id: str = Field(..., description="Shareable comparison id", examples=["defense:f35"])
    share_url: str = Field(..., description="Absolute URL of the comparison page")
    formula: str = Field(..., description="Arithmetic behind the comparison",
                         examples=["$842B ÷ $80M = 10,525 F-35 Fighter Jets"])


class SpendingAlternativeOut(_CamelModel):
    """Another budget item measured in the same unit."""
    budget_item: BudgetItemOut
    count: float
    formatted: str
    ratio: float | None = Field(
        None, description="This item's amount / the selected item's amount; null when the selected item is unfunded",
    )
    interest: int = Field(..., description="How communicable the ratio is (20-100)")
    comparison: str = Field(..., description="Sentence comparing the two amounts")


class UnitAlternativeOut(_CamelModel):
    """Another unit measured against the same budget item."""
    unit: UnitOut
    count: float
    formatted: str
    score: float = Field(..., description="Impact score of the pairing")


class AlternativesResponse(_CamelModel):
    budget_item_id: str
    unit_id: str
    spending: list[SpendingAlternativeOut]
    units: list[UnitAlternativeOut]
    total_spending: int = Field(..., description="Number of spending alternatives available")
    total_units: int = Field(..., description="Number of unit alternatives available")


# ── Search ────────────────────────────────────────────────────────────────────

class BudgetSearchResult(_CamelModel):
    id: str
    name: str
    amount: float
    tier: str
    score: int = Field(..., description="Relevance score (0-100)", examples=[100])


class BudgetSearchResponse(_CamelModel):
    results: list[BudgetSearchResult]
    query: str
    total: int


class UnitSearchResponse(_CamelModel):
    query: str
    categories: list[str] | None = None
    total: int = Field(..., description="Matches before the result cap")
    count: int = Field(..., description="Matches returned")
    units: list[UnitOut]


class UnitCategoryOut(_CamelModel):
    category: str
    count: int


# ── Budget items and hierarchy ────────────────────────────────────────────────

class BudgetItemDetail(_CamelModel):
    """A budget item with its place in the hierarchy."""
    item: BudgetItemOut
    formatted_amount: str = Field(..., examples=["$842B"])
    per_capita: str = Field(..., description="Per-person share of the amount",
                            examples=["$2,513 per person"])
    percent_of_parent: float | None = None
    ancestors: list[BudgetItemOut]
    children: list[BudgetItemOut]
    share_url: str


class BudgetCategoryOut(_CamelModel):
    """Node of the budget category hierarchy."""
    id: str
    name: str
    allocated: float
    spent: float
    category_type: str
    description: str | None = None
    change_from_prior_year: float | None = None
    subcategories: list[BudgetCategoryOut] | None = None

    @classmethod
    def from_category(cls, category: BudgetCategory) -> "BudgetCategoryOut":
        return cls(
            id=category.id, name=category.name,
            allocated=category.allocated, spent=category.spent,
            category_type=category.category_type,
            description=category.description,
            change_from_prior_year=category.change_from_prior_year,
            subcategories=(
                [cls.from_category(c) for c in category.subcategories]
                if category.subcategories is not None else None
            ),
        )


class BudgetHierarchyResponse(_CamelModel):
    fiscal_year: int
    total: float = Field(..., description="Sum of top-level allocations")
    categories: list[BudgetCategoryOut]


# ── Featured ──────────────────────────────────────────────────────────────────

class FeaturedOut(_CamelModel):
    id: str = Field(..., examples=["defense-f35"])
    budget_item_id: str
    budget_item_name: str
    budget_amount: float
    unit_id: str
    unit: UnitOut
    unit_count: float
    formatted: str
    headline: str
    display_order: int
    is_featured: bool


class FeaturedResponse(_CamelModel):
    comparisons: list[FeaturedOut]
    total: int
    shuffled: bool


# ── Priorities wizard ─────────────────────────────────────────────────────────

class WizardCategoryOut(_CamelModel):
    id: str
    name: str


class WizardCategoriesResponse(_CamelModel):
    priorities: list[WizardCategoryOut]
    wasteful: list[WizardCategoryOut]


class WizardComparisonOut(_CamelModel):
    budget_item: BudgetItemOut
    unit: UnitOut
    unit_count: float
    formatted_count: str = Field(..., examples=["12,953,846"])
    headline: str = Field(..., examples=["Department of Defense could fund 9,905,882 Nurse Salaries"])
    is_top_priority: bool
    priority_category: str
    wasteful_category: str


class WizardResponse(_CamelModel):
    priorities: list[str]
    wasteful: list[str]
    top_priority: str | None = None
    comparisons: list[WizardComparisonOut]
    total: int


# ── Favorites ─────────────────────────────────────────────────────────────────

class FavoriteIn(_CamelModel):
    budget_id: str = Field(..., min_length=1, examples=["defense"])
    unit_id: str = Field(..., min_length=1, examples=["f35"])


class FavoriteOut(_CamelModel):
    budget_id: str
    unit_id: str
    saved_at: float = Field(..., description="Unix timestamp when saved")
    share_id: str


class FavoritesResponse(_CamelModel):
    favorites: list[FavoriteOut]
    total: int
    max_items: int


class ToggleResponse(_CamelModel):
    budget_id: str
    unit_id: str
    is_favorite: bool


BudgetCategoryOut.model_rebuild()
