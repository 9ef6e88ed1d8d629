"""Canonical record types for the comparison catalogs.

Raw JSON records come in several shapes; ``catalog.loader`` normalizes them
into these dataclasses so the engine never has to guess field names.
"""

from dataclasses import dataclass, field
from typing import Optional

from utils.formatting import pluralize


@dataclass(frozen=True)
class ComparisonUnit:
    """A real-world purchasable thing used as a yardstick for spending."""

    id: str
    name: str
    name_singular: str
    cost_per_unit: float
    category: str
    description: Optional[str] = None
    icon: Optional[str] = None
    source: Optional[str] = None
    period: Optional[str] = None

    def display_name(self, count: float) -> str:
        """Singular name for a count of exactly 1, plural name otherwise."""
        return pluralize(count, self.name_singular, self.name)


@dataclass(frozen=True)
class BudgetItem:
    """A federal spending line: a department, a program or a current event."""

    id: str
    name: str
    amount: float
    tier: str
    fiscal_year: int
    parent_id: Optional[str] = None
    description: Optional[str] = None
    source: Optional[str] = None
    percent_of_parent: Optional[float] = None
    year_over_year_change: Optional[float] = None
    related_categories: tuple[str, ...] = ()


@dataclass
class BudgetCategory:
    """Node of the budget category hierarchy.

    A parent owns its ``subcategories`` list outright; ``None`` means the
    node has no children (or they were pruned by ``limit_depth``).
    """

    id: str
    name: str
    allocated: float
    spent: float
    category_type: str
    description: Optional[str] = None
    change_from_prior_year: Optional[float] = None
    subcategories: Optional[list["BudgetCategory"]] = None


@dataclass(frozen=True)
class FeaturedComparison:
    """A curated budget item and unit pairing with a headline."""

    budget_item_id: str
    unit_id: str
    headline: str
    display_order: int = 0
    is_featured: bool = True


@dataclass(frozen=True)
class ComparisonCalculation:
    """Raw count plus its short display string, e.g. ``"10,525 F-35 Fighter Jets"``."""

    count: float
    formatted: str


@dataclass(frozen=True)
class FormattedComparison:
    """Everything the UI needs to render one comparison."""

    amount: float
    unit: ComparisonUnit
    count: float
    formatted_count: str
    unit_name: str
    display_string: str
    icon: Optional[str] = None


@dataclass
class BudgetTree:
    """Budget items arranged by ``parent_id`` links."""

    roots: list[BudgetItem] = field(default_factory=list)
    children: dict[str, list[BudgetItem]] = field(default_factory=dict)

    @property
    def total_amount(self) -> float:
        return sum(item.amount for item in self.roots)

    def children_of(self, item_id: str) -> list[BudgetItem]:
        return self.children.get(item_id, [])
