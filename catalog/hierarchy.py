"""Budget hierarchy helpers.

Two trees live in the catalog:

- the category hierarchy (``BudgetCategory`` nodes that own their
  ``subcategories`` lists), served by the budget overview endpoint
- the budget item tree, implied by each item's weak ``parent_id`` link
"""

from dataclasses import replace
from typing import Iterable, Optional

from catalog.models import BudgetCategory, BudgetItem, BudgetTree


def limit_depth(categories: Iterable[BudgetCategory], max_depth: int) -> list[BudgetCategory]:
    """Return a pruned copy of *categories* at most *max_depth* levels deep.

    ``max_depth <= 0`` yields an empty list; ``max_depth == 1`` keeps the
    top level only, with ``subcategories`` set to None. The input tree is
    never mutated.
    """
    if max_depth <= 0:
        return []
    result = []
    for category in categories:
        children = None
        if max_depth > 1 and category.subcategories is not None:
            children = limit_depth(category.subcategories, max_depth - 1)
        result.append(replace(category, subcategories=children))
    return result


def tree_depth(categories: Iterable[BudgetCategory]) -> int:
    """Number of levels in the category forest (0 for an empty forest)."""
    depth = 0
    for category in categories:
        depth = max(depth, 1 + tree_depth(category.subcategories or []))
    return depth


def total_allocated(categories: Iterable[BudgetCategory]) -> float:
    """Sum of ``allocated`` over the top level only."""
    return sum(c.allocated for c in categories)


def build_hierarchy(items: Iterable[BudgetItem]) -> BudgetTree:
    """Arrange budget items into a tree using their ``parent_id`` links.

    Items whose parent is absent from *items* are treated as roots. Catalog
    order is preserved among siblings.
    """
    items = list(items)
    ids = {item.id for item in items}
    tree = BudgetTree()
    for item in items:
        if item.parent_id is None or item.parent_id not in ids or item.parent_id == item.id:
            tree.roots.append(item)
        else:
            tree.children.setdefault(item.parent_id, []).append(item)
    return tree


def get_ancestors(item: BudgetItem, items: Iterable[BudgetItem]) -> list[BudgetItem]:
    """Ancestors of *item* ordered from the root down to its direct parent.

    Stops at a missing parent or when a cycle would be entered.
    """
    by_id = {i.id: i for i in items}
    chain: list[BudgetItem] = []
    seen = {item.id}
    parent_id = item.parent_id
    while parent_id is not None and parent_id not in seen:
        parent = by_id.get(parent_id)
        if parent is None:
            break
        chain.append(parent)
        seen.add(parent.id)
        parent_id = parent.parent_id
    chain.reverse()
    return chain


def percent_of_parent(item: BudgetItem, items: Iterable[BudgetItem]) -> Optional[float]:
    """Share of the parent's amount taken by *item*, as a percentage.

    Uses the precomputed ``percent_of_parent`` when the catalog supplies one.
    Returns None for roots, missing parents and zero-amount parents.
    """
    if item.percent_of_parent is not None:
        return item.percent_of_parent
    if item.parent_id is None:
        return None
    parent = next((i for i in items if i.id == item.parent_id), None)
    if parent is None or parent.amount <= 0:
        return None
    return item.amount / parent.amount * 100
