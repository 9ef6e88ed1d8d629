"""Integrity checks over raw catalog records.

These checks run on the JSON records before normalization so that every
problem in a table is reported at once, instead of the loader stopping at the
first bad record.
"""

import re
from typing import Any, Iterable, Optional

from utils.config import BUDGET_TIERS, UNIT_CATEGORIES
from utils.validation import (
    ValidationResult,
    is_valid_amount,
    is_valid_fiscal_year,
    is_valid_unit_cost,
)

REQUIRED_BUDGET_FIELDS = ("id", "name", "amount", "tier", "fiscalYear")
REQUIRED_UNIT_FIELDS = ("id", "name", "category")
RECOMMENDED_FIELDS = ("source", "description")

_ID_FORMAT = re.compile(r"^[a-z0-9-]+$")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _field(record: dict, camel: str, snake: Optional[str] = None) -> Any:
    value = record.get(camel)
    if value is None and snake:
        value = record.get(snake)
    return value


def _check_common(result: ValidationResult, record: dict, record_id: str,
                  required: Iterable[str], check: str) -> None:
    """Required fields, id format and recommended metadata."""
    for field in required:
        snake = re.sub(r"([A-Z])", lambda m: "_" + m.group(1).lower(), field)
        if _is_missing(_field(record, field, snake)):
            result.add_issue(check, "error", f"Missing required field: {field}",
                             record_id=record_id, field=field)

    raw_id = record.get("id")
    if isinstance(raw_id, str) and raw_id and not _ID_FORMAT.match(raw_id):
        result.add_issue(check, "warning",
                         f"ID should be lowercase with hyphens only, got: {raw_id}",
                         record_id=record_id, field="id")

    for field in RECOMMENDED_FIELDS:
        if _is_missing(record.get(field)):
            result.add_issue(check, "warning", f"Missing recommended field: {field}",
                             record_id=record_id, field=field)


def _check_duplicates(result: ValidationResult, records: list[dict], check: str) -> None:
    seen: dict[str, int] = {}
    for index, record in enumerate(records):
        record_id = record.get("id")
        if _is_missing(record_id):
            continue
        if record_id in seen:
            result.add_issue(
                check, "error",
                f"Duplicate ID found at indices {seen[record_id]} and {index}",
                record_id=record_id, field="id",
            )
        else:
            seen[record_id] = index


def validate_budget_items(items: Iterable[dict]) -> ValidationResult:
    """Validate raw budget item records.

    Errors: missing required fields, duplicate ids, negative or non-numeric
    amounts, unknown tiers, parent ids that point nowhere.
    Warnings: zero amounts, implausible fiscal years, id format, missing
    source or description.
    """
    records = list(items)
    result = ValidationResult(total_records=len(records))
    known_ids = {r.get("id") for r in records if not _is_missing(r.get("id"))}

    for index, record in enumerate(records):
        record_id = record.get("id") or f"<index {index}>"
        _check_common(result, record, record_id, REQUIRED_BUDGET_FIELDS, "budget_items")

        amount = record.get("amount")
        if amount is not None:
            if not is_valid_amount(amount):
                result.add_issue("budget_items", "error",
                                 f"Amount must be a finite number >= 0, got: {amount!r}",
                                 record_id=record_id, field="amount")
            elif amount == 0:
                result.add_issue("budget_items", "warning",
                                 "Amount is zero; item cannot anchor a comparison",
                                 record_id=record_id, field="amount")

        tier = record.get("tier")
        if not _is_missing(tier) and tier not in BUDGET_TIERS:
            result.add_issue(
                "budget_items", "error",
                f"Invalid tier value: {tier}. Must be one of: {', '.join(sorted(BUDGET_TIERS))}",
                record_id=record_id, field="tier",
            )

        year = _field(record, "fiscalYear", "fiscal_year")
        if year is not None and not is_valid_fiscal_year(year):
            result.add_issue("budget_items", "warning",
                             f"Fiscal year {year!r} seems unreasonable (expected 2000-2100)",
                             record_id=record_id, field="fiscalYear")

        parent_id = _field(record, "parentId", "parent_id")
        if parent_id is not None:
            if parent_id == record.get("id"):
                result.add_issue("budget_items", "error", "Item is its own parent",
                                 record_id=record_id, field="parentId")
            elif parent_id not in known_ids:
                result.add_issue("budget_items", "error",
                                 f"Unknown parentId: {parent_id}",
                                 record_id=record_id, field="parentId")

    _check_duplicates(result, records, "budget_items")
    return result


def validate_comparison_units(units: Iterable[dict]) -> ValidationResult:
    """Validate raw comparison unit records.

    Errors: missing required fields, duplicate ids, costs that are missing,
    zero, negative or not finite, unknown categories.
    Warnings: id format, missing source or description.
    """
    records = list(units)
    result = ValidationResult(total_records=len(records))

    for index, record in enumerate(records):
        record_id = record.get("id") or f"<index {index}>"
        _check_common(result, record, record_id, REQUIRED_UNIT_FIELDS, "comparison_units")

        cost = _field(record, "costPerUnit", "cost_per_unit")
        if cost is None:
            cost = record.get("cost")
        if cost is None:
            result.add_issue("comparison_units", "error",
                             "Missing required field: costPerUnit (or cost)",
                             record_id=record_id, field="costPerUnit")
        elif not is_valid_unit_cost(cost):
            result.add_issue("comparison_units", "error",
                             f"Cost per unit must be a finite number > 0, got: {cost!r}",
                             record_id=record_id, field="costPerUnit")

        category = record.get("category")
        if not _is_missing(category) and category not in UNIT_CATEGORIES:
            result.add_issue("comparison_units", "error",
                             f"Invalid category: {category}",
                             record_id=record_id, field="category")

    _check_duplicates(result, records, "comparison_units")
    return result
