"""Comparison calculator: dollar amount / unit cost -> count and display strings."""

import math
from typing import Optional

from catalog.models import ComparisonCalculation, ComparisonUnit, FormattedComparison
from engine.errors import InvalidUnitCostError
from utils.formatting import format_currency, format_decimal, format_large_number


def _check_inputs(amount: float, unit: ComparisonUnit) -> None:
    cost = unit.cost_per_unit
    if not isinstance(cost, (int, float)) or not math.isfinite(cost) or cost <= 0:
        raise InvalidUnitCostError(unit.id, cost)
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"amount must be a finite number >= 0, got {amount!r}")


def calculate_comparison(amount: float, unit: ComparisonUnit) -> ComparisonCalculation:
    """Count how many *unit* the *amount* buys.

    The count is ``amount / unit.cost_per_unit`` with no rounding; only the
    ``formatted`` string is rounded for display.

    Raises:
        InvalidUnitCostError: the unit's cost is not a positive finite number.
        ValueError: the amount is negative or not finite.
    """
    _check_inputs(amount, unit)
    count = amount / unit.cost_per_unit
    return ComparisonCalculation(
        count=count,
        formatted=f"{format_large_number(count)} {unit.display_name(count)}",
    )


def format_comparison_result(amount: float, unit: ComparisonUnit,
                             count: Optional[float] = None) -> FormattedComparison:
    """Build the full display record for *amount* against *unit*.

    Example::

        >>> r = format_comparison_result(842e9, f35)
        >>> r.display_string
        '10,525 F-35 Fighter Jets'
    """
    if count is None:
        count = calculate_comparison(amount, unit).count
    formatted_count = format_large_number(count)
    unit_name = unit.display_name(count)
    return FormattedComparison(
        amount=amount,
        unit=unit,
        count=count,
        formatted_count=formatted_count,
        unit_name=unit_name,
        display_string=f"{formatted_count} {unit_name}",
        icon=unit.icon,
    )


def to_comparison_result(calculation: ComparisonCalculation, unit: ComparisonUnit,
                         amount: float) -> dict:
    """Flat dict shape used by embeds and share cards."""
    return {
        "unitCount": calculation.count,
        "formatted": calculation.formatted,
        "unit": unit,
        "dollarAmount": amount,
    }


def create_formula(amount: float, unit: ComparisonUnit, count: Optional[float] = None) -> str:
    """Human-readable arithmetic behind a comparison.

    Example: ``"$842B ÷ $80M = 10,525 F-35 Fighter Jets"``
    """
    if count is None:
        count = calculate_comparison(amount, unit).count
    return (
        f"{format_currency(amount)} ÷ {format_currency(unit.cost_per_unit)} = "
        f"{format_decimal(count)} {unit.display_name(count)}"
    )
