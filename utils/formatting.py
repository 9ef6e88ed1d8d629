"""Output formatting utilities for budget comparisons.

Provides reusable functions for:
- Formatting currency amounts (full and compact K/M/B notation)
- Formatting unit counts for comparison strings ("1.5 million", "10,525")
- Pluralization of unit names
- Percentages, ordinals, text truncation and per-capita breakdowns

All functions are pure and locale-fixed to en-US grouping (comma thousands
separator, period decimal point).
"""

from typing import Optional

# Census Bureau resident population estimate, used for per-capita figures.
US_POPULATION = 335_000_000

_BILLION = 1_000_000_000
_MILLION = 1_000_000
_TRILLION = 1_000_000_000_000


def _format_compact_value(value: float) -> str:
    """Render a scaled value with up to 2 decimals, trailing zeros stripped.

    Examples:
        _format_compact_value(1.20) -> "1.2"
        _format_compact_value(45.00) -> "45"
        _format_compact_value(1.23) -> "1.23"
    """
    formatted = f"{value:.2f}"
    if formatted.endswith(".00"):
        return formatted[:-3]
    if formatted.endswith("0"):
        return formatted[:-1]
    return formatted


def _compact_suffix(abs_value: float, k_threshold: float) -> Optional[str]:
    """Return "<value><suffix>" for *abs_value*, or None below *k_threshold*."""
    if abs_value >= _BILLION:
        return f"{_format_compact_value(abs_value / _BILLION)}B"
    if abs_value >= _MILLION:
        return f"{_format_compact_value(abs_value / _MILLION)}M"
    if abs_value >= k_threshold:
        return f"{_format_compact_value(abs_value / 1_000)}K"
    return None


def format_currency(amount: float, compact: bool = True,
                    show_cents: Optional[bool] = None, symbol: str = "$",
                    show_sign: bool = False,
                    k_threshold: float = 10_000) -> str:
    """Format a dollar amount for display.

    Args:
        amount: Amount in dollars (may be negative)
        compact: Use B/M/K suffixes for large values (default: True)
        show_cents: Show two decimals below the compaction threshold.
            Defaults to True only when ``abs(amount) < 1000``.
        symbol: Currency symbol (default: "$")
        show_sign: Prefix positive amounts with "+" (default: False)
        k_threshold: Smallest value rendered with a K suffix (default: 10,000)

    Returns:
        Formatted string. The minus sign always precedes the symbol.

    Examples:
        format_currency(1_200_000_000) -> "$1.2B"
        format_currency(45_000_000) -> "$45M"
        format_currency(8_500) -> "$8,500"
        format_currency(-500_000) -> "-$500K"
        format_currency(99.99) -> "$99.99"
        format_currency(1_234_567, compact=False) -> "$1,234,567"
    """
    if show_cents is None:
        show_cents = abs(amount) < 1000

    if amount < 0:
        sign = "-"
    elif show_sign and amount > 0:
        sign = "+"
    else:
        sign = ""
    abs_amount = abs(amount)

    if compact:
        suffixed = _compact_suffix(abs_amount, k_threshold)
        if suffixed is not None:
            return f"{sign}{symbol}{suffixed}"

    decimals = 2 if show_cents else 0
    return f"{sign}{symbol}{abs_amount:,.{decimals}f}"


def format_number(n: float) -> str:
    """Format a number with thousands separators and at most 2 decimals.

    Examples:
        format_number(1234567) -> "1,234,567"
        format_number(99.99) -> "99.99"
        format_number(2.5) -> "2.5"
    """
    formatted = f"{n:,.2f}"
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    if formatted == "-0":
        return "0"
    return formatted


def format_count(count: float) -> str:
    """Format a count with compact notation from 10,000 upward.

    Examples:
        format_count(1_120_000) -> "1.12M"
        format_count(194_000) -> "194K"
        format_count(2941) -> "2,941"
        format_count(-50_000) -> "-50K"
    """
    sign = "-" if count < 0 else ""
    abs_count = abs(count)
    suffixed = _compact_suffix(abs_count, 10_000)
    if suffixed is not None:
        return f"{sign}{suffixed}"
    return f"{sign}{int(round(abs_count)):,}"


def format_compact(n: float) -> str:
    """Compact notation with a K suffix from 1,000 upward.

    Examples:
        format_compact(1_500_000_000) -> "1.5B"
        format_compact(1234) -> "1.23K"
        format_compact(50) -> "50"
    """
    sign = "-" if n < 0 else ""
    abs_n = abs(n)
    suffixed = _compact_suffix(abs_n, 1_000)
    if suffixed is not None:
        return f"{sign}{suffixed}"
    return f"{sign}{int(round(abs_n))}"


def format_decimal(num: float) -> str:
    """Format a count, dropping decimals that carry no information.

    Near-whole numbers render as integers, numbers close to one decimal place
    render with one, everything else with two. Thousands are comma grouped.

    Examples:
        format_decimal(10525) -> "10,525"
        format_decimal(2.5) -> "2.5"
        format_decimal(0.333) -> "0.33"
    """
    if abs(num - round(num)) < 0.005:
        return f"{round(num):,}"
    rounded1 = round(num * 10) / 10
    if abs(num - rounded1) < 0.005:
        return f"{rounded1:,.1f}"
    return f"{num:,.2f}"


def format_large_number(num: float) -> str:
    """Format a unit count with a word suffix from one million upward.

    Examples:
        format_large_number(10_525) -> "10,525"
        format_large_number(1_500_000) -> "1.5 million"
        format_large_number(2_000_000_000) -> "2 billion"
        format_large_number(3.2e12) -> "3.2 trillion"
    """
    abs_num = abs(num)
    if abs_num >= _TRILLION:
        return f"{format_decimal(num / _TRILLION)} trillion"
    if abs_num >= _BILLION:
        return f"{format_decimal(num / _BILLION)} billion"
    if abs_num >= _MILLION:
        return f"{format_decimal(num / _MILLION)} million"
    return format_decimal(num)


def pluralize(count: float, singular: str, plural: Optional[str] = None) -> str:
    """Pick the singular or plural form of a word for *count*.

    Only an exact count of 1 is singular; 0 and fractional counts are plural.

    Examples:
        pluralize(1, "item") -> "item"
        pluralize(5, "item") -> "items"
        pluralize(2, "category", "categories") -> "categories"
    """
    if count == 1:
        return singular
    return plural or f"{singular}s"


def format_percent(value: Optional[float], precision: int = 1) -> str:
    """Format a percentage for display.

    Args:
        value: Percentage value (0.0 to 100.0)
        precision: Decimal places (default: 1)

    Examples:
        format_percent(42.5) -> "42.5%"
        format_percent(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:.{precision}f}%"


def format_ordinal(n: int) -> str:
    """Format an integer with its English ordinal suffix (1st, 2nd, 11th)."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length with ellipsis.

    Examples:
        truncate_text("Long text here", 10) -> "Long te..."
        truncate_text("Short", 10) -> "Short"
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def per_capita(amount: float, population: int = US_POPULATION) -> float:
    """Return *amount* divided evenly across *population* people."""
    if population <= 0:
        raise ValueError(f"population must be positive, got {population}")
    return amount / population


def format_per_capita(amount: float, population: int = US_POPULATION) -> str:
    """Per-person share of *amount*, e.g. ``"$2,513 per person"``."""
    share = per_capita(amount, population)
    return f"{format_currency(share, compact=False)} per person"
