"""String processing utilities for the budget comparison tools."""

import re
from typing import Optional

from utils.patterns import CURRENCY_SYMBOLS, FISCAL_YEAR, WHITESPACE


def safe_float(val, default: float = 0.0) -> float:
    """Safely convert value to float with fallback default.

    Handles:
    - None, empty strings -> default
    - Numeric types -> float
    - Strings with currency symbols, whitespace, commas
    - Invalid input -> default

    Args:
        val: Value to convert (any type)
        default: Value to return on failure (default: 0.0)

    Returns:
        float: Parsed value or default
    """
    if val is None or val == '':
        return default
    if isinstance(val, bool):
        return default
    if isinstance(val, (int, float)):
        return float(val)

    try:
        s = str(val).strip()
        s = CURRENCY_SYMBOLS.sub('', s)
        s = s.replace(',', '').strip()
        return float(s) if s else default
    except (ValueError, TypeError):
        return default


def normalize_whitespace(s: str) -> str:
    """Collapse runs of whitespace to single spaces and strip the ends."""
    if not s:
        return ""
    return WHITESPACE.sub(' ', s).strip()


def normalize_query(query: Optional[str]) -> str:
    """Lower-case and whitespace-normalize a free-text search query."""
    if not query:
        return ""
    return normalize_whitespace(query).lower()


def word_boundary_pattern(term: str) -> re.Pattern:
    """Compile a case-insensitive pattern matching *term* at a word start."""
    return re.compile(r'\b' + re.escape(term), re.IGNORECASE)


def parse_fiscal_year(value) -> Optional[int]:
    """Parse "FY2025", "FY 2025", "2025" or 2025 into an int year."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if value is None:
        return None
    match = FISCAL_YEAR.match(str(value).strip())
    if not match:
        return None
    return int(match.group(1))
