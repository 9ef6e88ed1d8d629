"""Shared utilities for the budget comparisons service."""

# Pattern definitions
from utils.patterns import (
    WHITESPACE,
    CURRENCY_SYMBOLS,
    TRAILING_S,
    FISCAL_YEAR,
)

# String utilities
from utils.strings import (
    safe_float,
    normalize_whitespace,
    normalize_query,
    word_boundary_pattern,
    parse_fiscal_year,
)

# Validation utilities
from utils.validation import (
    ValidationIssue,
    ValidationResult,
    is_valid_fiscal_year,
    is_valid_amount,
    is_valid_unit_cost,
)

# Configuration
from utils.config import (
    Config,
    AppConfig,
    UNIT_CATEGORIES,
    BUDGET_TIERS,
    DISPLAYED_ALTERNATIVES,
    MAX_SEARCH_RESULTS,
)

# Formatting utilities
from utils.formatting import (
    US_POPULATION,
    format_currency,
    format_number,
    format_count,
    format_compact,
    format_decimal,
    format_large_number,
    pluralize,
    format_percent,
    format_ordinal,
    truncate_text,
    per_capita,
    format_per_capita,
)

# In-memory TTL cache
from utils.cache import TTLCache

# Share links
from utils.share import (
    encode_comparison,
    parse_comparison_id,
    comparison_url,
    budget_url,
)

__all__ = [
    # Patterns
    "WHITESPACE",
    "CURRENCY_SYMBOLS",
    "TRAILING_S",
    "FISCAL_YEAR",
    # Strings
    "safe_float",
    "normalize_whitespace",
    "normalize_query",
    "word_boundary_pattern",
    "parse_fiscal_year",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    "is_valid_fiscal_year",
    "is_valid_amount",
    "is_valid_unit_cost",
    # Config
    "Config",
    "AppConfig",
    "UNIT_CATEGORIES",
    "BUDGET_TIERS",
    "DISPLAYED_ALTERNATIVES",
    "MAX_SEARCH_RESULTS",
    # Formatting
    "US_POPULATION",
    "format_currency",
    "format_number",
    "format_count",
    "format_compact",
    "format_decimal",
    "format_large_number",
    "pluralize",
    "format_percent",
    "format_ordinal",
    "truncate_text",
    "per_capita",
    "format_per_capita",
    # Cache
    "TTLCache",
    # Share
    "encode_comparison",
    "parse_comparison_id",
    "comparison_url",
    "budget_url",
]
