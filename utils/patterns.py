"""Pre-compiled regex patterns for the budget comparison tools.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import WHITESPACE, TRAILING_S

    name = TRAILING_S.sub("", "Eiffel Towers")
"""

import re

# Whitespace normalization: multiple spaces/tabs/newlines
WHITESPACE = re.compile(r'\s+')

# Currency symbols for stripping during numeric conversion
CURRENCY_SYMBOLS = re.compile(r'[\$€£¥₹₽]')

# Trailing plural "s" used to derive a singular unit name
TRAILING_S = re.compile(r's$')

# Four-digit fiscal year, optionally prefixed with "FY"
FISCAL_YEAR = re.compile(r'^(?:FY\s*)?(\d{4})$', re.IGNORECASE)
