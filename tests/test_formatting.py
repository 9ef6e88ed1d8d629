"""
Unit tests for utils/formatting.py

Tests all public functions: format_currency, format_number, format_count,
format_compact, format_decimal, format_large_number, pluralize,
format_percent, format_ordinal, truncate_text, format_per_capita.
No network or file I/O required.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import (
    format_compact,
    format_count,
    format_currency,
    format_decimal,
    format_large_number,
    format_number,
    format_ordinal,
    format_per_capita,
    format_percent,
    per_capita,
    pluralize,
    truncate_text,
)


# ── format_currency ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("amount, expected", [
    (1_200_000_000, "$1.2B"),
    (842_000_000_000, "$842B"),
    (45_000_000, "$45M"),
    (80_000_000, "$80M"),
    (12_500, "$12.5K"),
    (8_500, "$8,500"),
    (99.99, "$99.99"),
    (0, "$0.00"),
])
def test_format_currency_compact(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_negative_sign_before_symbol():
    assert format_currency(-500_000) == "-$500K"


def test_format_currency_full():
    assert format_currency(1_234_567, compact=False) == "$1,234,567"


def test_format_currency_show_sign():
    assert format_currency(2_000_000, show_sign=True) == "+$2M"
    assert format_currency(0, show_sign=True) == "$0.00"


def test_format_currency_custom_threshold():
    assert format_currency(2_500, k_threshold=1_000) == "$2.5K"


# ── format_number / format_count / format_compact ─────────────────────────────

def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number(99.99) == "99.99"
    assert format_number(2.5) == "2.5"
    assert format_number(-0.001) == "0"


@pytest.mark.parametrize("count, expected", [
    (1_120_000, "1.12M"),
    (194_000, "194K"),
    (2941, "2,941"),
    (-50_000, "-50K"),
])
def test_format_count(count, expected):
    assert format_count(count) == expected


def test_format_compact():
    assert format_compact(1_500_000_000) == "1.5B"
    assert format_compact(1234) == "1.23K"
    assert format_compact(50) == "50"


# ── format_decimal / format_large_number ──────────────────────────────────────

class TestFormatDecimal:
    def test_whole_number_grouped(self):
        assert format_decimal(10525) == "10,525"

    def test_near_whole_drops_decimals(self):
        assert format_decimal(3.001) == "3"

    def test_one_decimal(self):
        assert format_decimal(2.5) == "2.5"

    def test_two_decimals(self):
        assert format_decimal(0.333) == "0.33"


class TestFormatLargeNumber:
    def test_below_million(self):
        assert format_large_number(10_525) == "10,525"

    def test_million(self):
        assert format_large_number(1_500_000) == "1.5 million"

    def test_billion(self):
        assert format_large_number(2_000_000_000) == "2 billion"

    def test_trillion(self):
        assert format_large_number(3.2e12) == "3.2 trillion"


# ── pluralize ─────────────────────────────────────────────────────────────────

class TestPluralize:
    def test_exactly_one_is_singular(self):
        assert pluralize(1, "item") == "item"
        assert pluralize(1.0, "item") == "item"

    def test_other_counts_are_plural(self):
        assert pluralize(0, "item") == "items"
        assert pluralize(2.5, "item") == "items"

    def test_explicit_plural(self):
        assert pluralize(2, "category", "categories") == "categories"


# ── format_percent / format_ordinal / truncate_text ───────────────────────────

def test_format_percent():
    assert format_percent(42.5) == "42.5%"
    assert format_percent(None) == "-"
    assert format_percent(1.234, precision=2) == "1.23%"


@pytest.mark.parametrize("n, expected", [
    (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
    (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (112, "112th"),
])
def test_format_ordinal(n, expected):
    assert format_ordinal(n) == expected


def test_truncate_text():
    assert truncate_text("Long text here", 10) == "Long te..."
    assert truncate_text("Short", 10) == "Short"


# ── per capita ────────────────────────────────────────────────────────────────

def test_format_per_capita():
    assert format_per_capita(842_000_000_000) == "$2,513 per person"


def test_per_capita_small_amount_keeps_cents():
    assert format_per_capita(12_000_000_000) == "$35.82 per person"


def test_per_capita_rejects_non_positive_population():
    with pytest.raises(ValueError):
        per_capita(100, population=0)
