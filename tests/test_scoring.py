"""
Tests for engine/scoring.py — impact score golden values.

The numbers here pin the scoring formula; if one changes, selector output
changes for real budget items, so update deliberately.
"""
import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from catalog.models import ComparisonUnit
from engine.scoring import (
    AFFINITY_BONUS,
    impact_score,
    magnitude_penalty,
    normalize_hint,
    range_score,
    roundness_score,
    score_count,
)


class TestRoundness:
    @pytest.mark.parametrize("count, expected", [
        (1, 25),
        (10, 25),
        (1000, 25),
        (3000, 20),
        (40, 20),
        (4500, 14),
        (12, 14),
        (10_700, 8),
        (10_525, 4),
        (10_525.5, 0),
    ])
    def test_ladder(self, count, expected):
        assert roundness_score(count) == expected

    def test_near_one_digit_counts_as_round(self):
        # 2,010 is within 5% of a thousands-place unit of 2,000
        assert roundness_score(2_010) == 20

    @pytest.mark.parametrize("count", [0, 0.5, -3, math.inf, math.nan])
    def test_unscorable(self, count):
        assert roundness_score(count) == 0


class TestRange:
    @pytest.mark.parametrize("count, expected", [
        (1, 25), (100, 25),
        (101, 22), (10_000, 22),
        (10_001, 18), (1_000_000, 18),
        (1_000_001, 12), (1e9, 12),
        (2e9, 5), (1e12, 5),
        (2e12, 0), (0.5, 0),
    ])
    def test_buckets(self, count, expected):
        assert range_score(count) == expected


class TestMagnitudePenalty:
    def test_fractional(self):
        assert magnitude_penalty(0.5) == pytest.approx(10)
        assert magnitude_penalty(0) == pytest.approx(20)

    def test_billions_and_trillions(self):
        assert magnitude_penalty(5e9) == 10
        assert magnitude_penalty(5e12) == 15

    def test_ordinary_counts(self):
        assert magnitude_penalty(1) == 0
        assert magnitude_penalty(999_999_999) == 0


class TestScoreCount:
    @pytest.mark.parametrize("count, expected", [
        (1, 100),
        (100, 100),
        (1000, 97),
        (10_525, 72),
        (3000, 92),
        (2.5e9, 59),
        (5e12, 55),
        (0.5, 40),
        (0, 30),
    ])
    def test_golden_values(self, count, expected):
        assert score_count(count) == pytest.approx(expected)

    def test_clamped_to_range(self):
        for count in (1e-9, 1, 7, 123_456.789, 1e15):
            assert 0 <= score_count(count) <= 100

    def test_non_finite(self):
        assert score_count(math.inf) == 0
        assert score_count(-1) == 0


class TestImpactScore:
    def test_defense_in_f35s(self, catalog):
        assert impact_score(842e9, catalog.get_unit("f35")) == pytest.approx(72)

    def test_category_hint_adds_affinity(self, catalog):
        f35 = catalog.get_unit("f35")
        assert impact_score(842e9, f35, "vehicles") == pytest.approx(72 + AFFINITY_BONUS)
        assert impact_score(842e9, f35, ["Vehicles", "misc"]) == pytest.approx(82)

    def test_unrelated_hint_has_no_effect(self, catalog):
        assert impact_score(842e9, catalog.get_unit("f35"), ["education"]) == pytest.approx(72)

    def test_affinity_applies_after_clamp(self):
        unit = ComparisonUnit("x", "Xs", "X", 10, "misc")
        assert impact_score(10, unit, "misc") == pytest.approx(100 + AFFINITY_BONUS)

    @pytest.mark.parametrize("cost", [0, -1, math.nan])
    def test_invalid_cost_scores_zero(self, cost):
        unit = ComparisonUnit("x", "Xs", "X", cost, "misc")
        assert impact_score(1000, unit) == 0

    def test_deterministic(self, catalog):
        unit = catalog.get_unit("teacher-salary")
        assert impact_score(842e9, unit) == impact_score(842e9, unit)


def test_normalize_hint():
    assert normalize_hint(None) == frozenset()
    assert normalize_hint("") == frozenset()
    assert normalize_hint(" Vehicles ") == frozenset({"vehicles"})
    assert normalize_hint(("a", "", "B")) == frozenset({"a", "b"})
