"""Impact scorer: how memorable is "amount = N units"?

Score for a count ``n = amount / cost_per_unit``::

    base  = 50 + roundness(n) + range(n)
    base -= 20 * (1 - n)             when n < 1
    base -= 15                       when n >= 1e12
    base -= 10                       when 1e9 <= n < 1e12
    score = clamp(base, 0, 100) + AFFINITY_BONUS if the unit's category is hinted

Roundness (0-25) rewards low-entropy leading digits. A count "has" k
significant digits when rounding it to k digits moves it by at most 5% of one
unit in the k-th digit (10,525 rounds to 10,500 with an error of 25, a quarter
of a unit in the hundreds place, so it does not have 3):

    25  a power of ten (1, 10, 100, ...)
    20  one significant digit (3, 40, 500, ...)
    14  two significant digits (12, 4,500, ...)
     8  three significant digits (10,700, ...)
     4  any other whole number
     0  fractional, below 1, or not finite

Range (0-25) rewards counts a reader can picture:

    25  [1, 100]       22  (100, 1e4]     18  (1e4, 1e6]
    12  (1e6, 1e9]      5  (1e9, 1e12]     0  otherwise

Scores are pure functions of their inputs, which keeps selector ordering
stable across calls.
"""

import math
from typing import Iterable, Optional, Union

from catalog.models import ComparisonUnit

BASE_SCORE = 50
AFFINITY_BONUS = 10
MIN_SCORE = 0
MAX_SCORE = 100

# Fraction of one unit in the last kept digit a count may be off by.
ROUNDNESS_TOLERANCE = 0.05

_SIG_DIGIT_SCORES = ((1, 20), (2, 14), (3, 8))
_POWER_OF_TEN_SCORE = 25
_WHOLE_NUMBER_SCORE = 4

_RANGE_BUCKETS = (
    (100, 25),
    (1e4, 22),
    (1e6, 18),
    (1e9, 12),
    (1e12, 5),
)

CategoryHint = Optional[Union[str, Iterable[str]]]


def _is_power_of_ten(value: float) -> bool:
    exponent = math.log10(value)
    return abs(exponent - round(exponent)) < 1e-9


def roundness_score(count: float) -> int:
    """Reward for counts close to a number with few significant digits."""
    if not math.isfinite(count) or count < 1:
        return 0
    exponent = math.floor(math.log10(count))
    for digits, score in _SIG_DIGIT_SCORES:
        magnitude = 10.0 ** (exponent - digits + 1)
        nearest = round(count / magnitude) * magnitude
        if abs(count - nearest) <= ROUNDNESS_TOLERANCE * magnitude:
            if digits == 1 and _is_power_of_ten(nearest):
                return _POWER_OF_TEN_SCORE
            return score
    if abs(count - round(count)) < 0.01:
        return _WHOLE_NUMBER_SCORE
    return 0


def range_score(count: float) -> int:
    """Reward for counts in the human-graspable range."""
    if not math.isfinite(count) or count < 1:
        return 0
    for upper, score in _RANGE_BUCKETS:
        if count <= upper:
            return score
    return 0


def magnitude_penalty(count: float) -> float:
    """Penalty for fractional counts and astronomically large ones."""
    if count < 1:
        return 20 * (1 - count)
    if count >= 1e12:
        return 15
    if count >= 1e9:
        return 10
    return 0


def normalize_hint(category_hint: CategoryHint) -> frozenset[str]:
    """Accept a single category, an iterable of them, or None."""
    if not category_hint:
        return frozenset()
    if isinstance(category_hint, str):
        return frozenset({category_hint.strip().lower()})
    return frozenset(c.strip().lower() for c in category_hint if c)


def score_count(count: float) -> float:
    """Impact score for a raw count, before category affinity."""
    if not math.isfinite(count) or count < 0:
        return MIN_SCORE
    base = BASE_SCORE + roundness_score(count) + range_score(count) - magnitude_penalty(count)
    return max(MIN_SCORE, min(MAX_SCORE, base))


def impact_score(amount: float, unit: ComparisonUnit,
                 category_hint: CategoryHint = None) -> float:
    """Score how memorable ``amount`` is when expressed in ``unit``.

    Units with an unusable cost score 0 rather than raising, so a bad record
    simply sinks to the bottom of any ranking.
    """
    cost = unit.cost_per_unit
    if not math.isfinite(cost) or cost <= 0:
        return MIN_SCORE
    score = score_count(amount / cost)
    if unit.category in normalize_hint(category_hint):
        score += AFFINITY_BONUS
    return score
