"""
Money / tolerance helpers.

Centralized so the split-sum rule, the split helpers and the settings
defaults share one definition of rounding slack and cent rounding.

The tolerance is ABSOLUTE: it absorbs binary floating-point error from
summing cent values, it is not a business allowance for underpayment.
For very large totals (high-magnitude currencies) a fixed absolute
bound becomes tighter than float precision can honour; callers in that
regime should pass amounts as Decimal or scale to minor units.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

Number = Union[int, float, Decimal]

# Maximum absolute deviation between summed splits and the total.
SPLIT_SUM_TOLERANCE = 0.01

CENT = Decimal("0.01")


def monetary_sum(values: Iterable[Number]) -> float:
    """
    Sum monetary values.

    Uses math.fsum, which is correctly rounded and therefore independent
    of the order of the values. An empty iterable sums to 0.0.

    Raises:
        OverflowError: If a value or a partial sum is beyond float range
        ValueError: If the values hold both +inf and -inf
    """
    return math.fsum(float(v) for v in values)


def absolute_delta(observed: Number, expected: Number) -> float:
    """Absolute difference between two amounts."""
    return abs(float(observed) - float(expected))


def within_tolerance(
    observed: Number,
    expected: Number,
    tolerance: float = SPLIT_SUM_TOLERANCE,
) -> bool:
    """True when |observed - expected| is strictly below the tolerance."""
    return absolute_delta(observed, expected) < tolerance


def to_decimal(value: Number) -> Decimal:
    """Convert via str() so 0.1 becomes Decimal('0.1'), not its binary expansion."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to_cents(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
