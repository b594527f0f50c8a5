"""
Split Helpers

Build split sets the way the add-expense form does, so they reconcile
against the total under validate_splits_sum.

Shares are computed in Decimal cents. Whatever cent is left over after
dividing evenly goes to the LAST participant, so 100 over three people
becomes [33.33, 33.33, 33.34] rather than three 33.33 shares that fall a
full cent short.
"""

from decimal import ROUND_DOWN, Decimal
from typing import Optional, Sequence

from splitguard.money import CENT, Number, round_to_cents, to_decimal


def _even_shares(total: Decimal, count: int) -> list[Decimal]:
    base = (total / count).quantize(CENT, rounding=ROUND_DOWN)
    shares = [base] * count
    shares[-1] = total - base * (count - 1)
    return shares


def equal_split(total: Number, count: int) -> list[float]:
    """
    Split `total` into `count` cent-rounded shares that sum exactly to it.

    Raises:
        ValueError: If count is less than 1
    """
    if count < 1:
        raise ValueError(f"Cannot split between {count} participants")
    shares = _even_shares(round_to_cents(total), count)
    return [float(share) for share in shares]


def fill_unassigned_splits(
    total: Number,
    amounts: Sequence[Optional[Number]],
) -> list[float]:
    """
    Give every unassigned contribution an equal part of what is left.

    A contribution is unassigned when it is None, zero or negative.
    Assigned contributions are kept (rounded to cents); the remainder
    of `total` is divided evenly over the unassigned ones. When nothing
    is unassigned the amounts are only rounded.

    No reconciliation is attempted: if the assigned amounts already
    exceed the total, the unassigned shares come out negative and the
    split-sum / non-negative rules will report it.
    """
    unassigned = [
        i for i, amount in enumerate(amounts)
        if amount is None or to_decimal(amount) <= 0
    ]
    skipped = set(unassigned)
    result = [
        Decimal(0) if i in skipped else round_to_cents(amount)
        for i, amount in enumerate(amounts)
    ]

    if unassigned:
        remaining = round_to_cents(total) - sum(result, Decimal(0))
        for i, share in zip(unassigned, _even_shares(remaining, len(unassigned))):
            result[i] = share

    return [float(amount) for amount in result]
