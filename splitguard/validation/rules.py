"""
Entry Validation Rules

Each rule is a pure function: it looks only at its arguments, performs no
I/O and keeps no state, so it gives the same outcome however often, in
whatever order and from however many threads it is called.

Two kinds of "no":
- Invalid BUSINESS input (a malformed email, splits that don't add up)
  is an expected outcome and comes back as an Invalid RuleOutcome.
- A value of the wrong TYPE (a number where text is required) is a
  caller bug and raises ContractViolationError.

IMPORTANT: Rules never correct their input. A whitespace-only name is
reported (or passed) as-is; it is never trimmed behind the caller's back
unless the caller asks for trimming.
"""

import math
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from splitguard.models.validation import FailureReason, RuleOutcome
from splitguard.money import (
    SPLIT_SUM_TOLERANCE,
    Number,
    absolute_delta,
    monetary_sum,
    within_tolerance,
)
from splitguard.validation.errors import ContractViolationError

# <non-empty>@<non-empty>.<non-empty>, no whitespace, exactly one '@'
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Optional '+', no leading zero, at most 15 digits (E.164)
PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}")

MIN_PASSWORD_LENGTH = 6


# =============================================================================
# TYPE CONTRACT HELPERS
# =============================================================================

def _require_text(rule: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ContractViolationError(rule, "text", value)
    return value


def _require_number(rule: str, value: Any) -> Number:
    # bool is an int subclass; True is not an amount.
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ContractViolationError(rule, "a number", value)
    return value


def _require_numbers(rule: str, values: Any) -> list[Number]:
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        raise ContractViolationError(rule, "a sequence of numbers", values)
    return [_require_number(rule, v) for v in values]


def _require_texts(rule: str, values: Any) -> list[str]:
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        raise ContractViolationError(rule, "a sequence of text values", values)
    return [_require_text(rule, v) for v in values]


def _is_finite(value: Number) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    # ints are exact, and math.isfinite() overflows on very large ones
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _is_nan(value: Number) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _to_float(value: Number) -> float:
    """
    float(value) for reporting in outcome details.

    Values float() refuses come back as NaN (signaling Decimal NaN) or a
    signed infinity (ints beyond float range).
    """
    if _is_nan(value):
        return math.nan
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _observed_sum(amounts: list[Number]) -> float:
    """Sum of the contributions, or NaN when they have no finite float sum."""
    if not all(_is_finite(amount) for amount in amounts):
        return math.nan
    try:
        observed = monetary_sum(amounts)
    except (OverflowError, ValueError):
        # Beyond float range, or opposite infinities from huge Decimals
        return math.nan
    return observed if math.isfinite(observed) else math.nan


# =============================================================================
# CORE RULES
# =============================================================================

def validate_email(email: str) -> RuleOutcome:
    """
    Email must look like <something>@<something>.<something>.

    Only the shape is checked; deliverability is not this rule's concern.
    """
    email = _require_text("email", email)
    if EMAIL_PATTERN.fullmatch(email):
        return RuleOutcome.valid("email")
    return RuleOutcome.invalid(
        "email",
        FailureReason.MALFORMED_EMAIL,
        "Please enter a valid email",
    )


def validate_password(password: str, min_length: int = MIN_PASSWORD_LENGTH) -> RuleOutcome:
    """
    Password must be at least `min_length` characters.

    Length counts Unicode code points, not encoded bytes.
    """
    password = _require_text("password", password)
    if len(password) >= min_length:
        return RuleOutcome.valid("password")
    return RuleOutcome.invalid(
        "password",
        FailureReason.PASSWORD_TOO_SHORT,
        f"Password must be at least {min_length} characters",
        {"length": len(password), "min_length": min_length},
    )


def validate_name(name: str, trim: bool = False) -> RuleOutcome:
    """
    Name must not be empty.

    By default the name is NOT trimmed, so "   " passes. Pass trim=True
    to treat whitespace-only names as empty.
    """
    name = _require_text("name", name)
    if trim:
        name = name.strip()
    if len(name) >= 1:
        return RuleOutcome.valid("name")
    return RuleOutcome.invalid(
        "name",
        FailureReason.EMPTY_NAME,
        "Name is required",
    )


def validate_amount(amount: Number) -> RuleOutcome:
    """
    Amount must be a finite number strictly greater than zero.

    NaN and infinities are rejected explicitly rather than relying on
    comparisons with NaN happening to be false.
    """
    amount = _require_number("amount", amount)
    if _is_finite(amount) and amount > 0:
        return RuleOutcome.valid("amount")
    return RuleOutcome.invalid(
        "amount",
        FailureReason.NON_POSITIVE_AMOUNT,
        "Amount must be greater than zero",
        {"amount": _to_float(amount)},
    )


def validate_splits_sum(
    total: Number,
    splits: Iterable[Number],
    tolerance: float = SPLIT_SUM_TOLERANCE,
) -> RuleOutcome:
    """
    Split contributions must add up to the total, within `tolerance`.

    The comparison is |sum(splits) - total| < tolerance, on absolute
    difference. An empty split set sums to 0. Negative contributions are
    not rejected here (see validate_non_negative_splits).

    A non-finite total or contribution (NaN, infinity, a sum beyond float
    range) never reconciles, and delta is then NaN.
    """
    total = _require_number("splits_sum", total)
    amounts = _require_numbers("splits_sum", splits)

    observed_sum = _observed_sum(amounts)
    total_value = _to_float(total)
    delta = math.nan
    if math.isfinite(observed_sum) and math.isfinite(total_value):
        if within_tolerance(observed_sum, total_value, tolerance):
            return RuleOutcome.valid("splits_sum")
        delta = absolute_delta(observed_sum, total_value)

    return RuleOutcome.invalid(
        "splits_sum",
        FailureReason.SPLITS_SUM_MISMATCH,
        f"Split amounts must sum to total amount (difference: {delta:.2f})",
        {
            "observed_sum": observed_sum,
            "total": total_value,
            "delta": delta,
        },
    )


# =============================================================================
# ENTRY-FORM RULES
# =============================================================================

def validate_phone_number(phone_number: str) -> RuleOutcome:
    """Phone number must be an optional '+' followed by 2-15 digits, no leading zero."""
    phone_number = _require_text("phone_number", phone_number)
    if PHONE_PATTERN.fullmatch(phone_number):
        return RuleOutcome.valid("phone_number")
    return RuleOutcome.invalid(
        "phone_number",
        FailureReason.INVALID_PHONE_NUMBER,
        "Please enter a valid phone number",
    )


def validate_name_length(
    name: str,
    min_length: int = 2,
    max_length: int = 50,
    trim: bool = False,
) -> RuleOutcome:
    """Bounded name length, as required by the profile form."""
    name = _require_text("name_length", name)
    if trim:
        name = name.strip()
    if len(name) < min_length:
        return RuleOutcome.invalid(
            "name_length",
            FailureReason.NAME_TOO_SHORT,
            f"Name must be at least {min_length} characters",
            {"length": len(name), "min_length": min_length},
        )
    if len(name) > max_length:
        return RuleOutcome.invalid(
            "name_length",
            FailureReason.TEXT_TOO_LONG,
            f"Name must be less than {max_length} characters",
            {"length": len(name), "max_length": max_length},
        )
    return RuleOutcome.valid("name_length")


def validate_text_length(text: str, max_length: int, rule: str = "text_length") -> RuleOutcome:
    text = _require_text(rule, text)
    if len(text) <= max_length:
        return RuleOutcome.valid(rule)
    return RuleOutcome.invalid(
        rule,
        FailureReason.TEXT_TOO_LONG,
        f"Must be less than {max_length} characters",
        {"length": len(text), "max_length": max_length},
    )


def validate_non_negative_splits(splits: Iterable[Number]) -> RuleOutcome:
    """
    Every contribution must be >= 0.

    Kept separate from validate_splits_sum: whether negative contributions
    (refunds, adjustments) are allowed is a policy choice made when the
    rule table is assembled. NaN has no sign and is left to the split-sum
    rule.
    """
    amounts = _require_numbers("non_negative_splits", splits)
    negative = [
        i for i, amount in enumerate(amounts)
        if not _is_nan(amount) and amount < 0
    ]
    if not negative:
        return RuleOutcome.valid("non_negative_splits")
    return RuleOutcome.invalid(
        "non_negative_splits",
        FailureReason.NEGATIVE_SPLIT,
        "Split amounts cannot be negative",
        {"indices": negative},
    )


def validate_split_members(
    members: Iterable[str],
    split_users: Iterable[str],
) -> RuleOutcome:
    """Every participant in the splits must be a member of the group."""
    member_set = set(_require_texts("split_members", members))
    outsiders = []
    for user in _require_texts("split_members", split_users):
        if user not in member_set and user not in outsiders:
            outsiders.append(user)
    if not outsiders:
        return RuleOutcome.valid("split_members")
    return RuleOutcome.invalid(
        "split_members",
        FailureReason.SPLIT_MEMBER_NOT_IN_GROUP,
        "All users in splits must be members of the group",
        {"invalid_users": outsiders},
    )
