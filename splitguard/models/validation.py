"""
Validation Result Models

A rule never answers with a bare boolean. It answers with a RuleOutcome
that says WHICH rule ran and, on failure, WHY it failed. Callers that
only need the yes/no answer can still write `if validate_email(x): ...`
because RuleOutcome is truthy exactly when valid.

DESIGN DECISION: Failure reasons are a closed enum. Each rule signals
only its own designated reason, so a caller can map reasons to messages
without parsing text.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class FailureReason(str, Enum):
    """
    Why a rule rejected its input.

    One reason per rule; no rule ever reports another rule's reason.
    """
    MALFORMED_EMAIL = "malformed_email"
    PASSWORD_TOO_SHORT = "password_too_short"
    EMPTY_NAME = "empty_name"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    SPLITS_SUM_MISMATCH = "splits_sum_mismatch"

    # Entry-form rules
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    NAME_TOO_SHORT = "name_too_short"
    TEXT_TOO_LONG = "text_too_long"
    NEGATIVE_SPLIT = "negative_split"
    SPLIT_MEMBER_NOT_IN_GROUP = "split_member_not_in_group"


class IssueSeverity(str, Enum):
    """Severity of a reported issue. Only errors block an entry."""
    ERROR = "error"
    WARNING = "warning"


# =============================================================================
# RULE OUTCOME
# =============================================================================

class SplitsSumMismatch(BaseModel):
    """Details of a split set that does not reconcile against its total."""
    model_config = ConfigDict(frozen=True)

    observed_sum: float
    total: float
    delta: float


class RuleOutcome(BaseModel):
    """
    Tagged result of evaluating a single rule: Valid or Invalid(reason).
    """
    model_config = ConfigDict(frozen=True)

    rule: str = Field(
        ...,
        min_length=1,
        description="Name of the rule that produced this outcome"
    )
    is_valid: bool
    reason: Optional[FailureReason] = None
    message: Optional[str] = Field(
        default=None,
        description="Human-readable explanation of the failure"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule-specific failure data (e.g. observed sum and delta)"
    )

    @model_validator(mode='after')
    def validate_tag(self) -> 'RuleOutcome':
        """A valid outcome carries no reason; an invalid one must."""
        if self.is_valid and self.reason is not None:
            raise ValueError("Valid outcome cannot carry a failure reason")
        if not self.is_valid and self.reason is None:
            raise ValueError("Invalid outcome requires a failure reason")
        return self

    @classmethod
    def valid(cls, rule: str) -> 'RuleOutcome':
        return cls(rule=rule, is_valid=True)

    @classmethod
    def invalid(
        cls,
        rule: str,
        reason: FailureReason,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> 'RuleOutcome':
        return cls(
            rule=rule,
            is_valid=False,
            reason=reason,
            message=message,
            details=details or {},
        )

    def __bool__(self) -> bool:
        return self.is_valid

    @property
    def mismatch(self) -> Optional[SplitsSumMismatch]:
        """Typed view of the details of a split-sum failure."""
        if self.reason != FailureReason.SPLITS_SUM_MISMATCH:
            return None
        return SplitsSumMismatch(**self.details)


# =============================================================================
# AGGREGATED REPORT
# =============================================================================

class ValidationIssue(BaseModel):
    """A single failed rule, as reported for an entry."""

    field: str = Field(
        ...,
        description="Field (or aggregate) the rule was evaluated on"
    )
    rule: str = Field(
        ...,
        description="Registered name of the failed rule"
    )
    reason: FailureReason
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: IssueSeverity = IssueSeverity.ERROR
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationReport(BaseModel):
    """
    Result of evaluating every rule registered for one entry.

    Warnings don't block; any error-level issue makes the entry invalid.
    """

    entity_type: str = Field(
        ...,
        description="Kind of entry validated (e.g. 'expense', 'group')"
    )
    validated_at: datetime = Field(
        default_factory=_utcnow
    )
    rules_evaluated: int = Field(
        default=0,
        ge=0,
        description="How many rules ran"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All failed rules, in registration order"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == IssueSeverity.ERROR for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == IssueSeverity.ERROR)

    @property
    def warnings(self) -> list[str]:
        """Messages of the non-blocking issues."""
        return [
            issue.message for issue in self.issues
            if issue.severity == IssueSeverity.WARNING
        ]

    @property
    def failed_rules(self) -> list[str]:
        return [issue.rule for issue in self.issues]

    @property
    def reasons(self) -> set[FailureReason]:
        """Reasons of the blocking issues."""
        return {
            issue.reason for issue in self.issues
            if issue.severity == IssueSeverity.ERROR
        }
