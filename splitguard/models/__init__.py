"""
Data Models Package

This package contains all Pydantic models used by Splitguard.
Rule outcomes, reports and entry drafts must conform to these schemas.
"""

from splitguard.models.validation import (
    FailureReason,
    IssueSeverity,
    RuleOutcome,
    SplitsSumMismatch,
    ValidationIssue,
    ValidationReport,
)
from splitguard.models.entries import (
    EntryDraft,
    ExpenseDraft,
    GroupDraft,
    ProfileDraft,
    RegistrationDraft,
    SplitEntry,
)
from splitguard.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Validation models
    "FailureReason",
    "IssueSeverity",
    "RuleOutcome",
    "SplitsSumMismatch",
    "ValidationIssue",
    "ValidationReport",
    # Entry drafts
    "EntryDraft",
    "ExpenseDraft",
    "GroupDraft",
    "ProfileDraft",
    "RegistrationDraft",
    "SplitEntry",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
