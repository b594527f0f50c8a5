"""
Audit Models for Splitguard

Every validation of an entry produces one audit event, so a rejected
submission can be traced back to the rule that rejected it.

DESIGN DECISION: Events describe outcomes only. They never contain the
raw field values (passwords, emails), just rule names and reasons.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from splitguard.models.validation import ValidationReport


class AuditEventType(str, Enum):
    """Types of events we audit."""
    VALIDATION_PASSED = "validation_passed"
    VALIDATION_FAILED = "validation_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the validation trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what kind of entry is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entry (e.g., 'expense', 'group', 'profile')"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one form submission)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events from validation reports.

    Usage:
        event = AuditEventBuilder.validation_passed(report, correlation_id)
        event = AuditEventBuilder.validation_failed(report, correlation_id)
    """

    @staticmethod
    def validation_passed(
        report: ValidationReport,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_PASSED,
            entity_type=report.entity_type,
            correlation_id=correlation_id,
            description=(
                f"{report.entity_type.capitalize()} passed "
                f"{report.rules_evaluated} rules"
            ),
            details={
                "rules_evaluated": report.rules_evaluated,
                "warnings": len(report.warnings),
            },
        )

    @staticmethod
    def validation_failed(
        report: ValidationReport,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=report.entity_type,
            correlation_id=correlation_id,
            description=(
                f"{report.entity_type.capitalize()} failed validation "
                f"with {report.error_count} errors"
            ),
            details={
                "rules_evaluated": report.rules_evaluated,
                "issues": [
                    {
                        "rule": issue.rule,
                        "field": issue.field,
                        "reason": issue.reason.value,
                        "severity": issue.severity.value,
                    }
                    for issue in report.issues
                ],
            },
        )

    @staticmethod
    def from_report(
        report: ValidationReport,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        if report.is_valid:
            return AuditEventBuilder.validation_passed(report, correlation_id)
        return AuditEventBuilder.validation_failed(report, correlation_id)
