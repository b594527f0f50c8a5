"""
Audit Logger

DESIGN DECISION: Every validated entry leaves one structured log event.
This provides:
1. Traceability of why a submission was rejected
2. Debugging capability when users report "it won't let me save"
3. Rule-failure frequencies without touching the rules themselves

The audit logger:
- Is synchronous, since validation itself is
- Gracefully handles failures (a broken log sink never changes a
  validation outcome or crashes the caller)
- Supports correlation IDs to trace related events
- Never logs raw field values, only rule names and reasons
"""

import logging
import sys
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from splitguard.config import LoggingSettings
from splitguard.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from splitguard.models.validation import ValidationReport


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog over the standard library logger.

    Safe to call more than once; the last call wins.
    """
    settings = settings or LoggingSettings()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.level),
    )
    logging.getLogger().setLevel(getattr(logging, settings.level))

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ValidationAuditLogger:
    """
    Central audit logging for validation outcomes.

    Logs one event per report, plus a debug line per failed rule.
    """

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize audit logger.

        Args:
            logger: structlog-compatible logger. If None, a logger named
                    after this module is used.
        """
        self._logger = logger or structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()
        event_name = log_dict.pop("event_type")

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error(event_name, **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning(event_name, **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug(event_name, **log_dict)
            else:
                self._logger.info(event_name, **log_dict)
        except Exception:
            # Logging must never change a validation outcome
            logging.getLogger(__name__).exception("audit_log_failed")
            return False

        return True

    def log_report(
        self,
        report: ValidationReport,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Log the outcome of validating one entry."""
        for issue in report.issues:
            try:
                self._logger.debug(
                    "rule_failed",
                    entity_type=report.entity_type,
                    rule=issue.rule,
                    field=issue.field,
                    reason=issue.reason.value,
                    severity=issue.severity.value,
                    correlation_id=str(correlation_id) if correlation_id else None,
                )
            except Exception:
                logging.getLogger(__name__).exception("audit_log_failed")
                return False

        return self.log(AuditEventBuilder.from_report(report, correlation_id))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a form submission and pass it through
    every validation of that submission.
    """
    return uuid4()
