"""Audit logging package."""

from splitguard.audit.logger import (
    ValidationAuditLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["ValidationAuditLogger", "configure_logging", "create_correlation_id"]
