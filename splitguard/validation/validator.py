"""
Entry Validator

DESIGN DECISION: The validator runs EVERY rule registered for an entry
and reports every failure, instead of stopping at the first one. Rules
are independent, so evaluation order never changes the outcome; running
them all lets the form highlight each bad field at once.

Severity:
- ERROR issues block the entry (report.is_valid is False)
- WARNING issues are shown but don't block

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the caller decides what to show and whether to save.
"""

from typing import Any, Optional
from uuid import UUID

from splitguard.audit import ValidationAuditLogger
from splitguard.models.entries import (
    EntryDraft,
    ExpenseDraft,
    GroupDraft,
    ProfileDraft,
    RegistrationDraft,
)
from splitguard.models.validation import (
    IssueSeverity,
    ValidationIssue,
    ValidationReport,
)
from splitguard.validation.errors import UnknownEntityError
from splitguard.validation.registry import (
    DRAFT_ENTITY_TYPES,
    EXPENSE,
    GROUP,
    PROFILE,
    REGISTRATION,
    RuleRegistry,
    build_default_registry,
)


class EntryValidator:
    """
    Validates caller-supplied entries against a rule registry.

    Holds no mutable state of its own: the registry is an immutable value
    and the audit logger only writes log lines, so one validator can be
    shared freely between threads.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        audit_logger: Optional[ValidationAuditLogger] = None,
    ):
        """
        Initialize validator.

        Args:
            registry: Rule table to evaluate. If None, the default table
                      built from current settings is used.
            audit_logger: Where outcomes are logged. If None, outcomes
                          are not logged.
        """
        self._registry = registry if registry is not None else build_default_registry()
        self._audit = audit_logger

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    def validate(
        self,
        entity_type: str,
        entry: Any,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationReport:
        """
        Run every rule registered for `entity_type` against `entry`.

        Args:
            entity_type: Registered entity type (e.g. "expense")
            entry: The draft (or any object the registered rules accept)
            correlation_id: Optional ID tying this report to a submission

        Returns:
            ValidationReport with all issues found

        Raises:
            UnknownEntityError: If no rules are registered for entity_type
            ContractViolationError: If a rule receives a wrongly typed value
        """
        issues = []
        evaluated = self._registry.evaluate(entity_type, entry)

        for definition, outcome in evaluated:
            if outcome:
                continue
            issues.append(ValidationIssue(
                field=definition.field,
                rule=definition.name,
                reason=outcome.reason,
                message=definition.message or outcome.message or definition.description,
                severity=definition.severity,
                details=outcome.details,
            ))

        report = ValidationReport(
            entity_type=entity_type,
            rules_evaluated=len(evaluated),
            issues=issues,
        )

        if self._audit is not None:
            self._audit.log_report(report, correlation_id)

        return report

    def validate_entry(
        self,
        entry: EntryDraft,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationReport:
        """Validate a draft, picking the entity type from its class."""
        for draft_type, entity_type in DRAFT_ENTITY_TYPES.items():
            if isinstance(entry, draft_type):
                return self.validate(entity_type, entry, correlation_id)
        raise UnknownEntityError(
            f"No entity type known for draft {type(entry).__name__}"
        )

    def validate_expense(
        self,
        expense: ExpenseDraft,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationReport:
        return self.validate(EXPENSE, expense, correlation_id)

    def validate_group(
        self,
        group: GroupDraft,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationReport:
        return self.validate(GROUP, group, correlation_id)

    def validate_profile(
        self,
        profile: ProfileDraft,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationReport:
        return self.validate(PROFILE, profile, correlation_id)

    def validate_registration(
        self,
        registration: RegistrationDraft,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationReport:
        return self.validate(REGISTRATION, registration, correlation_id)

    def get_user_friendly_summary(
        self,
        report: ValidationReport,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what the form shows above the submit button.
        """
        if report.is_valid and not report.warnings:
            return "✅ All checks passed."

        lines = []

        if report.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in report.issues:
                if issue.severity == IssueSeverity.ERROR:
                    lines.append(f"   • {issue.message}")

        if report.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please double-check:")
            for warning in report.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if report.is_valid:
            lines.append("You can still save, but please review.")
        else:
            lines.append("Please fix the issues above before saving.")

        return "\n".join(lines)
