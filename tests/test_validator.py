"""Tests for the entry validator."""

import math
from uuid import uuid4

import pytest

from splitguard.audit import ValidationAuditLogger
from splitguard.config import ValidationSettings
from splitguard.models import (
    EntryDraft,
    ExpenseDraft,
    FailureReason,
    GroupDraft,
    IssueSeverity,
    ProfileDraft,
    RegistrationDraft,
    SplitEntry,
)
from splitguard.validation import (
    ContractViolationError,
    EntryValidator,
    RuleRegistry,
    UnknownEntityError,
    build_default_registry,
    validate_name,
)


def _expense(amount=100.0, splits=(("ana", 50.0), ("ben", 50.0)), **kwargs):
    return ExpenseDraft(
        description=kwargs.pop("description", "Groceries"),
        amount=amount,
        paid_by="ana",
        splits=[SplitEntry(user=user, amount=value) for user, value in splits],
        **kwargs,
    )


class TestExpenseValidation:
    """Tests for validating expenses."""

    def test_valid_expense(self, validator):
        report = validator.validate_expense(_expense())
        assert report.is_valid
        assert report.issues == []
        assert report.entity_type == "expense"
        assert report.rules_evaluated == 6

    def test_split_mismatch(self, validator):
        report = validator.validate_expense(_expense(splits=[("ana", 40.0), ("ben", 40.0)]))
        assert not report.is_valid
        assert report.failed_rules == ["splits_sum"]
        issue = report.issues[0]
        assert issue.field == "splits"
        assert issue.details == {"observed_sum": 80.0, "total": 100.0, "delta": 20.0}

    def test_reports_every_failure(self, validator):
        """NaN total fails both the amount rule and the sum rule."""
        report = validator.validate_expense(_expense(amount=math.nan, description=""))
        assert report.reasons == {
            FailureReason.EMPTY_NAME,
            FailureReason.NON_POSITIVE_AMOUNT,
            FailureReason.SPLITS_SUM_MISMATCH,
        }
        assert report.error_count == 3
        assert report.warnings == []

    def test_negative_split_is_warning_by_default(self, validator):
        report = validator.validate_expense(_expense(splits=[("ana", 150.0), ("ben", -50.0)]))
        assert report.is_valid
        assert report.failed_rules == ["non_negative_splits"]
        assert report.warnings == ["Split amounts cannot be negative"]

    def test_negative_split_blocks_when_configured(self):
        validator = EntryValidator(
            registry=build_default_registry(
                ValidationSettings(_env_file=None, reject_negative_splits=True)
            )
        )
        report = validator.validate_expense(_expense(splits=[("ana", 150.0), ("ben", -50.0)]))
        assert not report.is_valid
        assert report.reasons == {FailureReason.NEGATIVE_SPLIT}

    def test_whitespace_description_warns(self, validator):
        report = validator.validate_expense(_expense(description="   "))
        assert report.is_valid
        assert report.failed_rules == ["description_not_blank"]
        assert report.issues[0].severity == IssueSeverity.WARNING
        assert report.warnings == ["Description contains only spaces"]

    def test_opposite_infinite_splits_reported(self, validator):
        report = validator.validate_expense(
            _expense(splits=[("ana", math.inf), ("ben", -math.inf)])
        )
        assert not report.is_valid
        assert report.reasons == {FailureReason.SPLITS_SUM_MISMATCH}
        assert report.failed_rules == ["splits_sum", "non_negative_splits"]

    def test_overflowing_splits_reported(self, validator):
        report = validator.validate_expense(
            _expense(splits=[("ana", 1e308), ("ben", 1e308), ("cy", -1e308)])
        )
        assert report.reasons == {FailureReason.SPLITS_SUM_MISMATCH}
        assert math.isnan(report.issues[0].details["delta"])

    def test_empty_description_reported_once(self, validator):
        report = validator.validate_expense(_expense(description=""))
        assert report.failed_rules == ["description"]
        assert report.issues[0].message == "Description is required"
        summary = validator.get_user_friendly_summary(report)
        assert summary.count("Description is required") == 1
        assert "Name is required" not in summary

    def test_group_member_check(self, validator):
        report = validator.validate_expense(_expense(group_members=["ana"]))
        assert report.reasons == {FailureReason.SPLIT_MEMBER_NOT_IN_GROUP}
        assert report.issues[0].details == {"invalid_users": ["ben"]}

    def test_group_members_satisfied(self, validator):
        assert validator.validate_expense(_expense(group_members=["ana", "ben", "cy"])).is_valid

    def test_configured_tolerance(self):
        validator = EntryValidator(
            registry=build_default_registry(
                ValidationSettings(_env_file=None, split_sum_tolerance=0.5)
            )
        )
        assert validator.validate_expense(_expense(splits=[("ana", 50.0), ("ben", 49.7)])).is_valid


class TestOtherEntries:
    """Tests for groups, profiles and registrations."""

    def test_group_needs_name(self, validator):
        assert validator.validate_group(GroupDraft(name="")).reasons == {FailureReason.EMPTY_NAME}

    def test_group_valid(self, validator):
        assert validator.validate_group(GroupDraft(name="Flatmates", members=["ana"])).is_valid

    def test_profile_optional_fields(self, validator):
        assert validator.validate_profile(ProfileDraft(name="Ana")).is_valid

    def test_profile_bad_email_and_long_bio(self, validator):
        report = validator.validate_profile(
            ProfileDraft(name="Ana", email="ana-at-example", bio="x" * 501)
        )
        assert report.failed_rules == ["email", "bio"]
        assert report.reasons == {FailureReason.MALFORMED_EMAIL, FailureReason.TEXT_TOO_LONG}

    def test_profile_name_too_short(self, validator):
        report = validator.validate_profile(ProfileDraft(name="A"))
        assert report.reasons == {FailureReason.NAME_TOO_SHORT}

    def test_registration_valid(self, validator):
        report = validator.validate_registration(RegistrationDraft(
            name="Ana", phone_number="+14155552671", password="s3cret!",
        ))
        assert report.is_valid

    def test_registration_failures(self, validator):
        report = validator.validate_registration(RegistrationDraft(
            name="Ana", phone_number="555", password="12345", email="bad",
        ))
        assert report.reasons == {
            FailureReason.PASSWORD_TOO_SHORT,
            FailureReason.MALFORMED_EMAIL,
        }

    def test_registration_password_minimum_from_settings(self):
        validator = EntryValidator(
            registry=build_default_registry(
                ValidationSettings(_env_file=None, min_password_length=10)
            )
        )
        report = validator.validate_registration(RegistrationDraft(
            name="Ana", phone_number="12025550123", password="123456789",
        ))
        assert report.reasons == {FailureReason.PASSWORD_TOO_SHORT}


class TestDispatch:
    """Tests for picking rules by entry type."""

    def test_validate_entry_dispatches_on_draft_type(self, validator):
        report = validator.validate_entry(GroupDraft(name="Trip"))
        assert report.entity_type == "group"

    def test_unknown_draft_type(self, validator):
        class PollDraft(EntryDraft):
            question: str

        with pytest.raises(UnknownEntityError):
            validator.validate_entry(PollDraft(question="Pizza?"))

    def test_custom_entity_type(self):
        registry = RuleRegistry().register(
            "category", "label", "label", lambda c: validate_name(c["label"])
        )
        validator = EntryValidator(registry=registry)
        assert validator.validate("category", {"label": "Food"}).is_valid
        assert not validator.validate("category", {"label": ""}).is_valid

    def test_rule_message_overrides_generic_one(self):
        registry = RuleRegistry().register(
            "category", "label", "label", lambda c: validate_name(c["label"]),
            message="Category label is required",
        )
        report = EntryValidator(registry=registry).validate("category", {"label": ""})
        assert report.issues[0].message == "Category label is required"

    def test_contract_violation_propagates(self):
        registry = RuleRegistry().register(
            "category", "label", "label", lambda c: validate_name(c["label"])
        )
        with pytest.raises(ContractViolationError):
            EntryValidator(registry=registry).validate("category", {"label": 7})

    def test_default_registry_from_settings(self, monkeypatch):
        monkeypatch.setenv("SPLITGUARD_MIN_PASSWORD_LENGTH", "8")
        validator = EntryValidator()
        report = validator.validate_registration(RegistrationDraft(
            name="Ana", phone_number="12025550123", password="1234567",
        ))
        assert report.reasons == {FailureReason.PASSWORD_TOO_SHORT}


class TestAuditIntegration:
    """Tests that outcomes reach the audit logger."""

    def test_failed_report_logged(self, registry, recording_logger):
        validator = EntryValidator(
            registry=registry,
            audit_logger=ValidationAuditLogger(recording_logger),
        )
        correlation_id = uuid4()
        validator.validate_expense(
            _expense(splits=[("ana", 10.0), ("ben", 10.0)]),
            correlation_id=correlation_id,
        )
        assert recording_logger.events("warning") == ["validation_failed"]
        assert recording_logger.events("debug") == ["rule_failed"]
        _, _, fields = recording_logger.calls[-1]
        assert fields["correlation_id"] == str(correlation_id)

    def test_logging_failure_does_not_change_outcome(self, registry, failing_logger):
        validator = EntryValidator(
            registry=registry,
            audit_logger=ValidationAuditLogger(failing_logger),
        )
        assert validator.validate_expense(_expense()).is_valid


class TestUserFriendlySummary:
    """Tests for the summary shown to users."""

    def test_all_passed(self, validator):
        report = validator.validate_expense(_expense())
        assert validator.get_user_friendly_summary(report) == "✅ All checks passed."

    def test_errors_listed(self, validator):
        report = validator.validate_expense(_expense(splits=[("ana", 40.0), ("ben", 40.0)]))
        summary = validator.get_user_friendly_summary(report)
        assert "Split amounts must sum to total amount (difference: 20.00)" in summary
        assert summary.endswith("Please fix the issues above before saving.")

    def test_warnings_only(self, validator):
        report = validator.validate_group(GroupDraft(name="  "))
        summary = validator.get_user_friendly_summary(report)
        assert "⚠️ Please double-check:" in summary
        assert "Group name contains only spaces" in summary
        assert "❌" not in summary
        assert summary.endswith("You can still save, but please review.")
