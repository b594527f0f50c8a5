"""Validation package."""

from splitguard.validation.errors import (
    ContractViolationError,
    DuplicateRuleError,
    RegistryError,
    SplitguardError,
    UnknownEntityError,
)
from splitguard.validation.rules import (
    validate_amount,
    validate_email,
    validate_name,
    validate_name_length,
    validate_non_negative_splits,
    validate_password,
    validate_phone_number,
    validate_split_members,
    validate_splits_sum,
    validate_text_length,
)
from splitguard.validation.splits import equal_split, fill_unassigned_splits
from splitguard.validation.registry import (
    EXPENSE,
    GROUP,
    PROFILE,
    REGISTRATION,
    RuleDefinition,
    RuleRegistry,
    build_default_registry,
)
from splitguard.validation.validator import EntryValidator

__all__ = [
    # Errors
    "ContractViolationError",
    "DuplicateRuleError",
    "RegistryError",
    "SplitguardError",
    "UnknownEntityError",
    # Rules
    "validate_amount",
    "validate_email",
    "validate_name",
    "validate_name_length",
    "validate_non_negative_splits",
    "validate_password",
    "validate_phone_number",
    "validate_split_members",
    "validate_splits_sum",
    "validate_text_length",
    # Split helpers
    "equal_split",
    "fill_unassigned_splits",
    # Registry
    "EXPENSE",
    "GROUP",
    "PROFILE",
    "REGISTRATION",
    "RuleDefinition",
    "RuleRegistry",
    "build_default_registry",
    # Validator
    "EntryValidator",
]
