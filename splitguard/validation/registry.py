"""
Rule Registry

Maps each kind of entry (expense, group, profile, registration, ...) to
the ordered list of named rules evaluated against it.

DESIGN DECISION: A registry is an immutable VALUE, not a process-wide
singleton. `register()` returns a new registry and leaves the original
untouched, so:
- a new entry kind (e.g. recurring expenses) is added without touching
  the existing tables
- tests build exactly the table they need
- one registry can be shared between threads with no locking
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from splitguard.config import ValidationSettings, get_settings
from splitguard.models.entries import (
    ExpenseDraft,
    GroupDraft,
    ProfileDraft,
    RegistrationDraft,
)
from splitguard.models.validation import IssueSeverity, RuleOutcome
from splitguard.validation.errors import DuplicateRuleError, UnknownEntityError
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

EntryCheck = Callable[[Any], RuleOutcome]

EXPENSE = "expense"
GROUP = "group"
PROFILE = "profile"
REGISTRATION = "registration"


@dataclass(frozen=True)
class RuleDefinition:
    """A named rule bound to the field of an entry it inspects."""
    name: str
    field: str
    check: EntryCheck
    severity: IssueSeverity = IssueSeverity.ERROR
    description: str = ""
    # Shown instead of the rule's generic message when set
    message: str = ""


class RuleRegistry:
    """Immutable table of rules per entity type."""

    def __init__(
        self,
        rules: Optional[Mapping[str, Sequence[RuleDefinition]]] = None,
    ):
        self._rules: dict[str, tuple[RuleDefinition, ...]] = {}
        for entity_type, definitions in (rules or {}).items():
            seen: set[str] = set()
            for definition in definitions:
                if definition.name in seen:
                    raise DuplicateRuleError(
                        f"Rule '{definition.name}' registered twice for '{entity_type}'"
                    )
                seen.add(definition.name)
            self._rules[entity_type] = tuple(definitions)

    def register(
        self,
        entity_type: str,
        name: str,
        field: str,
        check: EntryCheck,
        severity: IssueSeverity = IssueSeverity.ERROR,
        description: str = "",
        message: str = "",
    ) -> "RuleRegistry":
        """
        Return a new registry with one more rule for `entity_type`.

        Raises:
            DuplicateRuleError: If `name` is already registered for `entity_type`
        """
        definition = RuleDefinition(
            name=name,
            field=field,
            check=check,
            severity=IssueSeverity(severity),
            description=description,
            message=message,
        )
        rules = dict(self._rules)
        rules[entity_type] = self._rules.get(entity_type, ()) + (definition,)
        return RuleRegistry(rules)

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._rules

    def __len__(self) -> int:
        return sum(len(definitions) for definitions in self._rules.values())

    @property
    def entity_types(self) -> list[str]:
        return list(self._rules)

    def get_rules(self, entity_type: str) -> list[RuleDefinition]:
        """
        Rules registered for an entity type, in registration order.

        Raises:
            UnknownEntityError: If nothing is registered for `entity_type`
        """
        try:
            return list(self._rules[entity_type])
        except KeyError:
            raise UnknownEntityError(
                f"No rules registered for entity type '{entity_type}'"
            ) from None

    def evaluate(
        self,
        entity_type: str,
        entry: Any,
    ) -> list[tuple[RuleDefinition, RuleOutcome]]:
        """Run every rule for `entity_type` against `entry`."""
        return [
            (definition, definition.check(entry))
            for definition in self.get_rules(entity_type)
        ]


# =============================================================================
# DEFAULT RULE TABLE
# =============================================================================

def _when_present(attribute: str, check: Callable[[Any], RuleOutcome], rule: str) -> EntryCheck:
    """Skip an optional field: None counts as valid."""

    def evaluate(entry: Any) -> RuleOutcome:
        value = getattr(entry, attribute)
        if value is None:
            return RuleOutcome.valid(rule)
        return check(value)

    return evaluate


def _not_blank(attribute: str) -> EntryCheck:
    """Flag whitespace-only text. Empty text is left to the required rule."""

    def evaluate(entry: Any) -> RuleOutcome:
        value = getattr(entry, attribute)
        if value == "":
            return RuleOutcome.valid("name")
        return validate_name(value, trim=True)

    return evaluate


def _check_split_members(entry: ExpenseDraft) -> RuleOutcome:
    if entry.group_members is None:
        return RuleOutcome.valid("split_members")
    return validate_split_members(entry.group_members, entry.split_users)


def build_default_registry(settings: Optional[ValidationSettings] = None) -> RuleRegistry:
    """
    Assemble the standard rule table for expenses, groups, profiles and
    registrations.

    Policy switches from settings:
    - trim_names=False keeps the plain length check and adds a
      non-blocking warning for whitespace-only names
    - reject_negative_splits decides whether negative contributions are
      an error or only a warning
    """
    s = settings or get_settings().validation
    trim = s.trim_names
    negative_severity = (
        IssueSeverity.ERROR if s.reject_negative_splits else IssueSeverity.WARNING
    )

    registry = RuleRegistry()

    # Expenses
    registry = registry.register(
        EXPENSE, "description", "description",
        lambda e: validate_name(e.description, trim=trim),
        description="Expense needs a description",
        message="Description is required",
    )
    if not trim:
        registry = registry.register(
            EXPENSE, "description_not_blank", "description",
            _not_blank("description"),
            severity=IssueSeverity.WARNING,
            description="Whitespace-only description",
            message="Description contains only spaces",
        )
    registry = registry.register(
        EXPENSE, "amount", "amount",
        lambda e: validate_amount(e.amount),
        description="Total must be a positive, finite amount",
    )
    registry = registry.register(
        EXPENSE, "splits_sum", "splits",
        lambda e: validate_splits_sum(e.amount, e.split_amounts, s.split_sum_tolerance),
        description="Contributions must reconcile against the total",
    )
    registry = registry.register(
        EXPENSE, "non_negative_splits", "splits",
        lambda e: validate_non_negative_splits(e.split_amounts),
        severity=negative_severity,
        description="Contributions should not be negative",
    )
    registry = registry.register(
        EXPENSE, "split_members", "splits",
        _check_split_members,
        description="Participants must belong to the expense's group",
    )

    # Groups
    registry = registry.register(
        GROUP, "name", "name",
        lambda g: validate_name(g.name, trim=trim),
        description="Group needs a name",
        message="Group name is required",
    )
    if not trim:
        registry = registry.register(
            GROUP, "name_not_blank", "name",
            _not_blank("name"),
            severity=IssueSeverity.WARNING,
            description="Whitespace-only group name",
            message="Group name contains only spaces",
        )

    # Profiles
    registry = registry.register(
        PROFILE, "name", "name",
        lambda p: validate_name_length(
            p.name,
            min_length=s.profile_name_min_length,
            max_length=s.profile_name_max_length,
            trim=trim,
        ),
    )
    registry = registry.register(
        PROFILE, "email", "email",
        _when_present("email", validate_email, "email"),
    )
    registry = registry.register(
        PROFILE, "bio", "bio",
        _when_present(
            "bio",
            lambda bio: validate_text_length(bio, s.bio_max_length, rule="bio_length"),
            "bio_length",
        ),
    )

    # Registrations
    registry = registry.register(
        REGISTRATION, "name", "name",
        lambda r: validate_name(r.name, trim=trim),
    )
    if not trim:
        registry = registry.register(
            REGISTRATION, "name_not_blank", "name",
            _not_blank("name"),
            severity=IssueSeverity.WARNING,
            message="Name contains only spaces",
        )
    registry = registry.register(
        REGISTRATION, "phone_number", "phone_number",
        lambda r: validate_phone_number(r.phone_number),
    )
    registry = registry.register(
        REGISTRATION, "password", "password",
        lambda r: validate_password(r.password, min_length=s.min_password_length),
    )
    registry = registry.register(
        REGISTRATION, "email", "email",
        _when_present("email", validate_email, "email"),
    )

    return registry


DRAFT_ENTITY_TYPES: dict[type, str] = {
    ExpenseDraft: EXPENSE,
    GroupDraft: GROUP,
    ProfileDraft: PROFILE,
    RegistrationDraft: REGISTRATION,
}
