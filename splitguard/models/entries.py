"""
Entry Draft Models

Drafts carry raw form input from the caller to the validator. They are
PROPOSED data, not verified.

DESIGN DECISION: Drafts enforce the type contract only (strict mode, so a
number typed into a name field is a programming error, not an "invalid
name"). They deliberately do NOT strip whitespace or bound values:
business rules are the validator's job, and a draft that silently fixed
its input would hide the very issues the rules are meant to report.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryDraft(BaseModel):
    """Base for all caller-supplied entries."""
    model_config = ConfigDict(strict=True, frozen=True)


class SplitEntry(EntryDraft):
    """One participant's contribution towards an expense."""

    user: str = Field(
        ...,
        description="Participant identifier"
    )
    amount: float = Field(
        ...,
        description="Contribution in currency units"
    )


class ExpenseDraft(EntryDraft):
    """
    A shared expense as entered in the add-expense form.

    `group_members` is None for an expense outside any group; when set,
    every participant in `splits` must be one of them.
    """

    description: str
    amount: float
    paid_by: str
    splits: list[SplitEntry] = Field(default_factory=list)
    group_members: Optional[list[str]] = Field(
        default=None,
        description="Members of the group this expense belongs to, if any"
    )
    category: str = "Other"

    @property
    def split_amounts(self) -> list[float]:
        return [split.amount for split in self.splits]

    @property
    def split_users(self) -> list[str]:
        return [split.user for split in self.splits]


class GroupDraft(EntryDraft):
    """A group as entered in the create-group form."""

    name: str
    description: Optional[str] = None
    members: list[str] = Field(default_factory=list)


class ProfileDraft(EntryDraft):
    """Editable profile fields."""

    name: str
    email: Optional[str] = None
    bio: Optional[str] = None


class RegistrationDraft(EntryDraft):
    """Sign-up form input."""

    name: str
    phone_number: str
    password: str
    email: Optional[str] = None
