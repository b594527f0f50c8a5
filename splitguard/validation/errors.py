"""
Programming-error exceptions.

Invalid business input is never raised; it comes back as an Invalid
RuleOutcome. These exceptions signal that the CALLER broke a contract:
wrong argument types, duplicate rule names, unknown entry kinds.
"""


class SplitguardError(Exception):
    """Base exception for splitguard programming errors."""
    pass


class ContractViolationError(SplitguardError, TypeError):
    """A rule received a value of the wrong type (e.g. text where a number is required)."""

    def __init__(self, rule: str, expected: str, value: object):
        self.rule = rule
        self.expected = expected
        self.actual_type = type(value).__name__
        super().__init__(
            f"Rule '{rule}' expects {expected}, got {self.actual_type}"
        )


class RegistryError(SplitguardError):
    """Base exception for rule registry misuse."""
    pass


class DuplicateRuleError(RegistryError, ValueError):
    """A rule name was registered twice for the same entity type."""
    pass


class UnknownEntityError(RegistryError, KeyError):
    """No rules are registered for the requested entity type."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""
