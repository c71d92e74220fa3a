"""Custom exceptions for policy operations.

The evaluators themselves never raise for missing probe data; these errors
come from loading and validating policy files.
"""


class PolicyError(Exception):
    """Base class for policy-related errors."""

    pass


class PolicyValidationError(PolicyError):
    """Raised when a policy file or mapping fails validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)
