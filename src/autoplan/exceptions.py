"""Custom exceptions for Autoplan."""


class AutoplanError(Exception):
    """Base exception for all Autoplan errors."""

    pass


class ValidationError(AutoplanError):
    """Raised when a task, event, project or plan file fails validation."""

    pass


class ParseError(AutoplanError):
    """Raised when a plan file cannot be read or is not valid YAML."""

    pass
