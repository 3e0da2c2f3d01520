"""
exceptions.py
-------------
Application exception taxonomy.

Every failure in the database layer surfaces as a ``DatabaseException``;
the other kinds are raised by the matching ``Debug.fail_*`` helpers.
"""

from typing import Iterable, Optional


class AppException(Exception):
    """
    Base application error.

    Attributes:
        message: Human-readable message.
        errors: Optional list of detail messages.
    """

    default_message = "Application failed."

    def __init__(self, message: Optional[str] = None, errors: Optional[Iterable[str]] = None):
        self.message = message if message is not None else self.default_message
        self.errors = list(errors) if errors else []
        super().__init__(self.message)

    def get_messages(self) -> list[str]:
        """Return the detailed error messages."""
        return self.errors


class DatabaseException(AppException):
    """Raised for every database-layer failure."""

    default_message = "Database failed."


class ValidationException(AppException):
    default_message = "Validation failed."


class ExecutionException(AppException):
    default_message = "Execution failed."


class ConfigError(AppException):
    """Raised when a configuration set or key cannot be found."""

    default_message = "Configuration error."
