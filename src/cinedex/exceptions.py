"""Custom exception hierarchy for cinedex with helpful error messages."""

from __future__ import annotations

from typing import Any


class CinedexError(Exception):
    """Base exception with helpful formatting for all cinedex errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems with their queries or configuration.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class DatabaseError(CinedexError):
    """Database-related errors including missing or unreadable stores."""

    pass


class ConfigurationError(CinedexError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class SearchError(CinedexError):
    """Search errors including query construction and compilation issues."""

    pass


class DirectiveError(SearchError):
    """A query directive could not be parsed or applied."""

    pass


class SubSearchError(SearchError):
    """A nested search failed while resolving one of its roles."""

    def __init__(
        self,
        message: str,
        role: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize sub-search error.

        Args:
            message: Error message
            role: Label of the sub-search role that failed (e.g. "TV show")
            hint: Optional hint
            details: Optional debugging details
        """
        self.role = role
        merged: dict[str, Any] = {"role": role}
        if details:
            merged.update(details)
        super().__init__(message=message, hint=hint, details=merged)


class DecodeError(CinedexError):
    """A result row could not be mapped to a search result.

    This signals a corrupted entity cascade in the compiled query rather
    than bad user input.
    """

    pass


class EntityNotFoundError(CinedexError):
    """No entity of the requested kind exists for an atom."""

    pass


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "db_path": "database_path",
        "db": "database_path",
        "limit": "search_limit",
        "fuzzy": "fuzzy_matching",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )
