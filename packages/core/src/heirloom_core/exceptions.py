"""Custom exceptions for the Heirloom engine.

This module provides a small hierarchy of exception classes for consistent
error handling across the engine. All exceptions inherit from HeirloomError,
making it easy to catch all application-specific errors.

Routine user-interaction outcomes (dropping an asset on a non-heir, deleting
an asset that is still allocated) are not exceptions: the ledger reports them
through its return values. Exceptions are reserved for bad input values and
bad configuration.

Example:
    try:
        amount = parse_amount(raw_text, unit=10_000)
    except ValidationError as e:
        show_form_error(e.field, e.message)
"""

from typing import Any, Optional


class HeirloomError(Exception):
    """Base exception for all Heirloom errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise HeirloomError("Something went wrong", details={"step": "tax"})
        HeirloomError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize HeirloomError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the caller can fix the problem and retry.
                Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(HeirloomError):
    """Error raised when user-provided data fails validation.

    Raised for non-numeric or non-positive asset amounts and for person ids
    that do not exist in the family being edited.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Amount must be a positive whole number",
        ...     field="amount",
        ...     value="-5",
        ...     constraint="> 0",
        ... )
        ValidationError: Amount must be a positive whole number
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True since validation errors typically require
                user input correction.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(HeirloomError):
    """Error raised when configuration is invalid.

    Raised when the tax bracket table is not ascending, lacks a catch-all
    bracket, or has quick-deduction constants that make the tax jump at a
    bracket boundary.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Tax brackets must end with a catch-all bracket",
        ...     config_key="brackets",
        ...     expected="upper_bound=None on the last bracket",
        ... )
        ConfigurationError: Tax brackets must end with a catch-all bracket
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "HeirloomError",
    "ValidationError",
    "ConfigurationError",
]
