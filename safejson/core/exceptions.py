"""Structured exception hierarchy for the JSON rendering pipeline.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for logging and alerting
- **SafeJSONError**: Base exception with context and cause chaining
- **EncodingError**: Raised when a value cannot be encoded against its descriptor
- **ConfigurationError**: Raised when the plugin is installed with a bad configuration

Request rejections (the legacy JSON hijacking defence) are not exceptions;
they short-circuit into a 403 response and never reach these classes.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the plugin."""

    ENCODING_ERROR = "ENCODING_ERROR"
    """A value could not be encoded against its type descriptor."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """The plugin configuration is invalid."""


class Severity(Enum):
    """Severity levels for plugin errors."""

    LOW = "LOW"
    """Low severity errors that don't significantly impact functionality."""

    MEDIUM = "MEDIUM"
    """Errors that fail a single response but leave the application healthy."""

    HIGH = "HIGH"
    """Errors that prevent the plugin from working at all."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention."""


class SafeJSONError(Exception):
    """Base exception class for all plugin exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Determine if this is an expected error based on severity.

        Returns:
            bool: True if the error is expected (LOW or MEDIUM severity)
        """
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Determine if this error should trigger alerts.

        Returns:
            bool: True if the error should trigger alerts (HIGH or CRITICAL severity)
        """
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message, severity,
                and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class EncodingError(SafeJSONError):
    """Exception raised when a value cannot be encoded.

    Raised for schema/value mismatches under strict flags, for values missing
    a descriptor while ``require_types`` is set, and for non-plain objects that
    can be neither normalized nor converted.

    Args:
        message: Description of the encoding failure
        path: JSON path of the failing value (e.g. ``$.items[2].name``)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        context = dict(context or {})
        if path is not None:
            context["path"] = path
        self.path = path
        super().__init__(
            ErrorCode.ENCODING_ERROR, message, Severity.MEDIUM, context, cause
        )


class ConfigurationError(SafeJSONError):
    """Exception raised when the plugin configuration is invalid.

    Args:
        message: Description of the configuration problem
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.CONFIGURATION_ERROR, message, Severity.HIGH, context, cause
        )
